"""Rolling date windows ending on an anchor day."""
from datetime import date, timedelta
from typing import List, Optional

from vitals.errors import InvalidArgument


def select_window(span_days: int, anchor: Optional[date] = None) -> List[date]:
    """
    Return `span_days` consecutive calendar days ending at `anchor`, inclusive.

    Days are in ascending order: [anchor - span_days + 1, ..., anchor].
    Days with no data are still included; the window knows nothing of the store.

    Args:
        span_days: number of days in the window (>= 1).
        anchor: last day of the window. Defaults to today (local date).
                Pass `today - 1` for "yesterday and the days before".

    Raises:
        InvalidArgument: if span_days is not positive.
    """
    if span_days <= 0:
        raise InvalidArgument(f"span_days must be positive, got {span_days}")
    if anchor is None:
        anchor = date.today()
    start = anchor - timedelta(days=span_days - 1)
    return [start + timedelta(days=i) for i in range(span_days)]
