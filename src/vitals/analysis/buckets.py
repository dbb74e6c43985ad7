"""
Bucket aggregation: partition a window of days into equal-width chunks and
reduce each chunk to one labelled value.

Two policies:
  - SUM: flow metrics (calories, steps, distance, water). Missing days count
    as 0, so an empty chunk is 0.
  - AVERAGE_IGNORING_ZERO: stock metrics (body weight). Zero/missing days are
    skipped entirely (they don't count toward the denominator). A chunk with
    no positive value repeats the last chunk that had one, or `fallback` if
    no earlier chunk did.

Labels come from the LAST day of each chunk, so the right-most label of a
series ending today always names today (or today's month).
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Sequence

from vitals.analysis.timeseries import MetricPoint
from vitals.errors import InvalidArgument


class AggregationPolicy(str, Enum):
    SUM = "sum"
    AVERAGE_IGNORING_ZERO = "average_ignoring_zero"


class LabelFormat(str, Enum):
    DAY_OF_WEEK = "day_of_week"  # "Mon"
    MONTH_DAY = "month_day"      # "Mar 10"
    MONTH_YEAR = "month_year"    # "Mar 24"


@dataclass(frozen=True)
class TimeWindow:
    """Span, bucket width and label granularity for one chart query."""

    span_days: int
    bucket_days: int
    label_format: LabelFormat

    def __post_init__(self):
        if self.span_days < 1:
            raise InvalidArgument(f"span_days must be >= 1, got {self.span_days}")
        if self.bucket_days < 1:
            raise InvalidArgument(f"bucket_days must be >= 1, got {self.bucket_days}")

    @property
    def bucket_count(self) -> int:
        return -(-self.span_days // self.bucket_days)


@dataclass(frozen=True)
class Bucket:
    """One aggregated, labelled point in a chart-ready series."""

    label: str
    aggregated_value: float


def format_label(day: date, label_format: LabelFormat) -> str:
    """
    Format a bucket label.

    Uses %a/%b for the abbreviated names and builds the day/year numbers by
    hand so the output has no zero padding on any platform.
    """
    if label_format is LabelFormat.DAY_OF_WEEK:
        return day.strftime("%a")
    if label_format is LabelFormat.MONTH_DAY:
        return f"{day.strftime('%b')} {day.day}"
    if label_format is LabelFormat.MONTH_YEAR:
        return f"{day.strftime('%b')} {day.year % 100:02d}"
    raise InvalidArgument(f"Unknown label format: {label_format!r}")


def chunk_window(window: Sequence[date], bucket_days: int) -> List[List[date]]:
    """Split `window` into consecutive chunks of `bucket_days`; the last may be short."""
    if bucket_days < 1:
        raise InvalidArgument(f"bucket_days must be >= 1, got {bucket_days}")
    return [list(window[i:i + bucket_days]) for i in range(0, len(window), bucket_days)]


def aggregate(
    points: Sequence[MetricPoint],
    window: Sequence[date],
    bucket_days: int,
    policy: AggregationPolicy,
    label_format: LabelFormat,
    fallback: float = 0.0,
) -> List[Bucket]:
    """
    Group `points` into buckets over `window`, oldest bucket first.

    Args:
        points: raw daily points, any order. Points outside the window are ignored.
        window: ascending calendar days (see select_window).
        bucket_days: days per bucket (>= 1). Larger than the window → one bucket.
        policy: SUM or AVERAGE_IGNORING_ZERO.
        label_format: granularity of the label taken from each chunk's last day.
        fallback: AVERAGE_IGNORING_ZERO value used until the first chunk
                  with a positive reading. Ignored for SUM.

    Returns:
        ceil(len(window) / bucket_days) Buckets.

    Raises:
        InvalidArgument: empty window or non-positive bucket_days.
    """
    if not window:
        raise InvalidArgument("window must contain at least one day")
    chunks = chunk_window(window, bucket_days)

    by_day: Dict[date, float] = {p.day: p.value for p in points}

    buckets: List[Bucket] = []
    last_valid: Optional[float] = None
    for chunk in chunks:
        values = [by_day[d] for d in chunk if d in by_day]

        if policy is AggregationPolicy.SUM:
            value = float(sum(values))
        elif policy is AggregationPolicy.AVERAGE_IGNORING_ZERO:
            positive = [v for v in values if v > 0]
            if positive:
                value = sum(positive) / len(positive)
                last_valid = value
            elif last_valid is not None:
                value = last_valid
            else:
                value = float(fallback)
        else:
            raise InvalidArgument(f"Unknown aggregation policy: {policy!r}")

        buckets.append(Bucket(label=format_label(chunk[-1], label_format), aggregated_value=value))

    return buckets
