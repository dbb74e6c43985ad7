"""
Chart series by name: the one place that knows how each dashboard chart
is fed.

    flow metrics  → SUM, fallback 0
    weight        → AVERAGE_IGNORING_ZERO, fallback = resolved weight
    bmr           → weight series mapped through compute_bmr

Returned buckets are in display units (distance in km).
"""
from datetime import date
from typing import List, Optional

from sqlmodel import Session

from vitals.analysis.buckets import Bucket
from vitals.analysis.series import Timeframe, build_bmr_series, build_metric_series, to_display_units
from vitals.analysis.timeseries import MetricKind
from vitals.config import Settings
from vitals.db.profile_store import get_profile_row, resolve_fallback_weight, resolve_profile
from vitals.errors import InvalidArgument

BMR_SERIES = "bmr"

SERIES_TITLES = {
    MetricKind.FOOD_ENERGY.value: "Calories Eaten",
    MetricKind.BURNED_ENERGY.value: "Calories Burned",
    MetricKind.STEPS.value: "Steps",
    MetricKind.DISTANCE.value: "Distance (km)",
    MetricKind.WATER.value: "Water",
    MetricKind.WEIGHT.value: "Weight (kg)",
    BMR_SERIES: "BMR",
}


def series_names() -> List[str]:
    return [m.value for m in MetricKind] + [BMR_SERIES]


def build_chart_series(
    series: str,
    timeframe: Timeframe,
    session: Session,
    store,
    settings: Settings,
    anchor: Optional[date] = None,
) -> List[Bucket]:
    """
    Build the display series for a chart.

    Args:
        series: a MetricKind value or "bmr".
        timeframe: Week / Month / Year preset.
        session: DB session for the profile lookup.
        store: HistoryStore (or anything with read/latest).
        settings: app settings (user id and defaults).
        anchor: last day of the window; defaults to today.

    Raises:
        InvalidArgument: unknown series name.
        StoreUnavailable: propagated from the store.
    """
    if series == BMR_SERIES:
        row = get_profile_row(session, settings.user_id)
        tw = timeframe.window
        return build_bmr_series(
            tw.span_days,
            tw.bucket_days,
            tw.label_format,
            store,
            resolve_profile(row, settings),
            resolve_fallback_weight(row, store, settings),
            anchor=anchor,
        )

    try:
        metric = MetricKind(series)
    except ValueError:
        raise InvalidArgument(f"Unknown series: {series!r}") from None

    fallback = 0.0
    if metric is MetricKind.WEIGHT:
        fallback = resolve_fallback_weight(get_profile_row(session, settings.user_id), store, settings)

    buckets = build_metric_series(metric, timeframe, store, fallback=fallback, anchor=anchor)
    return to_display_units(metric, buckets)
