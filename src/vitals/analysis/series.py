"""
Chart series builder: store → window → buckets → (optional) BMR.

One parameterized entry point serves every metric and every period. The
store is injected; anything with `read(metric, start, end) -> List[MetricPoint]`
works (HistoryStore in production, a fake in tests). Builders never write.

Period presets used by the charts:

    Week   7 days,  1-day buckets,  "Mon"
    Month  30 days, 5-day buckets,  "Mar 10"
    Year   365 days, 90-day buckets, "Mar 24"
"""
import logging
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from vitals.analysis.bmr import Profile, compute_bmr
from vitals.analysis.buckets import AggregationPolicy, Bucket, LabelFormat, TimeWindow, aggregate
from vitals.analysis.timeseries import MetricKind
from vitals.analysis.window import select_window

logger = logging.getLogger(__name__)

METERS_PER_KM = 1000.0

# Stock metrics (weight) average their valid samples; flow metrics accumulate
DEFAULT_POLICIES: Dict[MetricKind, AggregationPolicy] = {
    m: AggregationPolicy.AVERAGE_IGNORING_ZERO if m.is_stock else AggregationPolicy.SUM
    for m in MetricKind
}


class Timeframe(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def window(self) -> TimeWindow:
        return _TIMEFRAME_WINDOWS[self]


_TIMEFRAME_WINDOWS = {
    Timeframe.WEEK: TimeWindow(span_days=7, bucket_days=1, label_format=LabelFormat.DAY_OF_WEEK),
    Timeframe.MONTH: TimeWindow(span_days=30, bucket_days=5, label_format=LabelFormat.MONTH_DAY),
    Timeframe.YEAR: TimeWindow(span_days=365, bucket_days=90, label_format=LabelFormat.MONTH_YEAR),
}


def build_series(
    metric: MetricKind,
    span_days: int,
    bucket_days: int,
    policy: AggregationPolicy,
    label_format: LabelFormat,
    store,
    fallback: float,
    anchor: Optional[date] = None,
) -> List[Bucket]:
    """
    Build an ordered bucket series for one metric.

    Args:
        metric: which metric to read from the store.
        span_days, bucket_days, label_format: window shape (see TimeWindow).
        policy: SUM or AVERAGE_IGNORING_ZERO.
        store: history store exposing read(metric, start, end).
        fallback: value for AVERAGE_IGNORING_ZERO buckets before any valid
                  reading. Caller-specific (e.g. the profile's current weight).
        anchor: last day of the window; defaults to today.

    Returns:
        Buckets oldest first, ready to plot left to right.

    Raises:
        InvalidArgument: non-positive span_days or bucket_days.
        StoreUnavailable: propagated unchanged from the store.
    """
    window = select_window(span_days, anchor=anchor)
    points = store.read(metric, window[0], window[-1])
    logger.debug(
        "Series %s %s→%s: %d points, bucket=%dd",
        metric.value, window[0], window[-1], len(points), bucket_days,
    )
    return aggregate(points, window, bucket_days, policy, label_format, fallback=fallback)


def build_bmr_series(
    span_days: int,
    bucket_days: int,
    label_format: LabelFormat,
    store,
    profile: Profile,
    fallback_weight: float,
    anchor: Optional[date] = None,
) -> List[Bucket]:
    """
    BMR per bucket, derived pointwise from the weight series.

    The weight series is aggregated with AVERAGE_IGNORING_ZERO and each
    bucket's value is mapped through compute_bmr; labels are unchanged.
    A non-positive `fallback_weight` with no stored weight raises
    InvalidArgument from compute_bmr.
    """
    weights = build_series(
        MetricKind.WEIGHT,
        span_days,
        bucket_days,
        AggregationPolicy.AVERAGE_IGNORING_ZERO,
        label_format,
        store,
        fallback=fallback_weight,
        anchor=anchor,
    )
    return [Bucket(label=b.label, aggregated_value=compute_bmr(b.aggregated_value, profile)) for b in weights]


def build_metric_series(
    metric: MetricKind,
    timeframe: Timeframe,
    store,
    fallback: float = 0.0,
    anchor: Optional[date] = None,
) -> List[Bucket]:
    """build_series with the metric's default policy and a period preset."""
    tw = timeframe.window
    return build_series(
        metric,
        tw.span_days,
        tw.bucket_days,
        DEFAULT_POLICIES[metric],
        tw.label_format,
        store,
        fallback=fallback,
        anchor=anchor,
    )


def to_display_units(metric: MetricKind, buckets: List[Bucket]) -> List[Bucket]:
    """Convert stored units to chart units. Only distance changes (m → km)."""
    if metric is not MetricKind.DISTANCE:
        return list(buckets)
    return [Bucket(label=b.label, aggregated_value=b.aggregated_value / METERS_PER_KM) for b in buckets]
