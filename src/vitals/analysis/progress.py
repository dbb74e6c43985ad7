"""
Goal progress fractions for the dashboard rings and bars.

Both functions return a fraction clamped to [0, 1]. A goal that cannot be
measured against (zero distance to go, or a non-positive daily target)
yields 0 rather than an error.
"""
from vitals.analysis.timeseries import MetricKind

# Daily targets used when the profile leaves a goal unset
DEFAULT_DAILY_GOALS = {
    MetricKind.STEPS: 10000.0,
    MetricKind.FOOD_ENERGY: 2000.0,
    MetricKind.WATER: 3.0,
    MetricKind.BURNED_ENERGY: 500.0,
}


def _clamp(fraction: float) -> float:
    return min(max(fraction, 0.0), 1.0)


def weight_progress(start: float, current: float, goal: float) -> float:
    """
    Share of the way from start weight to goal weight.

    Works for both losing and gaining: (current - start) / (goal - start).
    Moving away from the goal clamps to 0, passing it clamps to 1.
    """
    if goal == start:
        return 0.0
    return _clamp((current - start) / (goal - start))


def daily_goal_progress(value: float, goal: float) -> float:
    """Today's value against a daily target; 0 when the target is not positive."""
    if goal <= 0:
        return 0.0
    return _clamp(value / goal)
