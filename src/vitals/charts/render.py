"""
Chart rendering for bucket series.

Produces matplotlib figures as PNG bytes (for the /series/.../chart.png
route and the CLI). Each chart function returns (png_bytes, caption).

Design:
  - one line panel, buckets left to right in series order
  - x-axis: bucket labels, plotted by position since labels may repeat
  - y-axis range per series from y_domain(): flow metrics start at 0 with
    headroom; weight and BMR hug their data range
"""
import io
from typing import List, Sequence, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from vitals.analysis.buckets import Bucket

# ─── Constants ────────────────────────────────────────────────────────────────

# Headroom added above the max for flow series, in display units
WATER_HEADROOM = 6.0
DISTANCE_HEADROOM_KM = 1.0

# BMR band padding and the range used when no buckets exist
BMR_PADDING = 50.0
BMR_EMPTY_MIN = 1200.0
BMR_EMPTY_MAX = 1500.0

WEIGHT_PADDING_KG = 2.0

# Line colour per series (matches the card colours of the dashboard)
SERIES_COLORS = {
    "food_energy": "#ff9f43",
    "burned_energy": "#ff6b6b",
    "steps": "#55efc4",
    "distance": "#4ecdc4",
    "water": "#5b9bd5",
    "weight": "#a29bfe",
    "bmr": "#ffd700",
}


# ─── Public API ───────────────────────────────────────────────────────────────

def y_domain(buckets: Sequence[Bucket], series: str) -> Tuple[float, float]:
    """
    Y-axis (low, high) for a series.

    Args:
        buckets: series in display units (distance already in km).
        series: MetricKind value or "bmr".
    """
    values = [b.aggregated_value for b in buckets]

    if series == "bmr":
        lo = min(values) if values else BMR_EMPTY_MIN
        hi = max(values) if values else BMR_EMPTY_MAX
        return lo - BMR_PADDING, hi + BMR_PADDING

    if series == "weight":
        if not values:
            return 0.0, 1.0
        return max(0.0, min(values) - WEIGHT_PADDING_KG), max(values) + WEIGHT_PADDING_KG

    top = max(values) if values else 0.0
    if series == "water":
        return 0.0, top + WATER_HEADROOM
    if series == "distance":
        return 0.0, top + DISTANCE_HEADROOM_KM
    return 0.0, top * 1.1 if top > 0 else 1.0


def make_series_chart(
    buckets: List[Bucket],
    title: str,
    subtitle: str,
    series: str,
) -> Tuple[bytes, str]:
    """
    Line chart of one bucket series.

    Args:
        buckets: display-unit buckets, oldest first.
        title: e.g. "Steps".
        subtitle: period name, e.g. "Week".
        series: MetricKind value or "bmr" (selects colour and y-range).

    Returns (png_bytes, caption).
    """
    color = SERIES_COLORS.get(series, "#4ecdc4")
    x = np.arange(len(buckets))
    y = np.array([b.aggregated_value for b in buckets], dtype=float)

    fig, ax = plt.subplots(figsize=(8, 4))
    fig.patch.set_facecolor("#1a1a2e")
    _style_ax(ax)

    lo, hi = y_domain(buckets, series)
    if len(buckets):
        ax.plot(x, y, color=color, linewidth=2.0, marker="o", markersize=4, zorder=3)
        ax.fill_between(x, y, lo, color=color, alpha=0.12, zorder=2)
        ax.set_xticks(x)
        ax.set_xticklabels([b.label for b in buckets])

    ax.set_ylim(bottom=lo, top=hi)

    caption = f"{title}  ·  {subtitle}"
    fig.suptitle(caption, color="white", fontsize=11, fontweight="bold")

    buf = io.BytesIO()
    plt.savefig(buf, format="png", dpi=120, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    buf.seek(0)
    return buf.read(), caption


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _style_ax(ax) -> None:
    ax.set_facecolor("#2d2d4e")
    ax.tick_params(colors="white", labelsize=8)
    ax.grid(axis="y", color="#555577", linewidth=0.5, alpha=0.6)
    ax.spines["bottom"].set_color("#555577")
    ax.spines["left"].set_color("#555577")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
