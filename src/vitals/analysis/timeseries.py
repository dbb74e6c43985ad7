"""
MetricPoint dataclass, the MetricKind enum, and conversion from stored rows.

MetricPoint is the in-memory representation used by the window, bucket and
series modules. It is a plain Python dataclass with no SQLModel or DB
dependencies. Analysis functions take List[MetricPoint] and return pure results.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, List


class MetricKind(str, Enum):
    """Daily metrics tracked per calendar day."""

    FOOD_ENERGY = "food_energy"      # kcal eaten
    BURNED_ENERGY = "burned_energy"  # kcal burned (active)
    STEPS = "steps"
    DISTANCE = "distance"            # meters walked/run
    WATER = "water"                  # glasses/cups logged
    WEIGHT = "weight"                # kg

    @property
    def is_stock(self) -> bool:
        """Stock metrics are sampled at a point in time; flow metrics accumulate."""
        return self is MetricKind.WEIGHT


@dataclass(frozen=True)
class MetricPoint:
    """One value for one metric on one calendar day."""

    day: date
    value: float


def entries_to_points(entries: Iterable[Any]) -> List[MetricPoint]:
    """
    Convert stored rows (anything with `.day` and `.value`, e.g. MetricEntry)
    into MetricPoint instances.

    This is the bridge between the persistence layer and the analysis layer.
    """
    return [MetricPoint(day=e.day, value=float(e.value)) for e in entries]
