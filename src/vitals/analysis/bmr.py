"""
Basal metabolic rate from body weight and static profile attributes.

Uses the Mifflin–St Jeor equation (kcal/day):

    male:   10 * weight_kg + 6.25 * height_cm - 5 * age + 5
    female: 10 * weight_kg + 6.25 * height_cm - 5 * age - 161

Reference: Mifflin MD, St Jeor ST et al. "A new predictive equation for
resting energy expenditure in healthy individuals." Am J Clin Nutr. 1990.
"""
from dataclasses import dataclass
from enum import Enum

from vitals.errors import InvalidArgument

_SEX_CONSTANT = {"male": 5.0, "female": -161.0}


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, raw: str) -> "Gender":
        """Accept "male"/"female" in any case, plus the single letters M/F."""
        key = (raw or "").strip().lower()
        if key in ("m", "male"):
            return cls.MALE
        if key in ("f", "female"):
            return cls.FEMALE
        raise InvalidArgument(f"Unknown gender: {raw!r}")


@dataclass(frozen=True)
class Profile:
    """Read-only profile attributes needed for BMR."""

    age: int
    height_cm: float
    gender: Gender


def compute_bmr(weight_kg: float, profile: Profile) -> float:
    """
    Compute BMR for one weight value.

    No rounding is applied; callers round for display.

    Args:
        weight_kg: body weight in kilograms. Must already be resolved to a
                   positive value (see AVERAGE_IGNORING_ZERO fallback).
        profile: age, height and gender.

    Returns:
        BMR in kcal/day.

    Raises:
        InvalidArgument: if weight_kg is not positive.
    """
    if weight_kg <= 0:
        raise InvalidArgument(f"weight_kg must be positive, got {weight_kg}")
    return (
        10.0 * weight_kg
        + 6.25 * profile.height_cm
        - 5.0 * profile.age
        + _SEX_CONSTANT[Gender(profile.gender).value]
    )
