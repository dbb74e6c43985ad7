"""Profile lookup with settings defaults, fallback weight resolution and goal progress."""
import logging
from datetime import date
from typing import Dict, Optional

from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from vitals.analysis.bmr import Gender, Profile
from vitals.analysis.progress import DEFAULT_DAILY_GOALS, daily_goal_progress, weight_progress
from vitals.analysis.timeseries import MetricKind
from vitals.config import Settings
from vitals.errors import StoreUnavailable
from vitals.models.profile import UserProfile

logger = logging.getLogger(__name__)


def get_profile_row(session: Session, user_id: int) -> Optional[UserProfile]:
    try:
        return session.exec(select(UserProfile).where(UserProfile.user_id == user_id)).first()
    except OperationalError as exc:
        logger.error("Profile lookup failed for user %s: %s", user_id, exc)
        raise StoreUnavailable(str(exc)) from exc


def save_profile(session: Session, row: UserProfile) -> UserProfile:
    """Commit and refresh `row`; OperationalError becomes StoreUnavailable."""
    try:
        session.add(row)
        session.commit()
        session.refresh(row)
    except OperationalError as exc:
        session.rollback()
        logger.error("Profile save failed for user %s: %s", row.user_id, exc)
        raise StoreUnavailable(str(exc)) from exc
    logger.info("Saved profile for user %s", row.user_id)
    return row


def resolve_profile(row: Optional[UserProfile], settings: Settings) -> Profile:
    """BMR inputs from the stored profile, or the settings defaults if none is stored."""
    if row is not None:
        return row.to_profile()
    return Profile(
        age=settings.default_age,
        height_cm=settings.default_height_cm,
        gender=Gender.parse(settings.default_gender),
    )


def resolve_fallback_weight(row: Optional[UserProfile], store, settings: Settings) -> float:
    """
    Weight used for weight/BMR buckets before the first valid reading.

    Order: the profile's current weight, then the latest positive stored
    weight, then settings.default_weight_kg.
    """
    if row is not None and row.current_weight_kg and row.current_weight_kg > 0:
        return row.current_weight_kg
    latest = store.latest(MetricKind.WEIGHT)
    if latest is not None:
        return latest.value
    return settings.default_weight_kg


def daily_goals(row: UserProfile) -> Dict[MetricKind, float]:
    """The profile's daily targets, with DEFAULT_DAILY_GOALS for any left unset."""
    stored = {
        MetricKind.STEPS: row.daily_steps_goal,
        MetricKind.FOOD_ENERGY: row.daily_calorie_goal,
        MetricKind.WATER: row.daily_water_goal,
        MetricKind.BURNED_ENERGY: row.daily_burned_calories_goal,
    }
    return {
        metric: float(goal) if goal is not None else DEFAULT_DAILY_GOALS[metric]
        for metric, goal in stored.items()
    }


def goal_progress(row: UserProfile, store, day: date) -> dict:
    """
    Progress towards the weight goal and each daily goal on `day`.

    Weight progress is None when the start weight, the goal weight or any
    current weight (profile, else latest stored) is unknown.
    """
    current = row.current_weight_kg
    if not current or current <= 0:
        latest = store.latest(MetricKind.WEIGHT)
        current = latest.value if latest is not None else None

    weight = None
    if row.start_weight_kg and row.goal_weight_kg and current:
        weight = {
            "start": row.start_weight_kg,
            "current": current,
            "goal": row.goal_weight_kg,
            "progress": weight_progress(row.start_weight_kg, current, row.goal_weight_kg),
        }

    daily = {}
    for metric, goal in daily_goals(row).items():
        value = sum((p.value for p in store.read(metric, day, day)), 0.0)
        daily[metric.value] = {
            "value": value,
            "goal": goal,
            "progress": daily_goal_progress(value, goal),
        }
    return {"day": day, "weight": weight, "daily": daily}
