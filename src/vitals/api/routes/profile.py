"""Profile routes: read and replace the single user profile, and goal progress."""
from datetime import date
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from vitals.analysis.bmr import Gender
from vitals.config import get_settings
from vitals.db.engine import get_session
from vitals.db.history_store import HistoryStore, get_history_store
from vitals.db.profile_store import get_profile_row, goal_progress, save_profile
from vitals.models.profile import UserProfile

router = APIRouter()


class ProfileIn(BaseModel):
    name: str = ""
    gender: Gender
    age: int
    height_cm: float
    daily_calorie_goal: Optional[int] = None
    daily_steps_goal: Optional[int] = None
    daily_water_goal: Optional[float] = None
    daily_burned_calories_goal: Optional[int] = None
    start_weight_kg: Optional[float] = None
    current_weight_kg: Optional[float] = None
    goal_weight_kg: Optional[float] = None


class WeightProgressOut(BaseModel):
    start: float
    current: float
    goal: float
    progress: float


class DailyProgressOut(BaseModel):
    value: float
    goal: float
    progress: float


class ProgressOut(BaseModel):
    day: date
    weight: Optional[WeightProgressOut]
    daily: Dict[str, DailyProgressOut]


def _require_profile(session: Session) -> UserProfile:
    row = get_profile_row(session, get_settings().user_id)
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return row


@router.get("/", response_model=UserProfile)
def get_profile(session: Session = Depends(get_session)):
    """Fetch the stored profile."""
    return _require_profile(session)


@router.put("/", response_model=UserProfile)
def put_profile(body: ProfileIn, session: Session = Depends(get_session)):
    """Create or replace the profile."""
    user_id = get_settings().user_id
    row = get_profile_row(session, user_id) or UserProfile(user_id=user_id, age=body.age, height_cm=body.height_cm)
    for k, v in body.model_dump().items():
        setattr(row, k, v.value if isinstance(v, Gender) else v)
    return save_profile(session, row)


@router.get("/progress", response_model=ProgressOut)
def get_progress(
    day: Optional[date] = None,
    session: Session = Depends(get_session),
    store: HistoryStore = Depends(get_history_store),
):
    """Weight goal progress and each daily goal's progress for `day` (default today)."""
    row = _require_profile(session)
    return goal_progress(row, store, day or date.today())
