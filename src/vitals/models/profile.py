"""User profile: static attributes for BMR plus weight and daily goals."""
from typing import Optional

from sqlmodel import Field, SQLModel

from vitals.analysis.bmr import Gender, Profile


class UserProfile(SQLModel, table=True):
    """Single profile row per user."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(default=1, unique=True, index=True)
    name: str = ""
    gender: str = "male"  # "male" / "female"
    age: int
    height_cm: float

    daily_calorie_goal: Optional[int] = None
    daily_steps_goal: Optional[int] = None
    daily_water_goal: Optional[float] = None
    daily_burned_calories_goal: Optional[int] = None

    start_weight_kg: Optional[float] = None
    current_weight_kg: Optional[float] = None
    goal_weight_kg: Optional[float] = None

    def to_profile(self) -> Profile:
        """Project the row onto the read-only BMR inputs."""
        return Profile(age=self.age, height_cm=self.height_cm, gender=Gender.parse(self.gender))
