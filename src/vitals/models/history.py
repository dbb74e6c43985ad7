"""Daily metric history: one row per (user, metric, calendar day)."""
from datetime import date, datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class MetricEntry(SQLModel, table=True):
    """One day's value for one metric. Upserted, never duplicated."""

    __table_args__ = (UniqueConstraint("user_id", "metric", "day", name="uq_metricentry_user_metric_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(default=1, index=True)
    metric: str = Field(index=True)  # MetricKind value, e.g. "steps", "weight"
    day: date = Field(index=True)    # local calendar day, no time component
    value: float

    source: Optional[str] = None  # "manual", "import", or a provider name
    updated_at: datetime = Field(default_factory=datetime.utcnow)
