"""Shared test fixtures."""
from datetime import date
from typing import Generator, List

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from vitals.models.history import MetricEntry  # noqa: F401
from vitals.models.profile import UserProfile  # noqa: F401

from vitals.analysis.timeseries import MetricKind, MetricPoint
from vitals.db.history_store import HistoryStore


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(engine) -> HistoryStore:
    """HistoryStore over the in-memory engine, user 1."""
    return HistoryStore(engine, user_id=1)


class FakeStore:
    """Dict-backed store exposing read/latest; records each read call."""

    def __init__(self, data=None):
        self.data = data or {}  # {MetricKind: {date: value}}
        self.reads = []

    def read(self, metric: MetricKind, start: date, end: date) -> List[MetricPoint]:
        self.reads.append((metric, start, end))
        days = self.data.get(metric, {})
        return [MetricPoint(day=d, value=v) for d, v in days.items() if start <= d <= end]

    def latest(self, metric: MetricKind):
        days = sorted((d, v) for d, v in self.data.get(metric, {}).items() if v > 0)
        return MetricPoint(day=days[-1][0], value=days[-1][1]) if days else None


@pytest.fixture(name="fake_store")
def fake_store_fixture() -> FakeStore:
    return FakeStore()
