"""Tests for the SQLModel-backed HistoryStore."""
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from vitals.analysis.timeseries import MetricKind, MetricPoint
from vitals.db.history_store import HistoryStore
from vitals.errors import StoreUnavailable
from vitals.models.history import MetricEntry

D0 = date(2024, 3, 10)


class TestUpsert:
    def test_insert_then_read(self, store):
        store.upsert(MetricKind.STEPS, D0, 8000)
        assert store.read(MetricKind.STEPS, D0, D0) == [MetricPoint(day=D0, value=8000.0)]

    def test_overwrites_same_day(self, store, engine):
        store.upsert(MetricKind.WEIGHT, D0, 70.0)
        store.upsert(MetricKind.WEIGHT, D0, 71.5)
        with Session(engine) as s:
            rows = s.exec(select(MetricEntry)).all()
        assert len(rows) == 1
        assert rows[0].value == 71.5

    def test_idempotent(self, store):
        store.upsert(MetricKind.WATER, D0, 6)
        store.upsert(MetricKind.WATER, D0, 6)
        assert store.read(MetricKind.WATER, D0, D0) == [MetricPoint(day=D0, value=6.0)]

    def test_metrics_are_independent(self, store):
        store.upsert(MetricKind.STEPS, D0, 8000)
        store.upsert(MetricKind.DISTANCE, D0, 6200)
        assert store.read(MetricKind.STEPS, D0, D0)[0].value == 8000.0
        assert store.read(MetricKind.DISTANCE, D0, D0)[0].value == 6200.0

    def test_records_source(self, store):
        entry = store.upsert(MetricKind.STEPS, D0, 100, source="manual")
        assert entry.source == "manual"
        assert entry.metric == "steps"

    def test_users_are_isolated(self, engine):
        HistoryStore(engine, user_id=1).upsert(MetricKind.STEPS, D0, 100)
        HistoryStore(engine, user_id=2).upsert(MetricKind.STEPS, D0, 200)
        assert HistoryStore(engine, user_id=1).read(MetricKind.STEPS, D0, D0)[0].value == 100.0

    def test_concurrent_insert_retried_as_update(self, store, engine):
        store.upsert(MetricKind.STEPS, D0, 1000)
        real_find = HistoryStore._find_entry
        calls = []

        def stale_find(self, s, metric, day):
            # First lookup misses the row another writer already inserted
            calls.append(day)
            return None if len(calls) == 1 else real_find(self, s, metric, day)

        with patch.object(HistoryStore, "_find_entry", stale_find):
            entry = store.upsert(MetricKind.STEPS, D0, 2500)

        assert len(calls) == 2
        assert entry.value == 2500.0
        with Session(engine) as s:
            rows = s.exec(select(MetricEntry).where(MetricEntry.metric == "steps")).all()
        assert [(r.day, r.value) for r in rows] == [(D0, 2500.0)]


class TestRead:
    def test_inclusive_range_with_gaps(self, store):
        for offset in (0, 2, 5, 9):
            store.upsert(MetricKind.STEPS, D0 - timedelta(days=offset), offset)
        points = store.read(MetricKind.STEPS, D0 - timedelta(days=5), D0)
        assert [p.day for p in points] == [D0 - timedelta(days=5), D0 - timedelta(days=2), D0]

    def test_empty(self, store):
        assert store.read(MetricKind.WEIGHT, D0 - timedelta(days=30), D0) == []

    def test_accepts_metric_value_string(self, store):
        store.upsert(MetricKind.STEPS, D0, 1)
        assert len(store.read("steps", D0, D0)) == 1


class TestImportAndClear:
    def test_import_history_counts(self, store):
        samples = [(D0 - timedelta(days=i), 1000.0 * i) for i in range(5)]
        assert store.import_history(MetricKind.STEPS, samples) == 5
        assert len(store.read(MetricKind.STEPS, D0 - timedelta(days=10), D0)) == 5

    def test_import_later_duplicate_wins(self, store):
        store.import_history(MetricKind.WEIGHT, [(D0, 70.0), (D0, 69.0)])
        assert store.read(MetricKind.WEIGHT, D0, D0) == [MetricPoint(day=D0, value=69.0)]

    def test_import_overwrites_existing(self, store):
        store.upsert(MetricKind.WATER, D0, 3)
        store.import_history(MetricKind.WATER, [(D0, 8)])
        assert store.read(MetricKind.WATER, D0, D0)[0].value == 8.0

    def test_clear_removes_only_that_metric(self, store):
        store.upsert(MetricKind.STEPS, D0, 1)
        store.upsert(MetricKind.STEPS, D0 - timedelta(days=1), 2)
        store.upsert(MetricKind.WATER, D0, 3)
        assert store.clear(MetricKind.STEPS) == 2
        assert store.read(MetricKind.STEPS, D0 - timedelta(days=5), D0) == []
        assert len(store.read(MetricKind.WATER, D0, D0)) == 1

    def test_clear_empty(self, store):
        assert store.clear(MetricKind.WEIGHT) == 0

    def test_replace_drops_old_history(self, store):
        store.upsert(MetricKind.STEPS, D0 - timedelta(days=40), 123)
        assert store.import_history(MetricKind.STEPS, [(D0, 9000)], replace=True) == 1
        assert store.read(MetricKind.STEPS, D0 - timedelta(days=60), D0) == [MetricPoint(day=D0, value=9000.0)]

    def test_failed_replace_keeps_old_history(self, store):
        store.upsert(MetricKind.STEPS, D0 - timedelta(days=40), 123)
        with pytest.raises(ValueError):
            store.import_history(MetricKind.STEPS, [(D0, 9000), (D0 - timedelta(days=1), "bad")], replace=True)
        assert store.read(MetricKind.STEPS, D0 - timedelta(days=60), D0) == [
            MetricPoint(day=D0 - timedelta(days=40), value=123.0)
        ]

    def test_replace_leaves_other_metrics(self, store):
        store.upsert(MetricKind.WATER, D0, 3)
        store.import_history(MetricKind.STEPS, [(D0, 9000)], replace=True)
        assert store.read(MetricKind.WATER, D0, D0) == [MetricPoint(day=D0, value=3.0)]


class TestLatest:
    def test_latest_positive(self, store):
        store.upsert(MetricKind.WEIGHT, D0 - timedelta(days=3), 71.0)
        store.upsert(MetricKind.WEIGHT, D0 - timedelta(days=1), 70.2)
        store.upsert(MetricKind.WEIGHT, D0, 0.0)
        assert store.latest(MetricKind.WEIGHT) == MetricPoint(day=D0 - timedelta(days=1), value=70.2)

    def test_latest_none(self, store):
        assert store.latest(MetricKind.WEIGHT) is None


class TestStoreUnavailable:
    def test_read_wraps_operational_error(self, store):
        err = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch("vitals.db.history_store.Session") as mock_session:
            mock_session.return_value.__enter__.return_value.exec.side_effect = err
            with pytest.raises(StoreUnavailable) as exc_info:
                store.read(MetricKind.STEPS, D0, D0)
        assert exc_info.value.__cause__ is err

    def test_missing_table_is_unavailable(self, engine):
        from sqlmodel import SQLModel
        SQLModel.metadata.drop_all(engine)
        with pytest.raises(StoreUnavailable):
            HistoryStore(engine).upsert(MetricKind.STEPS, D0, 1)
        SQLModel.metadata.create_all(engine)
