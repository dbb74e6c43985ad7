"""
HistoryStore: per-metric daily history backed by SQLModel.

One table (MetricEntry) serves every metric; rows are keyed by
(user_id, metric, day). Upserts update the existing row in place so a day
never holds more than one value. Two writers inserting the same new day
race on the unique constraint; the loser gets an IntegrityError, rolls
back and retries once as an update.

Any SQLAlchemy OperationalError (database missing, locked, unreachable) is
re-raised as StoreUnavailable; the series builders let it propagate.
"""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from vitals.analysis.timeseries import MetricKind, MetricPoint, entries_to_points
from vitals.config import get_settings
from vitals.db.engine import get_engine
from vitals.errors import StoreUnavailable
from vitals.models.history import MetricEntry

logger = logging.getLogger(__name__)


class HistoryStore:
    """Reads and writes daily metric values for one user."""

    def __init__(self, engine, user_id: int = 1):
        """
        Args:
            engine: SQLAlchemy engine (SQLModel create_engine result).
            user_id: owner of every row read or written.
        """
        self.engine = engine
        self.user_id = user_id

    def read(self, metric: MetricKind, start: date, end: date) -> List[MetricPoint]:
        """Points for `metric` with start <= day <= end, in day order, gaps permitted."""
        try:
            with Session(self.engine) as s:
                rows = s.exec(
                    select(MetricEntry)
                    .where(MetricEntry.user_id == self.user_id)
                    .where(MetricEntry.metric == MetricKind(metric).value)
                    .where(MetricEntry.day >= start)
                    .where(MetricEntry.day <= end)
                    .order_by(MetricEntry.day)
                ).all()
                return entries_to_points(rows)
        except OperationalError as exc:
            logger.error("History read failed for %s: %s", metric, exc)
            raise StoreUnavailable(str(exc)) from exc

    def upsert(
        self,
        metric: MetricKind,
        day: date,
        value: float,
        source: Optional[str] = None,
    ) -> MetricEntry:
        """Set the value for one day, overwriting any existing value."""
        metric = MetricKind(metric)
        try:
            try:
                return self._commit_one(metric, day, value, source)
            except IntegrityError:
                # Another writer inserted this day between our select and insert
                logger.warning("Concurrent insert of %s on %s; retrying as update", metric.value, day)
                return self._commit_one(metric, day, value, source)
        except OperationalError as exc:
            logger.error("History upsert failed for %s on %s: %s", metric, day, exc)
            raise StoreUnavailable(str(exc)) from exc

    def import_history(
        self,
        metric: MetricKind,
        samples: Iterable[Tuple[date, float]],
        source: str = "import",
        replace: bool = False,
    ) -> int:
        """
        Upsert a batch of (day, value) samples in one transaction.

        With `replace`, the metric's existing history is deleted in the same
        transaction, so a failed import leaves the old history intact.
        Later samples for the same day win. Returns the number of samples applied.
        """
        metric = MetricKind(metric)
        count = 0
        deleted = 0
        try:
            with Session(self.engine) as s:
                if replace:
                    deleted = self._delete_all_in_session(s, metric)
                    s.flush()
                for day, value in samples:
                    self._upsert_in_session(s, metric, day, value, source)
                    # flush so a repeated day in the same batch finds the pending row
                    s.flush()
                    count += 1
                s.commit()
        except OperationalError as exc:
            logger.error("History import failed for %s: %s", metric, exc)
            raise StoreUnavailable(str(exc)) from exc
        if replace:
            logger.info("Replaced %d existing %s entries", deleted, metric.value)
        logger.info("Imported %d %s samples", count, metric.value)
        return count

    def clear(self, metric: MetricKind) -> int:
        """Remove every point for `metric`. Returns the number of rows deleted."""
        metric = MetricKind(metric)
        try:
            with Session(self.engine) as s:
                deleted = self._delete_all_in_session(s, metric)
                s.commit()
        except OperationalError as exc:
            logger.error("History clear failed for %s: %s", metric, exc)
            raise StoreUnavailable(str(exc)) from exc
        logger.info("Cleared %d %s entries", deleted, metric.value)
        return deleted

    def latest(self, metric: MetricKind) -> Optional[MetricPoint]:
        """Most recent point with a positive value, or None."""
        try:
            with Session(self.engine) as s:
                row = s.exec(
                    select(MetricEntry)
                    .where(MetricEntry.user_id == self.user_id)
                    .where(MetricEntry.metric == MetricKind(metric).value)
                    .where(MetricEntry.value > 0)
                    .order_by(MetricEntry.day.desc())
                ).first()
        except OperationalError as exc:
            logger.error("History lookup failed for %s: %s", metric, exc)
            raise StoreUnavailable(str(exc)) from exc
        return MetricPoint(day=row.day, value=row.value) if row else None

    # ─── Internal helpers ─────────────────────────────────────────────────────

    def _commit_one(
        self,
        metric: MetricKind,
        day: date,
        value: float,
        source: Optional[str],
    ) -> MetricEntry:
        with Session(self.engine) as s:
            entry = self._upsert_in_session(s, metric, day, value, source)
            s.commit()
            s.refresh(entry)
            return entry

    def _find_entry(self, s: Session, metric: MetricKind, day: date) -> Optional[MetricEntry]:
        return s.exec(
            select(MetricEntry)
            .where(MetricEntry.user_id == self.user_id)
            .where(MetricEntry.metric == metric.value)
            .where(MetricEntry.day == day)
        ).first()

    def _upsert_in_session(
        self,
        s: Session,
        metric: MetricKind,
        day: date,
        value: float,
        source: Optional[str],
    ) -> MetricEntry:
        existing = self._find_entry(s, metric, day)

        if existing:
            existing.value = float(value)
            existing.source = source
            existing.updated_at = datetime.utcnow()
            s.add(existing)
            logger.debug("Updated %s on %s → %s", metric.value, day, value)
            return existing

        entry = MetricEntry(
            user_id=self.user_id,
            metric=metric.value,
            day=day,
            value=float(value),
            source=source,
        )
        s.add(entry)
        logger.debug("Inserted %s on %s → %s", metric.value, day, value)
        return entry

    def _delete_all_in_session(self, s: Session, metric: MetricKind) -> int:
        rows = s.exec(
            select(MetricEntry)
            .where(MetricEntry.user_id == self.user_id)
            .where(MetricEntry.metric == metric.value)
        ).all()
        for row in rows:
            s.delete(row)
        return len(rows)


def get_history_store() -> HistoryStore:
    """FastAPI dependency: a store bound to the app engine and configured user."""
    return HistoryStore(get_engine(), user_id=get_settings().user_id)
