"""Daily history write routes: single-day upsert, batch import, clear."""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from vitals.analysis.timeseries import MetricKind
from vitals.db.history_store import HistoryStore, get_history_store

router = APIRouter()


class ValueIn(BaseModel):
    value: float
    source: str = "manual"


class SampleIn(BaseModel):
    day: date
    value: float


class ImportIn(BaseModel):
    samples: List[SampleIn]
    source: str = "import"


class PointOut(BaseModel):
    day: date
    value: float


@router.get("/{metric}", response_model=List[PointOut])
def read_history(
    metric: MetricKind,
    start: date,
    end: date,
    store: HistoryStore = Depends(get_history_store),
):
    """Raw stored points in [start, end], oldest first."""
    return [PointOut(day=p.day, value=p.value) for p in store.read(metric, start, end)]


@router.put("/{metric}/{day}", response_model=PointOut)
def upsert_day(
    metric: MetricKind,
    day: date,
    body: ValueIn,
    store: HistoryStore = Depends(get_history_store),
):
    """Set one day's value, replacing any existing value."""
    entry = store.upsert(metric, day, body.value, source=body.source)
    return PointOut(day=entry.day, value=entry.value)


@router.post("/{metric}/import")
def import_history(
    metric: MetricKind,
    body: ImportIn,
    store: HistoryStore = Depends(get_history_store),
):
    """Upsert a batch of samples (e.g. a provider export)."""
    count = store.import_history(metric, [(s.day, s.value) for s in body.samples], source=body.source)
    return {"metric": metric.value, "imported": count}


@router.delete("/{metric}")
def clear_history(metric: MetricKind, store: HistoryStore = Depends(get_history_store)):
    """Remove all stored points for a metric."""
    return {"metric": metric.value, "deleted": store.clear(metric)}
