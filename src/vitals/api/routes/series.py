"""Chart series routes: bucket JSON and rendered PNG per metric and period."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlmodel import Session

from vitals.analysis.series import Timeframe
from vitals.charts.chart_service import SERIES_TITLES, build_chart_series, series_names
from vitals.charts.render import make_series_chart
from vitals.config import get_settings
from vitals.db.engine import get_session
from vitals.db.history_store import HistoryStore, get_history_store

router = APIRouter()


class BucketOut(BaseModel):
    label: str
    value: float


def _check_series(series: str) -> None:
    if series not in series_names():
        raise HTTPException(status_code=404, detail=f"Unknown series: {series}")


@router.get("/{series}", response_model=List[BucketOut])
def get_series(
    series: str,
    period: Timeframe = Timeframe.WEEK,
    session: Session = Depends(get_session),
    store: HistoryStore = Depends(get_history_store),
):
    """Ordered buckets for one metric (or "bmr"), ready to plot left to right."""
    _check_series(series)
    buckets = build_chart_series(series, period, session, store, get_settings())
    return [BucketOut(label=b.label, value=b.aggregated_value) for b in buckets]


@router.get("/{series}/chart.png")
def get_series_chart(
    series: str,
    period: Timeframe = Timeframe.WEEK,
    session: Session = Depends(get_session),
    store: HistoryStore = Depends(get_history_store),
):
    """The same series rendered as a PNG line chart."""
    _check_series(series)
    buckets = build_chart_series(series, period, session, store, get_settings())
    png, _caption = make_series_chart(
        buckets,
        title=SERIES_TITLES[series],
        subtitle=period.value.capitalize(),
        series=series,
    )
    return Response(content=png, media_type="image/png")
