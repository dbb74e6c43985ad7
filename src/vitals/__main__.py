"""
Command-line entrypoint: print or render chart series from the local DB.

FastAPI runs separately under uvicorn.

Usage:
    python -m vitals series steps --period week     # label/value table
    python -m vitals series bmr --period month
    python -m vitals chart weight --period year --out weight.png
    uvicorn vitals.api.main:app --host 0.0.0.0 --port 8000  # starts API
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from vitals.config import get_settings

logger = logging.getLogger(__name__)


def _build(args):
    from sqlmodel import Session

    from vitals.analysis.series import Timeframe
    from vitals.charts.chart_service import build_chart_series
    from vitals.db.engine import get_engine
    from vitals.db.history_store import HistoryStore

    settings = get_settings()
    engine = get_engine()
    store = HistoryStore(engine, user_id=settings.user_id)
    with Session(engine) as session:
        return build_chart_series(args.series, Timeframe(args.period), session, store, settings)


def _run_series(args) -> None:
    for bucket in _build(args):
        print(f"{bucket.label:>8}  {bucket.aggregated_value:10.1f}")


def _run_chart(args) -> None:
    from vitals.charts.chart_service import SERIES_TITLES
    from vitals.charts.render import make_series_chart

    png, caption = make_series_chart(
        _build(args),
        title=SERIES_TITLES[args.series],
        subtitle=args.period.capitalize(),
        series=args.series,
    )
    out = Path(args.out or f"{args.series}_{args.period}.png")
    out.write_bytes(png)
    logger.info("Wrote %s (%s)", out, caption)


def build_parser() -> argparse.ArgumentParser:
    from vitals.analysis.series import Timeframe
    from vitals.charts.chart_service import series_names

    parser = argparse.ArgumentParser(prog="vitals", description="Daily health metric charts")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("series", "Print bucketed series"), ("chart", "Render series to PNG")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("series", choices=series_names())
        p.add_argument(
            "--period",
            choices=[t.value for t in Timeframe],
            default=Timeframe.WEEK.value,
        )
        if name == "chart":
            p.add_argument("--out", help="Output PNG path (default: <series>_<period>.png)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    args = build_parser().parse_args(argv)

    from vitals.errors import InvalidArgument, StoreUnavailable

    try:
        if args.command == "series":
            _run_series(args)
        else:
            _run_chart(args)
    except (InvalidArgument, StoreUnavailable) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
