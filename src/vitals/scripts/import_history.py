"""
Import script: load a CSV of daily values into the history store.

Usage:
    python -m vitals.scripts.import_history --metric steps steps.csv
    python -m vitals.scripts.import_history --metric weight --clear weight.csv

CSV format: a header row with `date,value` (extra columns ignored), dates as
YYYY-MM-DD. Existing values for the same day are overwritten; rows with an
unparseable date or value are skipped with a warning.
"""
import argparse
import csv
import logging
from datetime import date
from pathlib import Path
from typing import List, Tuple

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def read_samples(path: Path) -> List[Tuple[date, float]]:
    """Parse `date,value` rows. Bad rows are logged and skipped."""
    samples = []
    with path.open(newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            try:
                samples.append((date.fromisoformat(row["date"].strip()), float(row["value"])))
            except (KeyError, AttributeError, TypeError, ValueError) as exc:
                logger.warning("Skipping line %d: %s", line_no, exc)
    return samples


def run_import(store, metric, path: Path, clear: bool = False) -> int:
    """Upsert every sample in `path`; with `clear`, replace the metric's history atomically. Returns count."""
    samples = read_samples(path)
    count = store.import_history(metric, samples, source=f"csv:{path.name}", replace=clear)
    logger.info("Import complete. %d %s samples from %s", count, metric.value, path)
    return count


def main() -> None:
    from vitals.analysis.timeseries import MetricKind
    from vitals.config import get_settings
    from vitals.db.engine import get_engine
    from vitals.db.history_store import HistoryStore

    parser = argparse.ArgumentParser(description="Import daily metric history from CSV")
    parser.add_argument("--metric", required=True, choices=[m.value for m in MetricKind])
    parser.add_argument("--clear", action="store_true", help="Replace the metric's history with the file")
    parser.add_argument("csv_path", type=Path)
    args = parser.parse_args()

    store = HistoryStore(get_engine(), user_id=get_settings().user_id)
    run_import(store, MetricKind(args.metric), args.csv_path, clear=args.clear)


if __name__ == "__main__":
    main()
