"""Tests for the `python -m vitals` command line."""
from datetime import date
from unittest.mock import patch

import pytest

from vitals.__main__ import build_parser, main
from vitals.analysis.timeseries import MetricKind
from vitals.errors import StoreUnavailable


class TestParser:
    def test_series_defaults_to_week(self):
        args = build_parser().parse_args(["series", "steps"])
        assert (args.command, args.series, args.period) == ("series", "steps", "week")

    def test_chart_accepts_out(self):
        args = build_parser().parse_args(["chart", "bmr", "--period", "year", "--out", "x.png"])
        assert (args.series, args.period, args.out) == ("bmr", "year", "x.png")

    def test_unknown_series_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["series", "sleep"])


class TestMain:
    def test_prints_week_of_steps(self, engine, store, capsys):
        store.upsert(MetricKind.STEPS, date.today(), 4321)
        with patch("vitals.db.engine.get_engine", return_value=engine):
            assert main(["series", "steps"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 7
        assert lines[-1].endswith("4321.0")

    def test_writes_chart(self, engine, tmp_path):
        out = tmp_path / "w.png"
        with patch("vitals.db.engine.get_engine", return_value=engine):
            assert main(["chart", "weight", "--period", "month", "--out", str(out)]) == 0
        assert out.read_bytes().startswith(b"\x89PNG")

    def test_store_unavailable_exit_code(self, engine):
        with patch("vitals.db.engine.get_engine", return_value=engine), \
                patch("vitals.db.history_store.HistoryStore.read", side_effect=StoreUnavailable("down")):
            assert main(["series", "water"]) == 1
