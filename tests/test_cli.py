from __future__ import annotations

import json
from pathlib import Path

import polars as pl

from home_court.cli import _parse_seasons, main
from home_court.errors import FetchError

RAW_SCHEMA = {
    "idGame": pl.Utf8,
    "yearSeason": pl.Int64,
    "dateGame": pl.Utf8,
    "nameTeam": pl.Utf8,
    "locationGame": pl.Utf8,
    "ptsTeam": pl.Int64,
}

SEASON_ROWS = {
    2015: [
        ("G1", 2015, "2014-10-28", "A", "H", 100),
        ("G1", 2015, "2014-10-28", "B", "A", 95),
        ("G2", 2015, "2014-10-29", "B", "H", 90),
        ("G2", 2015, "2014-10-29", "A", "A", 99),
    ],
    2016: [
        ("G3", 2016, "2015-10-28", "C", "H", 90),
        ("G3", 2016, "2015-10-28", "A", "A", 90),
    ],
}


class _FakeFetcher:
    def __init__(self, *, fail: set[int] | None = None) -> None:
        self.fail = fail or set()
        self.calls: list[int] = []

    def fetch(self, season: int) -> pl.DataFrame:
        self.calls.append(season)
        if season in self.fail or season not in SEASON_ROWS:
            raise FetchError(f"season {season}: status 503 after retries")
        return pl.DataFrame(SEASON_ROWS[season], schema=RAW_SCHEMA, orient="row")


def test_parse_seasons_ranges_and_lists() -> None:
    assert _parse_seasons("2015-2017,2020", default=()) == [2015, 2016, 2017, 2020]
    assert _parse_seasons("2016, 2015, 2016", default=()) == [2015, 2016]
    assert _parse_seasons("", default=(2000, 2001)) == [2000, 2001]


def test_cli_invalid_seasons_exit_2(tmp_path: Path, capsys) -> None:
    code = main(["build", "--data-dir", str(tmp_path), "--seasons", "2016-2015", "--offline"])
    captured = capsys.readouterr()

    assert code == 2
    assert "invalid season range" in captured.err


def test_cli_fetch_all_failed_exit_1(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr("home_court.cli._build_fetcher", lambda: _FakeFetcher(fail={2015, 2016}))

    code = main(["fetch", "--data-dir", str(tmp_path), "--seasons", "2015-2016"])
    captured = capsys.readouterr()

    assert code == 1
    assert "seasons=2 ok=0 failed=2015,2016 rows=0" in captured.out


def test_cli_build_report_verify_flow(tmp_path: Path, monkeypatch, capsys) -> None:
    fetcher = _FakeFetcher()
    monkeypatch.setattr("home_court.cli._build_fetcher", lambda: fetcher)
    data_dir = str(tmp_path / "data")

    code = main(["build", "--data-dir", data_dir, "--seasons", "2015-2017", "--max-workers", "2"])
    captured = capsys.readouterr()
    assert code == 0
    assert "games=3 seasons=2 teams=3 team_eras=3 failed_seasons=2017" in captured.out
    assert (tmp_path / "data" / "tables" / "games.parquet").exists()
    assert (tmp_path / "data" / "tables" / "teams.csv").exists()
    assert (tmp_path / "data" / "raw" / "season=2015" / "game_logs.parquet").exists()

    code = main(["build", "--data-dir", data_dir, "--seasons", "2015-2016", "--offline"])
    capsys.readouterr()
    assert code == 0
    assert sorted(fetcher.calls) == [2015, 2016, 2017]

    code = main(["report", "--data-dir", data_dir, "--top-n", "1", "--stdout"])
    captured = capsys.readouterr()
    assert code == 0
    assert "## Top 1 Home-Court Advantage Teams" in captured.out
    assert "| 1 | A | 100.0% |" in captured.out
    assert (tmp_path / "data" / "reports" / "summary.md").exists()

    code = main(["verify", "--data-dir", data_dir, "--seasons", "2015-2016", "--json"])
    captured = capsys.readouterr()
    report = json.loads(captured.out)
    assert code == 0
    assert report["failures"] == []
    assert report["overview"]["games"] == 3
    assert (tmp_path / "data" / "reports" / "verify.json").exists()


def test_cli_report_without_tables_exit_2(tmp_path: Path, capsys) -> None:
    code = main(["report", "--data-dir", str(tmp_path / "empty")])
    captured = capsys.readouterr()

    assert code == 2
    assert "table not built" in captured.err
