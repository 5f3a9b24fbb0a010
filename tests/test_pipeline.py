from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from home_court.errors import InvalidInputError
from home_court.ingest.fetch import SeasonFetchResult, combine_season_frames
from home_court.pipeline.run import run_pipeline
from home_court.store.layout import build_layout
from home_court.store.tables import load_tables, write_tables

RAW_SCHEMA = {
    "idGame": pl.Utf8,
    "yearSeason": pl.Int64,
    "dateGame": pl.Utf8,
    "nameTeam": pl.Utf8,
    "slugOpponent": pl.Utf8,
    "locationGame": pl.Utf8,
    "ptsTeam": pl.Int64,
}


def _raw(rows: list[tuple]) -> pl.DataFrame:
    return pl.DataFrame(rows, schema=RAW_SCHEMA, orient="row")


def _league() -> pl.DataFrame:
    return _raw(
        [
            ("G1", 2015, "2014-10-28", "A", "B", "H", 100),
            ("G1", 2015, "2014-10-28", "B", "A", "A", 95),
            ("G2", 2015, "2014-10-29", "C", "D", "H", 80),
            ("G3", 2015, "2014-10-30", "C", "A", "H", 90),
            ("G3", 2015, "2014-10-30", "A", "C", "A", 90),
            ("G4", 2030, "2029-11-01", "B", "C", "H", 101),
            ("G4", 2030, "2029-11-01", "C", "B", "A", 99),
            ("G5", 2015, "2014-11-02", "B", "A", "H", 90),
            ("G5", 2015, "2014-11-02", "A", "B", "A", 99),
            ("G6", 2015, "2014-11-03", "D", "A", "X", 100),
            ("G6", 2015, "2014-11-03", "A", "D", "A", 98),
        ]
    )


def _game(tables, game_id: str) -> dict:
    rows = tables.games.filter(pl.col("game_id") == game_id).to_dicts()
    assert len(rows) <= 1
    return rows[0] if rows else {}


def test_home_win_scenario() -> None:
    tables = run_pipeline(_league())

    game = _game(tables, "G1")
    assert game["home_team"] == "A"
    assert game["away_team"] == "B"
    assert game["home_score"] == 100
    assert game["away_score"] == 95
    assert game["home_win"] is True
    assert game["point_diff"] == 5
    assert game["era"] == "2010s"


def test_home_only_game_is_excluded() -> None:
    tables = run_pipeline(_league())

    assert _game(tables, "G2") == {}
    assert "G2" not in tables.point_diff_long.get_column("game_id").to_list()


def test_tied_game_is_not_a_home_win() -> None:
    tables = run_pipeline(_league())

    game = _game(tables, "G3")
    assert game["home_win"] is False
    assert game["point_diff"] == 0


def test_unresolved_location_leaves_game_incomplete() -> None:
    tables = run_pipeline(_league())

    assert _game(tables, "G6") == {}


def test_pairing_completeness_and_exclusion() -> None:
    raw = _league()
    tables = run_pipeline(raw)

    sides = (
        raw.filter(pl.col("locationGame").is_in(["H", "A"]))
        .group_by("idGame")
        .agg(pl.col("locationGame").n_unique().alias("sides"))
    )
    complete = set(sides.filter(pl.col("sides") == 2).get_column("idGame").to_list())
    assert set(tables.games.get_column("game_id").to_list()) == complete
    assert tables.games.get_column("game_id").is_unique().all()


def test_season_out_of_era_counts_for_seasons_but_not_eras() -> None:
    tables = run_pipeline(_league())

    assert 2030 in tables.seasons.get_column("season").to_list()
    assert _game(tables, "G4")["era"] is None
    assert tables.team_eras.get_column("era").null_count() == 0
    assert tables.team_eras.filter(pl.col("home_team") == "B").get_column(
        "games_played"
    ).to_list() == [1]


def test_season_rate_is_mean_over_season_games() -> None:
    tables = run_pipeline(_league())

    for row in tables.seasons.iter_rows(named=True):
        season_games = tables.games.filter(pl.col("season") == row["season"])
        expected = season_games.get_column("home_win").cast(pl.Float64).mean()
        assert row["home_win_rate"] == pytest.approx(expected)
        assert 0.0 <= row["home_win_rate"] <= 1.0
        assert row["games"] == season_games.height


def test_pipeline_is_idempotent(tmp_path: Path) -> None:
    raw = _league()
    first = run_pipeline(raw)
    second = run_pipeline(raw.clone())

    for name, frame in first.as_dict().items():
        assert frame.equals(second.as_dict()[name]), name

    layout_a = build_layout(tmp_path / "a")
    layout_b = build_layout(tmp_path / "b")
    write_tables(layout_a, first)
    write_tables(layout_b, second)
    for name in first.as_dict():
        path_a = layout_a.table_path(name, ext="csv")
        path_b = layout_b.table_path(name, ext="csv")
        assert path_a.read_bytes() == path_b.read_bytes()


def test_written_tables_round_trip(tmp_path: Path) -> None:
    tables = run_pipeline(_league())
    layout = build_layout(tmp_path / "data")

    counts = write_tables(layout, tables)
    loaded = load_tables(layout)

    assert counts["games"] == tables.games.height
    assert loaded.teams.equals(tables.teams)
    assert loaded.games.equals(tables.games)


def test_failed_season_contributes_no_rows() -> None:
    good = _league().filter(pl.col("yearSeason") == 2015)
    results = [
        SeasonFetchResult(season=2016, frame=None, error="timeout"),
        SeasonFetchResult(season=2015, frame=good),
    ]

    tables = run_pipeline(combine_season_frames(results))

    assert tables.seasons.get_column("season").to_list() == [2015]


def test_all_seasons_failed_yields_empty_summaries() -> None:
    results = [SeasonFetchResult(season=2015, frame=None, error="boom")]

    tables = run_pipeline(combine_season_frames(results))

    assert tables.games.height == 0
    assert tables.seasons.height == 0
    assert tables.teams.height == 0
    assert tables.team_eras.height == 0


def test_season_missing_required_fields_is_skipped() -> None:
    results = [
        SeasonFetchResult(season=2016, frame=pl.DataFrame({"unexpected": [1, 2]})),
        SeasonFetchResult(season=2017, frame=None, error="timeout"),
        SeasonFetchResult(season=2015, frame=_league().filter(pl.col("yearSeason") == 2015)),
    ]

    tables = run_pipeline(combine_season_frames(results))
    only_bad = run_pipeline(combine_season_frames(results[:2]))

    assert tables.seasons.get_column("season").to_list() == [2015]
    assert only_bad.games.height == 0
    assert only_bad.seasons.height == 0


def test_invalid_input_raises() -> None:
    with pytest.raises(InvalidInputError):
        run_pipeline(None)  # type: ignore[arg-type]
