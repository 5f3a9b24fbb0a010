from __future__ import annotations

import polars as pl
import pytest

from home_court.eras import DEFAULT_ERA_BANDS
from home_court.pipeline.aggregate import (
    league_overview,
    point_diff_distribution,
    point_diff_long,
    season_summary,
    team_era_summary,
    team_summary,
    top_teams,
)
from home_court.pipeline.metrics import derive_metrics
from home_court.schemas import empty_frame, enforce_schema


def _games() -> pl.DataFrame:
    rows = [
        ("G1", 2015, "A", "B", 100, 95),
        ("G2", 2015, "B", "A", 90, 99),
        ("G3", 2015, "C", "A", 90, 90),
        ("G4", 2016, "A", "C", 110, 100),
        ("G5", 2030, "C", "B", 101, 100),
    ]
    paired = pl.DataFrame(
        [
            {
                "game_id": game_id,
                "season": season,
                "home_team": home,
                "away_team": away,
                "home_score": home_score,
                "away_score": away_score,
            }
            for game_id, season, home, away, home_score, away_score in rows
        ]
    )
    return derive_metrics(enforce_schema("paired_games", paired))


def test_season_summary_rates_and_means() -> None:
    seasons = season_summary(_games())

    assert seasons.get_column("season").to_list() == [2015, 2016, 2030]
    assert seasons.get_column("games").to_list() == [3, 1, 1]
    assert seasons.get_column("home_win_rate").to_list() == pytest.approx([1 / 3, 1.0, 1.0])
    assert seasons.get_column("mean_point_diff").to_list() == pytest.approx([-4 / 3, 10.0, 1.0])


def test_season_summary_rate_bounds() -> None:
    seasons = season_summary(_games())

    rates = seasons.get_column("home_win_rate")
    assert rates.min() >= 0.0
    assert rates.max() <= 1.0


def test_team_summary_counts_home_games_only_and_ranks() -> None:
    teams = team_summary(_games())

    assert teams.get_column("home_team").to_list() == ["A", "C", "B"]
    assert teams.get_column("games_played").to_list() == [2, 2, 1]
    assert teams.get_column("home_win_rate").to_list() == pytest.approx([1.0, 0.5, 0.0])


def test_team_summary_ties_keep_team_order() -> None:
    games = _games().filter(pl.col("game_id").is_in(["G1", "G5"]))

    teams = team_summary(games)

    assert teams.get_column("home_team").to_list() == ["A", "C"]
    assert top_teams(teams, 1).get_column("home_team").to_list() == ["A"]


def test_team_era_summary_excludes_games_without_era() -> None:
    team_eras = team_era_summary(_games(), DEFAULT_ERA_BANDS)

    assert team_eras.select(["home_team", "era"]).rows() == [
        ("A", "2010s"),
        ("B", "2010s"),
        ("C", "2010s"),
    ]
    assert team_eras.get_column("games_played").to_list() == [2, 1, 1]
    assert team_eras.get_column("home_win_rate").to_list() == pytest.approx([1.0, 0.0, 0.0])


def test_team_era_summary_orders_eras_chronologically() -> None:
    games = _games().with_columns(
        pl.when(pl.col("season") == 2016)
        .then(pl.lit("2000s"))
        .otherwise(pl.col("era"))
        .alias("era")
    )

    team_eras = team_era_summary(games, DEFAULT_ERA_BANDS)

    assert team_eras.filter(pl.col("home_team") == "A").get_column("era").to_list() == [
        "2000s",
        "2010s",
    ]


def test_point_diff_long_mirrors_each_game() -> None:
    games = _games()

    long_frame = point_diff_long(games)

    assert long_frame.height == 2 * games.height
    home = long_frame.filter(pl.col("location") == "Home").get_column("point_diff").to_list()
    away = long_frame.filter(pl.col("location") == "Away").get_column("point_diff").to_list()
    assert away == [-value for value in home]


def test_point_diff_distribution() -> None:
    stats = point_diff_distribution(point_diff_long(_games()))

    assert stats.get_column("location").to_list() == ["Home", "Away"]
    home = stats.row(0, named=True)
    assert home["games"] == 5
    assert home["min"] == -9.0
    assert home["max"] == 10.0
    assert home["median"] == 1.0
    assert home["mean"] == pytest.approx(1.4)


def test_league_overview() -> None:
    overview = league_overview(_games())

    assert overview["games"] == 5
    assert overview["seasons"] == 3
    assert overview["teams"] == 3
    assert overview["home_win_rate"] == pytest.approx(0.6)
    assert overview["first_date"] is None


def test_aggregates_on_empty_games() -> None:
    games = empty_frame("games")

    assert season_summary(games).height == 0
    assert team_summary(games).height == 0
    assert team_era_summary(games, DEFAULT_ERA_BANDS).height == 0
    assert league_overview(games)["home_win_rate"] is None
