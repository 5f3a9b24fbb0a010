"""Grouped summaries over analysis games."""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from home_court.eras import EraBand, era_order
from home_court.errors import InvalidInputError
from home_court.pipeline.normalize import AWAY, HOME
from home_court.schemas import enforce_schema


def _require_frame(games: pl.DataFrame) -> None:
    if games is None or not isinstance(games, pl.DataFrame):
        raise InvalidInputError("analysis games must be a polars DataFrame")


def _home_win_rate() -> pl.Expr:
    return pl.col("home_win").cast(pl.Float64).mean().alias("home_win_rate")


def season_summary(games: pl.DataFrame) -> pl.DataFrame:
    _require_frame(games)
    summary = (
        games.group_by("season")
        .agg(
            pl.len().alias("games"),
            _home_win_rate(),
            pl.col("point_diff").cast(pl.Float64).mean().alias("mean_point_diff"),
        )
        .sort("season")
    )
    return enforce_schema("seasons", summary)


def team_summary(games: pl.DataFrame) -> pl.DataFrame:
    """Home-side record per team, ranked by descending home win rate.

    Groups are first ordered by team name; the ranking sort is stable so teams with
    equal rates keep that order.
    """
    _require_frame(games)
    summary = (
        games.group_by("home_team")
        .agg(pl.len().alias("games_played"), _home_win_rate())
        .sort("home_team")
        .sort("home_win_rate", descending=True, maintain_order=True)
    )
    return enforce_schema("teams", summary)


def top_teams(teams: pl.DataFrame, n: int = 10) -> pl.DataFrame:
    return teams.head(max(0, int(n)))


def team_era_summary(games: pl.DataFrame, bands: Sequence[EraBand] = ()) -> pl.DataFrame:
    """Home win rate per (team, era); games without an era are left out.

    Eras are ordered chronologically when `bands` is given, by label otherwise.
    """
    _require_frame(games)
    summary = (
        games.filter(pl.col("era").is_not_null())
        .group_by(["home_team", "era"])
        .agg(pl.len().alias("games_played"), _home_win_rate())
    )
    ranks = era_order(bands)
    if ranks:
        summary = (
            summary.with_columns(
                pl.col("era").replace_strict(ranks, default=len(ranks), return_dtype=pl.Int64)
                .alias("_era_rank")
            )
            .sort(["home_team", "_era_rank", "era"])
            .drop("_era_rank")
        )
    else:
        summary = summary.sort(["home_team", "era"])
    return enforce_schema("team_eras", summary)


def point_diff_long(games: pl.DataFrame) -> pl.DataFrame:
    """Each game twice: the home margin as `Home` and its negation as `Away`."""
    _require_frame(games)
    home = games.select(
        "game_id",
        "season",
        pl.lit(HOME).alias("location"),
        pl.col("point_diff"),
    )
    away = games.select(
        "game_id",
        "season",
        pl.lit(AWAY).alias("location"),
        (-pl.col("point_diff")).alias("point_diff"),
    )
    return enforce_schema("point_diff_long", pl.concat([home, away], how="vertical"))


def point_diff_distribution(long_frame: pl.DataFrame) -> pl.DataFrame:
    """Five-number summary plus mean of point differential per location."""
    diff = pl.col("point_diff").cast(pl.Float64)
    stats = long_frame.group_by("location").agg(
        pl.len().alias("games"),
        diff.min().alias("min"),
        diff.quantile(0.25, interpolation="linear").alias("q1"),
        diff.median().alias("median"),
        diff.quantile(0.75, interpolation="linear").alias("q3"),
        diff.max().alias("max"),
        diff.mean().alias("mean"),
    )
    order = {HOME: 0, AWAY: 1}
    return (
        stats.with_columns(
            pl.col("location").replace_strict(order, default=2, return_dtype=pl.Int64)
            .alias("_order")
        )
        .sort("_order")
        .drop("_order")
        .with_columns(pl.col("games").cast(pl.Int64))
    )


def league_overview(games: pl.DataFrame) -> dict[str, object]:
    _require_frame(games)
    if games.height == 0:
        return {
            "games": 0,
            "seasons": 0,
            "teams": 0,
            "home_win_rate": None,
            "mean_point_diff": None,
            "first_date": None,
            "last_date": None,
        }
    first_date = games.get_column("date").min()
    last_date = games.get_column("date").max()
    return {
        "games": games.height,
        "seasons": games.get_column("season").n_unique(),
        "teams": games.get_column("home_team").n_unique(),
        "home_win_rate": float(games.get_column("home_win").cast(pl.Float64).mean()),
        "mean_point_diff": float(games.get_column("point_diff").cast(pl.Float64).mean()),
        "first_date": first_date.isoformat() if first_date is not None else None,
        "last_date": last_date.isoformat() if last_date is not None else None,
    }
