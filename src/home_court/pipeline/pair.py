"""Game pairing: two team-game rows per game into one home/away record."""

from __future__ import annotations

import polars as pl
from loguru import logger

from home_court.errors import InvalidInputError
from home_court.pipeline.normalize import AWAY, HOME
from home_court.schemas import enforce_schema

PAIR_SORT_KEYS: list[str] = ["season", "game_id"]


def _first_per_game(team_games: pl.DataFrame, location: str) -> pl.DataFrame:
    # First record per side in input order; extra records for the same side are dropped.
    return team_games.filter(pl.col("location") == location).unique(
        subset=["game_id"], keep="first", maintain_order=True
    )


def pair_games(team_games: pl.DataFrame) -> pl.DataFrame:
    """Merge the Home and Away rows of each game_id into one `paired_games` row.

    Games missing either side are excluded entirely. `season` and `date` come from
    the home-side record. Output is ordered by season then game_id.
    """
    if team_games is None or not isinstance(team_games, pl.DataFrame):
        raise InvalidInputError("team games must be a polars DataFrame")

    home = _first_per_game(team_games, HOME).select(
        "game_id",
        "season",
        "date",
        pl.col("team").alias("home_team"),
        pl.col("points_scored").alias("home_score"),
    )
    away = _first_per_game(team_games, AWAY).select(
        "game_id",
        pl.col("team").alias("away_team"),
        pl.col("points_scored").alias("away_score"),
    )
    paired = (
        home.join(away, on="game_id", how="inner")
        .unique(subset=["game_id"], keep="first", maintain_order=True)
        .sort(PAIR_SORT_KEYS)
    )

    total_ids = team_games.get_column("game_id").n_unique() if team_games.height else 0
    logger.debug(
        "paired games rows_in={} game_ids={} paired={} incomplete={}",
        team_games.height,
        total_ids,
        paired.height,
        total_ids - paired.height,
    )
    return enforce_schema("paired_games", paired)
