"""End-to-end pipeline from raw team game logs to summary tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import polars as pl
from loguru import logger

from home_court.eras import DEFAULT_ERA_BANDS, EraBand, validate_era_bands
from home_court.pipeline.aggregate import (
    point_diff_long,
    season_summary,
    team_era_summary,
    team_summary,
)
from home_court.pipeline.metrics import derive_metrics
from home_court.pipeline.normalize import normalize_rows
from home_court.pipeline.pair import pair_games


@dataclass(frozen=True)
class HomeCourtTables:
    """Pipeline outputs handed to presentation and storage."""

    games: pl.DataFrame
    seasons: pl.DataFrame
    teams: pl.DataFrame
    team_eras: pl.DataFrame
    point_diff_long: pl.DataFrame

    def as_dict(self) -> dict[str, pl.DataFrame]:
        return {
            "games": self.games,
            "seasons": self.seasons,
            "teams": self.teams,
            "team_eras": self.team_eras,
            "point_diff_long": self.point_diff_long,
        }


def run_pipeline(
    raw: pl.DataFrame, *, bands: Sequence[EraBand] = DEFAULT_ERA_BANDS
) -> HomeCourtTables:
    checked = validate_era_bands(bands)
    team_games = normalize_rows(raw)
    games = derive_metrics(pair_games(team_games), bands=checked)
    tables = HomeCourtTables(
        games=games,
        seasons=season_summary(games),
        teams=team_summary(games),
        team_eras=team_era_summary(games, checked),
        point_diff_long=point_diff_long(games),
    )
    logger.info(
        "pipeline complete raw_rows={} games={} seasons={} teams={}",
        raw.height,
        games.height,
        tables.seasons.height,
        tables.teams.height,
    )
    return tables
