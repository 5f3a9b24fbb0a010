"""Transformation pipeline: normalize, pair, derive, aggregate."""

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
from home_court.pipeline.normalize import normalize_rows
from home_court.pipeline.pair import pair_games
from home_court.pipeline.run import HomeCourtTables, run_pipeline

__all__ = [
    "HomeCourtTables",
    "derive_metrics",
    "league_overview",
    "normalize_rows",
    "pair_games",
    "point_diff_distribution",
    "point_diff_long",
    "run_pipeline",
    "season_summary",
    "team_era_summary",
    "team_summary",
    "top_teams",
]
