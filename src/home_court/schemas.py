"""Column and dtype schemas for home-court tables."""

from __future__ import annotations

from typing import Any

import polars as pl

TABLE_SCHEMAS: dict[str, list[tuple[str, Any]]] = {
    "raw_game_logs": [
        ("idGame", pl.Utf8),
        ("yearSeason", pl.Int64),
        ("dateGame", pl.Utf8),
        ("nameTeam", pl.Utf8),
        ("slugOpponent", pl.Utf8),
        ("locationGame", pl.Utf8),
        ("ptsTeam", pl.Int64),
    ],
    "team_games": [
        ("game_id", pl.Utf8),
        ("season", pl.Int64),
        ("date", pl.Date),
        ("team", pl.Utf8),
        ("opponent", pl.Utf8),
        ("location", pl.Utf8),
        ("points_scored", pl.Int64),
    ],
    "paired_games": [
        ("game_id", pl.Utf8),
        ("season", pl.Int64),
        ("date", pl.Date),
        ("home_team", pl.Utf8),
        ("away_team", pl.Utf8),
        ("home_score", pl.Int64),
        ("away_score", pl.Int64),
    ],
    "games": [
        ("game_id", pl.Utf8),
        ("season", pl.Int64),
        ("date", pl.Date),
        ("home_team", pl.Utf8),
        ("away_team", pl.Utf8),
        ("home_score", pl.Int64),
        ("away_score", pl.Int64),
        ("home_win", pl.Boolean),
        ("point_diff", pl.Int64),
        ("era", pl.Utf8),
    ],
    "seasons": [
        ("season", pl.Int64),
        ("games", pl.Int64),
        ("home_win_rate", pl.Float64),
        ("mean_point_diff", pl.Float64),
    ],
    "teams": [
        ("home_team", pl.Utf8),
        ("games_played", pl.Int64),
        ("home_win_rate", pl.Float64),
    ],
    "team_eras": [
        ("home_team", pl.Utf8),
        ("era", pl.Utf8),
        ("games_played", pl.Int64),
        ("home_win_rate", pl.Float64),
    ],
    "point_diff_long": [
        ("game_id", pl.Utf8),
        ("season", pl.Int64),
        ("location", pl.Utf8),
        ("point_diff", pl.Int64),
    ],
}

SUMMARY_TABLES: tuple[str, ...] = ("games", "seasons", "teams", "team_eras", "point_diff_long")


def empty_frame(table: str) -> pl.DataFrame:
    return pl.DataFrame(schema=dict(TABLE_SCHEMAS[table]))


def enforce_schema(table: str, frame: pl.DataFrame) -> pl.DataFrame:
    """Apply schema with deterministic column ordering and dtypes."""
    schema = TABLE_SCHEMAS[table]
    columns = [name for name, _ in schema]
    working = frame
    for name, dtype in schema:
        if name not in working.columns:
            working = working.with_columns(pl.lit(None).cast(dtype).alias(name))
        else:
            working = working.with_columns(pl.col(name).cast(dtype, strict=False))
    return working.select(columns)
