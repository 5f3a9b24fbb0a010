"""Row normalization: raw per-team game logs to canonical team-game records."""

from __future__ import annotations

import re

import polars as pl
from loguru import logger

from home_court.errors import InvalidInputError
from home_court.schemas import enforce_schema

HOME = "Home"
AWAY = "Away"

# Cleaned raw name candidates per canonical field, first present wins.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "game_id": ("id_game", "game_id"),
    "season": ("year_season", "season"),
    "date": ("date_game", "game_date", "date"),
    "team": ("name_team", "team_name", "team"),
    "opponent": ("slug_opponent", "opponent_identifier", "opponent"),
    "location_code": ("location_game", "location_code", "location"),
    "points_scored": ("pts_team", "points_scored", "pts"),
}

REQUIRED_FIELDS: tuple[str, ...] = ("game_id", "season", "team", "location_code", "points_scored")


def clean_column_name(name: str) -> str:
    """snake_case a raw column name: `idGame` -> `id_game`, `GAME_ID` -> `game_id`."""
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name.strip())
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "_", spaced).strip("_").lower()
    return cleaned or "x"


def clean_names(frame: pl.DataFrame) -> pl.DataFrame:
    mapping: dict[str, str] = {}
    seen: set[str] = set()
    for column in frame.columns:
        cleaned = clean_column_name(column)
        candidate = cleaned
        suffix = 2
        while candidate in seen:
            candidate = f"{cleaned}_{suffix}"
            suffix += 1
        seen.add(candidate)
        mapping[column] = candidate
    return frame.rename(mapping)


def resolve_fields(columns: list[str]) -> dict[str, str]:
    """Map canonical field -> cleaned source column; raises when a required field is absent."""
    available = set(columns)
    resolved: dict[str, str] = {}
    for field, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            if alias in available:
                resolved[field] = alias
                break
    missing = [field for field in REQUIRED_FIELDS if field not in resolved]
    if missing:
        raise InvalidInputError(f"raw game logs missing required fields: {','.join(missing)}")
    return resolved


def location_expr(column: str = "location_code") -> pl.Expr:
    code = pl.col(column).cast(pl.Utf8).str.strip_chars().str.to_uppercase()
    return (
        pl.when(code == "H")
        .then(pl.lit(HOME))
        .when(code == "A")
        .then(pl.lit(AWAY))
        .otherwise(pl.lit(None, dtype=pl.Utf8))
    )


def _score_expr(frame: pl.DataFrame, column: str) -> pl.Expr:
    score = pl.col(column)
    if frame.schema[column].is_float():
        score = pl.when(score == score.floor()).then(score).otherwise(None)
    return score.cast(pl.Int64, strict=False)


def _date_expr(frame: pl.DataFrame, column: str | None) -> pl.Expr:
    if column is None:
        return pl.lit(None, dtype=pl.Date)
    dtype = frame.schema[column]
    if dtype == pl.Utf8:
        text = pl.col(column).str.strip_chars().str.slice(0, 10)
        return text.str.to_date("%Y-%m-%d", strict=False)
    if dtype == pl.Datetime:
        return pl.col(column).dt.date()
    return pl.col(column).cast(pl.Date, strict=False)


def normalize_rows(raw: pl.DataFrame) -> pl.DataFrame:
    """Clean, project and filter raw team game logs into the `team_games` schema.

    Rows whose location code is not `H` or `A` are dropped, as are malformed rows
    (missing game id or team, missing, negative or unparseable score). The input frame
    is never modified.
    """
    if raw is None or not isinstance(raw, pl.DataFrame):
        raise InvalidInputError(
            f"raw game logs must be a polars DataFrame, got {type(raw).__name__}"
        )

    cleaned = clean_names(raw)
    fields = resolve_fields(cleaned.columns)
    opponent_col = fields.get("opponent")

    projected = cleaned.select(
        pl.col(fields["game_id"]).cast(pl.Utf8).str.strip_chars().alias("game_id"),
        pl.col(fields["season"]).cast(pl.Int64, strict=False).alias("season"),
        _date_expr(cleaned, fields.get("date")).alias("date"),
        pl.col(fields["team"]).cast(pl.Utf8).str.strip_chars().alias("team"),
        (
            pl.col(opponent_col).cast(pl.Utf8).str.strip_chars()
            if opponent_col is not None
            else pl.lit(None, dtype=pl.Utf8)
        ).alias("opponent"),
        location_expr(fields["location_code"]).alias("location"),
        _score_expr(cleaned, fields["points_scored"]).alias("points_scored"),
    )

    located = projected.filter(pl.col("location").is_not_null())
    unresolved = projected.height - located.height
    valid = located.filter(
        pl.col("game_id").is_not_null()
        & (pl.col("game_id") != "")
        & pl.col("team").is_not_null()
        & (pl.col("team") != "")
        & pl.col("season").is_not_null()
        & pl.col("points_scored").is_not_null()
        & (pl.col("points_scored") >= 0)
    )
    logger.debug(
        "normalized team games rows_in={} rows_out={} unresolved_location={} malformed={}",
        raw.height,
        valid.height,
        unresolved,
        located.height - valid.height,
    )
    return enforce_schema("team_games", valid)
