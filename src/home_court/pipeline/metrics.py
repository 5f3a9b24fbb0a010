"""Derived per-game metrics: outcome, margin and era."""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from home_court.eras import DEFAULT_ERA_BANDS, EraBand, era_expr
from home_court.errors import InvalidInputError
from home_court.schemas import enforce_schema


def derive_metrics(
    paired: pl.DataFrame, *, bands: Sequence[EraBand] = DEFAULT_ERA_BANDS
) -> pl.DataFrame:
    """Add `home_win`, `point_diff` and `era` to paired games.

    A tied score is not a home win. Seasons outside every band get a null era.
    """
    if paired is None or not isinstance(paired, pl.DataFrame):
        raise InvalidInputError("paired games must be a polars DataFrame")
    derived = paired.with_columns(
        (pl.col("home_score") > pl.col("away_score")).alias("home_win"),
        (pl.col("home_score") - pl.col("away_score")).alias("point_diff"),
        era_expr(bands).alias("era"),
    )
    return enforce_schema("games", derived)
