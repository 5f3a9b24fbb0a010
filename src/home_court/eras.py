"""Era band table used to group seasons for longitudinal comparison."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import polars as pl


@dataclass(frozen=True)
class EraBand:
    """Closed season interval `[start, end]` carrying one era label."""

    label: str
    start: int
    end: int

    def contains(self, season: int) -> bool:
        return self.start <= season <= self.end


DEFAULT_ERA_BANDS: tuple[EraBand, ...] = (
    EraBand(label="2000s", start=2000, end=2009),
    EraBand(label="2010s", start=2010, end=2019),
    EraBand(label="2020s", start=2020, end=2024),
)


def validate_era_bands(bands: Iterable[EraBand]) -> tuple[EraBand, ...]:
    """Return bands as a tuple, raising ValueError on empty labels, inverted or overlapping bands.

    Gaps between bands are allowed; seasons in a gap simply have no era.
    """
    checked = tuple(bands)
    labels: set[str] = set()
    for band in checked:
        if not band.label.strip():
            raise ValueError("era label must be non-empty")
        if band.start > band.end:
            raise ValueError(f"era {band.label}: start {band.start} is after end {band.end}")
        if band.label in labels:
            raise ValueError(f"duplicate era label: {band.label}")
        labels.add(band.label)
    ordered = sorted(checked, key=lambda band: band.start)
    for previous, current in zip(ordered, ordered[1:]):
        if current.start <= previous.end:
            raise ValueError(
                f"era bands overlap: {previous.label} [{previous.start}, {previous.end}] "
                f"and {current.label} [{current.start}, {current.end}]"
            )
    return checked


def era_for_season(season: int, bands: Sequence[EraBand] = DEFAULT_ERA_BANDS) -> str | None:
    for band in bands:
        if band.contains(season):
            return band.label
    return None


def era_expr(
    bands: Sequence[EraBand] = DEFAULT_ERA_BANDS, *, season_col: str = "season"
) -> pl.Expr:
    """Polars expression mapping a season column to its era label, null outside every band."""
    if not bands:
        return pl.lit(None, dtype=pl.Utf8)
    season = pl.col(season_col)
    first, *rest = bands
    chain = pl.when(season.is_between(first.start, first.end, closed="both")).then(
        pl.lit(first.label)
    )
    for band in rest:
        chain = chain.when(season.is_between(band.start, band.end, closed="both")).then(
            pl.lit(band.label)
        )
    return chain.otherwise(pl.lit(None, dtype=pl.Utf8)).cast(pl.Utf8)


def era_order(bands: Sequence[EraBand]) -> dict[str, int]:
    """Label -> chronological rank, used to order era columns."""
    ordered = sorted(bands, key=lambda band: band.start)
    return {band.label: index for index, band in enumerate(ordered)}
