"""Raw season cache on top of a season fetcher."""

from __future__ import annotations

from collections.abc import Iterable

import polars as pl
from loguru import logger

from home_court.ingest.fetch import SeasonFetcher, SeasonFetchResult, fetch_seasons
from home_court.io_utils import atomic_write_parquet
from home_court.store.layout import DataLayout


def load_raw_seasons(
    *,
    layout: DataLayout,
    seasons: Iterable[int],
    fetcher: SeasonFetcher | None,
    max_workers: int = 1,
    refresh: bool = False,
) -> list[SeasonFetchResult]:
    """Read cached seasons and fetch the rest; fetched seasons are written back to the cache.

    With no fetcher, uncached seasons come back as failed results.
    """
    targets = sorted({int(season) for season in seasons})
    results: dict[int, SeasonFetchResult] = {}
    missing: list[int] = []
    for season in targets:
        path = layout.raw_season_path(season)
        if path.exists() and not refresh:
            results[season] = SeasonFetchResult(season=season, frame=pl.read_parquet(path))
        else:
            missing.append(season)

    if missing and fetcher is None:
        for season in missing:
            logger.warning("Failed for season: {}: not cached and fetching disabled", season)
            results[season] = SeasonFetchResult(season=season, frame=None, error="not cached")
    elif missing and fetcher is not None:
        for result in fetch_seasons(missing, fetcher, max_workers=max_workers):
            if result.frame is not None:
                atomic_write_parquet(layout.raw_season_path(result.season), result.frame)
            results[result.season] = result

    logger.debug(
        "raw seasons requested={} cached={} fetched={}",
        len(targets),
        len(targets) - len(missing),
        len(missing),
    )
    return [results[season] for season in targets]
