"""Integrity and sanity checks for built home-court tables."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import polars as pl

from home_court.eras import DEFAULT_ERA_BANDS, EraBand, era_for_season
from home_court.ingest.fetch import SeasonFetchResult
from home_court.pipeline.aggregate import league_overview
from home_court.pipeline.run import HomeCourtTables


def _download_section(
    seasons: Sequence[int], results: Sequence[SeasonFetchResult] | None
) -> dict[str, Any]:
    requested = sorted({int(season) for season in seasons})
    if results is None:
        return {"seasons_requested": len(requested)}
    by_season = {result.season: result for result in results}
    with_rows = [
        season for season in requested if season in by_season and by_season[season].rows > 0
    ]
    failed = [
        season for season in requested if season not in by_season or not by_season[season].ok
    ]
    return {
        "seasons_requested": len(requested),
        "seasons_with_rows": len(with_rows),
        "failed_seasons": failed,
        "raw_rows": sum(result.rows for result in results),
    }


def run_verify(
    *,
    tables: HomeCourtTables,
    seasons: Sequence[int],
    results: Sequence[SeasonFetchResult] | None = None,
    fail_on_warn: bool = False,
    bands: Sequence[EraBand] = DEFAULT_ERA_BANDS,
) -> tuple[int, dict[str, Any]]:
    games = tables.games
    failures: list[str] = []
    warnings: list[str] = []

    download = _download_section(seasons, results)
    if download.get("failed_seasons"):
        warnings.append(f"failed seasons={len(download['failed_seasons'])}")

    if games.height == 0:
        warnings.append("no paired games")

    dup = games.group_by("game_id").len().filter(pl.col("len") > 1)
    if dup.height > 0:
        failures.append(f"games duplicate game_id rows={dup.height}")

    mismatched = games.filter(pl.col("home_win") != (pl.col("point_diff") > 0))
    if mismatched.height > 0:
        failures.append(f"home_win disagrees with point_diff rows={mismatched.height}")

    for name, frame in (
        ("seasons", tables.seasons),
        ("teams", tables.teams),
        ("team_eras", tables.team_eras),
    ):
        out_of_range = frame.filter(
            pl.col("home_win_rate").is_null()
            | (pl.col("home_win_rate") < 0.0)
            | (pl.col("home_win_rate") > 1.0)
        )
        if out_of_range.height > 0:
            failures.append(f"{name} home_win_rate outside [0, 1] rows={out_of_range.height}")

    missing = {
        "home_win": games.get_column("home_win").null_count(),
        "point_diff": games.get_column("point_diff").null_count(),
        "era": games.get_column("era").null_count(),
    }
    if missing["home_win"] or missing["point_diff"]:
        failures.append(
            f"missing outcome values home_win={missing['home_win']} "
            f"point_diff={missing['point_diff']}"
        )
    if missing["era"]:
        warnings.append(f"games outside every era band rows={missing['era']}")

    games_per_season = {
        str(row["season"]): int(row["games"]) for row in tables.seasons.iter_rows(named=True)
    }

    seasons_without_era = [
        season
        for season in sorted({int(season) for season in seasons})
        if era_for_season(season, bands) is None
    ]

    report = {
        "download": download,
        "seasons_without_era": seasons_without_era,
        "overview": league_overview(games),
        "games_per_season": games_per_season,
        "missing": missing,
        "counts": {name: frame.height for name, frame in tables.as_dict().items()},
        "failures": failures,
        "warnings": warnings,
    }
    if failures:
        return 1, report
    if fail_on_warn and warnings:
        return 1, report
    return 0, report
