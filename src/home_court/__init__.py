"""NBA home-court advantage: season game logs to paired games and summary tables."""

from home_court.eras import DEFAULT_ERA_BANDS, EraBand
from home_court.pipeline.run import HomeCourtTables, run_pipeline

__all__ = [
    "DEFAULT_ERA_BANDS",
    "EraBand",
    "HomeCourtTables",
    "run_pipeline",
]
