"""Configuration helpers for the home-court CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from home_court.eras import DEFAULT_ERA_BANDS, EraBand
from home_court.runtime_config import current_runtime_config


@dataclass(frozen=True)
class HomeCourtConfig:
    """Resolved runtime configuration."""

    data_dir: Path
    seasons: tuple[int, ...]
    era_bands: tuple[EraBand, ...] = DEFAULT_ERA_BANDS
    max_workers: int = 4


def resolve_data_dir(cli_value: str | None) -> Path:
    """Resolve data root from CLI/runtime config/default."""
    if cli_value and cli_value.strip():
        return Path(cli_value.strip()).expanduser()
    try:
        return current_runtime_config().data_dir
    except RuntimeError:
        pass
    return Path("data/home_court")


def load_config(*, data_dir: str | None) -> HomeCourtConfig:
    try:
        runtime = current_runtime_config()
    except RuntimeError:
        return HomeCourtConfig(
            data_dir=resolve_data_dir(data_dir),
            seasons=tuple(range(2000, 2025)),
        )
    return HomeCourtConfig(
        data_dir=resolve_data_dir(data_dir),
        seasons=tuple(runtime.seasons),
        era_bands=runtime.era_bands,
        max_workers=runtime.max_workers,
    )
