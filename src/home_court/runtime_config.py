"""Season range, storage root, fetch tuning and era bands from `config/runtime.toml`."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from home_court.eras import DEFAULT_ERA_BANDS, EraBand, validate_era_bands

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "runtime.toml"
LOCAL_OVERLAY_PATH = CONFIG_DIR / "runtime.local.toml"

DEFAULT_SEASON_START = 2000
DEFAULT_SEASON_END = 2024


@dataclass(frozen=True)
class RuntimeConfig:
    """Resolved runtime.toml values."""

    config_path: Path
    data_dir: Path
    season_start: int
    season_end: int
    max_workers: int
    season_type: str
    requests_per_minute: int
    era_bands: tuple[EraBand, ...]

    @property
    def seasons(self) -> list[int]:
        return list(range(self.season_start, self.season_end + 1))


_active: RuntimeConfig | None = None


def set_current_runtime_config(config: RuntimeConfig | None) -> None:
    """Pin (or with `None`, clear) the config returned by `current_runtime_config`."""
    global _active
    _active = config


def current_runtime_config() -> RuntimeConfig:
    config = _active
    if config is not None:
        return config
    loaded = load_runtime_config()
    set_current_runtime_config(loaded)
    return loaded


def _overlay(base: dict[str, Any], local: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in local.items():
        current = merged.get(key)
        merged[key] = (
            _overlay(current, value)
            if isinstance(current, dict) and isinstance(value, dict)
            else value
        )
    return merged


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise RuntimeError(f"cannot read runtime config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise RuntimeError(f"runtime config {path} is not valid TOML: {exc}") from exc


def _section(payload: dict[str, Any], name: str) -> dict[str, Any]:
    section = payload.get(name) or {}
    if not isinstance(section, dict):
        raise RuntimeError(f"runtime config [{name}] must be a table")
    return section


def _text(section: dict[str, Any], key: str, default: str) -> str:
    value = section.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _whole(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _data_dir(paths: dict[str, Any], base_dir: Path) -> Path:
    path = Path(_text(paths, "data_dir", "data/home_court")).expanduser()
    return path if path.is_absolute() else (base_dir / path).resolve()


def _era_bands(entries: Any) -> tuple[EraBand, ...]:
    if entries is None:
        return DEFAULT_ERA_BANDS
    if not isinstance(entries, list):
        raise RuntimeError("runtime config [[eras]] must be an array of tables")
    bands: list[EraBand] = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) or not {"label", "start", "end"} <= entry.keys():
            raise RuntimeError(f"runtime config eras[{position}] needs label, start and end")
        bands.append(
            EraBand(
                label=str(entry["label"]).strip(),
                start=_whole(entry, "start", 0),
                end=_whole(entry, "end", 0),
            )
        )
    try:
        return validate_era_bands(bands)
    except ValueError as exc:
        raise RuntimeError(f"invalid runtime config eras: {exc}") from exc


def load_runtime_config(config_path: Path | None = None) -> RuntimeConfig:
    """Read runtime config; the default file also picks up `runtime.local.toml` when present."""
    source = (config_path or DEFAULT_CONFIG_PATH).expanduser().resolve()
    if not source.exists():
        raise RuntimeError(f"runtime config file not found: {source}")
    payload = _load_toml(source)
    if source == DEFAULT_CONFIG_PATH and LOCAL_OVERLAY_PATH.exists():
        payload = _overlay(payload, _load_toml(LOCAL_OVERLAY_PATH))

    seasons = _section(payload, "seasons")
    fetch = _section(payload, "fetch")
    start = _whole(seasons, "start", DEFAULT_SEASON_START)
    end = _whole(seasons, "end", DEFAULT_SEASON_END)
    if start > end:
        raise RuntimeError(f"runtime config [seasons] start {start} is after end {end}")

    return RuntimeConfig(
        config_path=source,
        data_dir=_data_dir(_section(payload, "paths"), source.parent),
        season_start=start,
        season_end=end,
        max_workers=max(1, _whole(fetch, "max_workers", 4)),
        season_type=_text(fetch, "season_type", "Regular Season"),
        requests_per_minute=max(1, _whole(fetch, "requests_per_minute", 20)),
        era_bands=_era_bands(payload.get("eras")),
    )
