"""Persist and reload pipeline output tables."""

from __future__ import annotations

import polars as pl

from home_court.errors import HomeCourtError
from home_court.io_utils import atomic_write_csv, atomic_write_parquet
from home_court.pipeline.run import HomeCourtTables
from home_court.schemas import SUMMARY_TABLES, enforce_schema
from home_court.store.layout import DataLayout


def write_tables(layout: DataLayout, tables: HomeCourtTables) -> dict[str, int]:
    """Write every table as parquet and csv; returns row counts by table."""
    counts: dict[str, int] = {}
    for name, frame in tables.as_dict().items():
        atomic_write_parquet(layout.table_path(name), frame)
        atomic_write_csv(layout.table_path(name, ext="csv"), frame)
        counts[name] = frame.height
    return counts


def load_tables(layout: DataLayout) -> HomeCourtTables:
    frames: dict[str, pl.DataFrame] = {}
    for name in SUMMARY_TABLES:
        path = layout.table_path(name)
        if not path.exists():
            raise HomeCourtError(f"table not built: {path}; run `home-court build` first")
        frames[name] = enforce_schema(name, pl.read_parquet(path))
    return HomeCourtTables(**frames)
