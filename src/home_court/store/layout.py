"""Filesystem layout helpers for home-court data."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DataLayout:
    """Resolved canonical paths for home-court storage."""

    root: Path
    raw_dir: Path
    tables_dir: Path
    reports_dir: Path

    def raw_season_path(self, season: int) -> Path:
        return self.raw_dir / f"season={int(season)}" / "game_logs.parquet"

    def table_path(self, table: str, *, ext: str = "parquet") -> Path:
        return self.tables_dir / f"{table}.{ext}"

    def verify_report_path(self) -> Path:
        return self.reports_dir / "verify.json"

    def summary_markdown_path(self) -> Path:
        return self.reports_dir / "summary.md"


def build_layout(root: Path) -> DataLayout:
    root = root.resolve()
    raw_dir = root / "raw"
    tables_dir = root / "tables"
    reports_dir = root / "reports"
    for path in (raw_dir, tables_dir, reports_dir):
        path.mkdir(parents=True, exist_ok=True)
    return DataLayout(root=root, raw_dir=raw_dir, tables_dir=tables_dir, reports_dir=reports_dir)
