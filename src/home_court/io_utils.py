"""Atomic and deterministic file I/O helpers."""

from __future__ import annotations

import json
import os
import uuid
from contextlib import suppress
from pathlib import Path
from typing import Any

import polars as pl


def _tmp_path(path: Path) -> Path:
    return path.with_name(f".tmp-{path.name}-{uuid.uuid4().hex}")


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = _tmp_path(path)
    try:
        with tmp_path.open("wb") as handle:
            handle.write(data)
        os.replace(tmp_path, path)
    except OSError:
        with suppress(FileNotFoundError):
            tmp_path.unlink()
        raise


def atomic_write_text(path: Path, text: str) -> None:
    _atomic_write_bytes(path, text.encode("utf-8"))


def atomic_write_json(path: Path, payload: Any) -> None:
    text = json.dumps(payload, sort_keys=True, ensure_ascii=True, indent=2) + "\n"
    atomic_write_text(path, text)


def atomic_write_parquet(path: Path, frame: pl.DataFrame) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = _tmp_path(path)
    try:
        frame.write_parquet(tmp_path)
        os.replace(tmp_path, path)
    except OSError:
        with suppress(FileNotFoundError):
            tmp_path.unlink()
        raise


def atomic_write_csv(path: Path, frame: pl.DataFrame) -> None:
    atomic_write_text(path, frame.write_csv())
