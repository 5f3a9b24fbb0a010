"""Loguru sink configuration."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

VALID_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: str = "INFO") -> str:
    """Replace loguru's default handler with one stderr sink; returns the level applied."""
    resolved = level.strip().upper() if level else "INFO"
    if resolved not in VALID_LEVELS:
        resolved = "INFO"
    logger.remove()
    logger.add(
        sys.stderr,
        level=resolved,
        format=LOG_FORMAT,
        colorize=sys.stderr.isatty(),
        backtrace=False,
        diagnose=False,
    )
    return resolved
