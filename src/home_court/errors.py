"""Error types for home-court flows."""

from __future__ import annotations


class HomeCourtError(RuntimeError):
    """Base error for home-court operations."""


class InvalidInputError(HomeCourtError):
    """Raised when a pipeline stage receives a structurally invalid input."""


class FetchError(HomeCourtError):
    """Raised when one season of game logs could not be fetched."""


class CLIError(HomeCourtError):
    """User-facing CLI error for home-court commands."""
