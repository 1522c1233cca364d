"""Domain level exceptions for the bulk scheduling service."""

from __future__ import annotations

__all__ = [
    "BulkPostError",
    "LateResponseError",
]


class BulkPostError(Exception):
    """Base class for application specific errors."""


class LateResponseError(BulkPostError):
    """Raised when the Late API answers 2xx without the expected payload."""
