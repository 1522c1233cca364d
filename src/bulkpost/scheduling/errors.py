"""Classification of failures raised while talking to the Late API.

Errors are left untouched as they propagate (the retrier re-raises the
caught ``httpx`` exception itself); these predicates inspect them once at the
boundary so callers can branch on an :class:`ErrorKind` instead of poking at
``response``/``code`` attributes ad hoc.
"""

from __future__ import annotations

from enum import Enum

import httpx

_RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


class ErrorKind(str, Enum):
    """Coarse failure categories used for logging and handling decisions."""

    TRANSIENT = "transient"
    RATE_LIMITED = "rate_limited"
    NETWORK = "network"
    FATAL = "fatal"


def _status_code(error: BaseException) -> int | None:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


def is_rate_limit_error(error: BaseException) -> bool:
    """Return ``True`` for HTTP 429 responses or messages mentioning 429."""

    if _status_code(error) == 429:
        return True
    return "429" in str(error)


def is_network_error(error: BaseException) -> bool:
    """Return ``True`` when the request never produced an HTTP response.

    ``httpx.RequestError`` covers connection failures, timeouts and broken
    transports.
    """

    return isinstance(error, httpx.RequestError)


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception onto an :class:`ErrorKind`."""

    if is_rate_limit_error(error):
        return ErrorKind.RATE_LIMITED
    if is_network_error(error):
        return ErrorKind.NETWORK
    status = _status_code(error)
    if status is not None and 400 <= status < 500:
        if status in _RETRYABLE_CLIENT_STATUSES:
            return ErrorKind.TRANSIENT
        return ErrorKind.FATAL
    return ErrorKind.TRANSIENT


__all__ = ["ErrorKind", "classify_error", "is_network_error", "is_rate_limit_error"]
