"""Retry helper with exponential backoff for async operations."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .constants import OPTIMIZATION_CONFIG

T = TypeVar("T")

RetryCallback = Callable[[int, Exception], None]
SleepFunc = Callable[[float], Awaitable[None]]


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = OPTIMIZATION_CONFIG.max_retries,
    base_delay: float = OPTIMIZATION_CONFIG.retry_base_delay,
    multiplier: float = OPTIMIZATION_CONFIG.retry_multiplier,
    on_retry: RetryCallback | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """Await ``operation()`` up to ``max_retries`` times.

    Between attempts ``on_retry(attempt, error)`` is called (``attempt``
    starts at 1) and the coroutine sleeps ``base_delay * multiplier **
    (attempt - 1)`` seconds, so the first retry waits exactly
    ``base_delay``. The last error is re-raised unchanged once attempts are
    exhausted.
    """

    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if attempt >= max_retries:
                raise
            if on_retry is not None:
                on_retry(attempt, exc)
            await sleep(base_delay * multiplier ** (attempt - 1))
        attempt += 1


__all__ = ["retry_with_backoff"]
