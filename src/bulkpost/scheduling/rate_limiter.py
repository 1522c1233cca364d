"""Process-wide sliding-window limiter for outbound Late API calls."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable, Deque

from .constants import OPTIMIZATION_CONFIG, RateLimitTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RateLimiterStatus:
    """Snapshot reported to dashboards."""

    available_slots: int
    limit: int


class GlobalRateLimiter:
    """Grant at most ``limit`` slots within any rolling window.

    Slots free up one by one as old timestamps age out of the window, so
    there is no hard reset boundary for waiting callers to pile up on. All
    state mutations happen without suspension between the check and the
    append, which keeps the limiter safe on a single event loop without locks.
    """

    def __init__(
        self,
        limit: int = RateLimitTier.BUILD,
        *,
        window_seconds: float = OPTIMIZATION_CONFIG.rate_limit_window,
        safety_margin_seconds: float = OPTIMIZATION_CONFIG.rate_limit_safety_margin,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if safety_margin_seconds < 0:
            raise ValueError("safety_margin_seconds cannot be negative")
        self._limit = self._validate_limit(limit)
        self._window_seconds = window_seconds
        self._safety_margin_seconds = safety_margin_seconds
        self._clock = clock or time.time
        self._sleep = sleep or asyncio.sleep
        self._timestamps: Deque[float] = deque()

    @staticmethod
    def _validate_limit(limit: int) -> int:
        value = int(limit)
        if value < 1:
            raise ValueError("limit must be at least 1")
        return value

    @property
    def limit(self) -> int:
        return self._limit

    def set_limit(self, limit: int) -> None:
        """Switch the per-window cap, e.g. to another :class:`RateLimitTier`."""

        self._limit = self._validate_limit(limit)
        logger.info("rate_limiter.limit.updated", extra={"limit": self._limit})

    async def wait_for_slot(self) -> None:
        """Suspend until a slot is free, then claim it."""

        self._prune(self._clock())
        while len(self._timestamps) >= self._limit:
            wait_seconds = self._timestamps[0] + self._window_seconds - self._clock()
            if wait_seconds > 0:
                logger.debug(
                    "rate_limiter.wait",
                    extra={
                        "wait_seconds": round(wait_seconds, 3),
                        "in_window": len(self._timestamps),
                        "limit": self._limit,
                    },
                )
                await self._sleep(wait_seconds + self._safety_margin_seconds)
            self._prune(self._clock())
        self._timestamps.append(self._clock())

    def get_available_slots(self) -> int:
        """Return free slots in the current window without claiming one."""

        self._prune(self._clock())
        return self._limit - len(self._timestamps)

    def status(self) -> RateLimiterStatus:
        return RateLimiterStatus(
            available_slots=self.get_available_slots(), limit=self._limit
        )

    def reset(self) -> None:
        """Forget every recorded request."""

        self._timestamps.clear()

    def _prune(self, now: float) -> None:
        cutoff = now - self._window_seconds
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()


global_rate_limiter = GlobalRateLimiter()

__all__ = ["GlobalRateLimiter", "RateLimiterStatus", "global_rate_limiter"]
