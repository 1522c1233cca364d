"""Tuning constants for bulk scheduling against the Late API."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class RateLimitTier(IntEnum):
    """Late API pricing tiers expressed as requests per minute."""

    FREE = 60
    BUILD = 120
    ACCELERATE = 600
    UNLIMITED = 1200


@dataclass(frozen=True, slots=True)
class OptimizationConfig:
    """Timing and sizing knobs shared by the scheduling helpers.

    Durations are in seconds.
    """

    max_concurrent_posts: int = 3
    delay_between_posts: float = 2.0
    delay_between_batches: float = 5.0
    verification_delay: float = 5.0
    verification_attempts: int = 2
    max_retries: int = 3
    retry_base_delay: float = 1.0
    retry_multiplier: float = 2.0
    batch_size: int = 10
    request_timeout: float = 30.0
    media_cache_ttl: float = 3600.0
    media_cache_max_entries: int = 100
    rate_limit_window: float = 60.0
    rate_limit_safety_margin: float = 0.1
    max_concurrent_series: int = 5
    max_series_per_request: int = 15


OPTIMIZATION_CONFIG = OptimizationConfig()

LATE_API_BASE_URL = "https://getlate.dev/api/v1"

__all__ = [
    "LATE_API_BASE_URL",
    "OPTIMIZATION_CONFIG",
    "OptimizationConfig",
    "RateLimitTier",
]
