"""Rate limiting, retries, caching and bounded fan-out for bulk posting."""

from .constants import OPTIMIZATION_CONFIG, OptimizationConfig, RateLimitTier
from .errors import ErrorKind, classify_error, is_network_error, is_rate_limit_error
from .media_cache import CachedMedia, MediaCache, media_cache
from .parallel import ItemError, ParallelResult, process_in_parallel
from .rate_limiter import GlobalRateLimiter, RateLimiterStatus, global_rate_limiter
from .retry import retry_with_backoff

__all__ = [
    "OPTIMIZATION_CONFIG",
    "OptimizationConfig",
    "RateLimitTier",
    "ErrorKind",
    "classify_error",
    "is_network_error",
    "is_rate_limit_error",
    "CachedMedia",
    "MediaCache",
    "media_cache",
    "ItemError",
    "ParallelResult",
    "process_in_parallel",
    "GlobalRateLimiter",
    "RateLimiterStatus",
    "global_rate_limiter",
    "retry_with_backoff",
]
