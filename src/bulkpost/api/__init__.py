"""HTTP routes exposing coordinator and rate limiter state."""

from .multi_status_api import router as multi_status_router
from .rate_limit_api import router as rate_limit_router

__all__ = ["multi_status_router", "rate_limit_router"]
