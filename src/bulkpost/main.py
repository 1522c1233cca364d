"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI

from .config import AppConfig
from .dependencies import include_routers
from .logging import configure_logging
from .scheduling.media_cache import MediaCache
from .scheduling.rate_limiter import GlobalRateLimiter, global_rate_limiter
from .series.series_coordinator import SeriesCoordinator, series_coordinator
from .series.series_queue import SeriesRepository


def _build_cache(config: AppConfig) -> MediaCache:
    return MediaCache(
        ttl_seconds=config.media_cache_ttl_seconds,
        max_entries=config.media_cache_max_entries,
    )


def create_app(
    config: AppConfig | None = None,
    *,
    rate_limiter: GlobalRateLimiter | None = None,
    coordinator: SeriesCoordinator | None = None,
    cache: MediaCache | None = None,
    series_repository: SeriesRepository | None = None,
) -> FastAPI:
    """Build FastAPI instance; process-wide singletons are used unless overridden."""
    configure_logging()
    cfg = config or AppConfig.build_default()
    app = FastAPI(title="BulkPost")
    include_routers(
        app,
        cfg,
        rate_limiter=rate_limiter or global_rate_limiter,
        coordinator=coordinator or series_coordinator,
        cache=cache if cache is not None else _build_cache(cfg),
        series_repository=series_repository,
    )
    return app


app = create_app()
