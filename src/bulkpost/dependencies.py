"""Dependency wiring helpers."""

from __future__ import annotations

from fastapi import FastAPI

from .api import multi_status_router, rate_limit_router
from .config import AppConfig
from .late.late_client import LateClient
from .scheduling.media_cache import MediaCache
from .scheduling.rate_limiter import GlobalRateLimiter
from .series.bulk_schedule import BulkScheduleRunner, CaptionProvider
from .series.series_coordinator import SeriesCoordinator
from .series.series_queue import InMemorySeriesRepository, SeriesRepository


def include_routers(
    app: FastAPI,
    config: AppConfig,
    *,
    rate_limiter: GlobalRateLimiter,
    coordinator: SeriesCoordinator,
    cache: MediaCache,
    series_repository: SeriesRepository | None = None,
) -> None:
    """Mount module routers and attach services."""
    rate_limiter.set_limit(config.rate_limit_tier)

    app.state.config = config
    app.state.rate_limiter = rate_limiter
    app.state.series_coordinator = coordinator
    app.state.media_cache = cache
    app.state.series_repository = series_repository or InMemorySeriesRepository()

    app.include_router(multi_status_router)
    app.include_router(rate_limit_router)


def build_late_client(config: AppConfig, rate_limiter: GlobalRateLimiter) -> LateClient:
    """Create a Late client tuned by ``config`` and sharing ``rate_limiter``."""
    return LateClient(
        api_key=config.late_api_key,
        base_url=config.late_api_base_url,
        timeout_seconds=config.request_timeout_seconds,
        rate_limiter=rate_limiter,
        max_retries=config.max_retries,
        retry_base_delay=config.retry_base_delay_seconds,
        retry_multiplier=config.retry_multiplier,
        verification_attempts=config.verification_attempts,
        verification_delay=config.verification_delay_seconds,
    )


def build_bulk_runner(app: FastAPI, caption_provider: CaptionProvider) -> BulkScheduleRunner:
    """Assemble a runner from the services attached by :func:`include_routers`."""
    config: AppConfig = app.state.config
    return BulkScheduleRunner(
        client=build_late_client(config, app.state.rate_limiter),
        caption_provider=caption_provider,
        coordinator=app.state.series_coordinator,
        cache=app.state.media_cache,
        concurrency=config.max_concurrent_posts,
        delay_between_chunks=config.delay_between_posts_seconds,
    )
