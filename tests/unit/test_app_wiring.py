"""Smoke tests for application assembly."""

from __future__ import annotations

from typing import Iterable, Tuple

import pytest
from fastapi import FastAPI

from src.bulkpost.config import AppConfig
from src.bulkpost.dependencies import build_bulk_runner, build_late_client
from src.bulkpost.main import create_app
from src.bulkpost.scheduling.constants import RateLimitTier
from src.bulkpost.scheduling.media_cache import MediaCache
from src.bulkpost.scheduling.rate_limiter import GlobalRateLimiter
from src.bulkpost.series.bulk_schedule import BulkScheduleRunner
from src.bulkpost.series.series_coordinator import SeriesCoordinator

pytestmark = pytest.mark.unit


def _collect_route_signatures(app: FastAPI) -> set[Tuple[str, str]]:
    signatures: set[Tuple[str, str]] = set()
    for route in app.routes:
        methods: Iterable[str] = getattr(route, "methods", []) or []
        for method in methods:
            signatures.add((route.path, method.upper()))
    return signatures


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        late_api_key="wired-key",
        rate_limit_tier=RateLimitTier.ACCELERATE,
        max_retries=4,
        media_cache_max_entries=7,
    )


def test_create_app_exposes_expected_routes(config: AppConfig) -> None:
    limiter = GlobalRateLimiter()
    app = create_app(config, rate_limiter=limiter, coordinator=SeriesCoordinator())

    signatures = _collect_route_signatures(app)

    for signature in {
        ("/api/series/multi-status", "GET"),
        ("/api/series/multi-status", "POST"),
        ("/api/series/multi-status", "DELETE"),
        ("/api/late/rate-limit", "GET"),
    }:
        assert signature in signatures
    assert limiter.limit == 600
    assert isinstance(app.state.media_cache, MediaCache)
    assert app.state.media_cache.max_entries == 7


def test_late_client_is_tuned_from_config(config: AppConfig) -> None:
    limiter = GlobalRateLimiter()

    client = build_late_client(config, limiter)

    assert client.api_key == "wired-key"
    assert client.max_retries == 4
    assert client.rate_limiter is limiter


def test_bulk_runner_shares_application_services(config: AppConfig) -> None:
    app = create_app(config, rate_limiter=GlobalRateLimiter(), coordinator=SeriesCoordinator())

    async def caption(media) -> str:
        return "caption"

    runner = build_bulk_runner(app, caption)

    assert isinstance(runner, BulkScheduleRunner)
