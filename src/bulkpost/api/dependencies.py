"""Accessors for services attached to ``app.state``."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from ..config import AppConfig
from ..scheduling.rate_limiter import GlobalRateLimiter
from ..series.series_coordinator import SeriesCoordinator
from ..series.series_queue import SeriesRepository


def _state_attr(request: Request, name: str) -> Any:
    try:
        return getattr(request.app.state, name)
    except AttributeError as exc:
        raise RuntimeError(f"{name} is not configured") from exc


def get_coordinator(request: Request) -> SeriesCoordinator:
    return _state_attr(request, "series_coordinator")


def get_rate_limiter(request: Request) -> GlobalRateLimiter:
    return _state_attr(request, "rate_limiter")


def get_series_repository(request: Request) -> SeriesRepository:
    return _state_attr(request, "series_repository")


def get_config(request: Request) -> AppConfig:
    return _state_attr(request, "config")
