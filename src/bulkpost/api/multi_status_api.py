"""Routes reporting and driving concurrent series processing."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..config import AppConfig
from ..scheduling.rate_limiter import GlobalRateLimiter
from ..series.series_coordinator import SeriesCoordinator
from ..series.series_queue import SeriesRepository, queue_multiple_series
from .dependencies import (
    get_config,
    get_coordinator,
    get_rate_limiter,
    get_series_repository,
)
from .schemas import QueueSeriesRequest, RateLimiterStatusModel

router = APIRouter(prefix="/api/series", tags=["series"])


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@router.get("/multi-status")
def get_multi_status(
    coordinator: SeriesCoordinator = Depends(get_coordinator),
    rate_limiter: GlobalRateLimiter = Depends(get_rate_limiter),
) -> dict[str, Any]:
    """Return every tracked series with a summary and limiter headroom."""
    limiter_status = rate_limiter.status()
    return {
        "success": True,
        "summary": coordinator.get_summary().to_dict(),
        "series": [entry.to_dict() for entry in coordinator.get_all_status()],
        "rateLimiter": RateLimiterStatusModel(
            available_slots=limiter_status.available_slots,
            limit=limiter_status.limit,
        ).model_dump(by_alias=True),
    }


@router.post("/multi-status", response_model=None)
async def queue_series(
    body: QueueSeriesRequest,
    coordinator: SeriesCoordinator = Depends(get_coordinator),
    repository: SeriesRepository = Depends(get_series_repository),
    config: AppConfig = Depends(get_config),
) -> dict[str, Any] | JSONResponse:
    """Queue several series for concurrent processing."""
    if not body.series_ids:
        return _bad_request("seriesIds must be a non-empty array")
    if len(body.series_ids) > config.max_series_per_request:
        return _bad_request(
            f"Maximum {config.max_series_per_request} series can be queued at once"
        )

    outcome = await queue_multiple_series(
        body.series_ids, repository=repository, coordinator=coordinator
    )
    return {
        "success": True,
        "queued": len(outcome.queued),
        "queuedIds": outcome.queued,
        "errors": [error.to_dict() for error in outcome.errors],
        "summary": coordinator.get_summary().to_dict(),
    }


@router.delete("/multi-status")
def clear_completed_series(
    coordinator: SeriesCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Forget completed and failed series."""
    coordinator.clear_completed()
    return {
        "success": True,
        "message": "Completed series cleared",
        "summary": coordinator.get_summary().to_dict(),
    }
