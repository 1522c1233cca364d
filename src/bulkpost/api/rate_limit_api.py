"""Route exposing the global Late API rate limiter."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..scheduling.constants import RateLimitTier
from ..scheduling.rate_limiter import GlobalRateLimiter
from .dependencies import get_rate_limiter
from .schemas import RateLimitResponse

router = APIRouter(prefix="/api/late", tags=["late"])


@router.get("/rate-limit")
def get_rate_limit(
    rate_limiter: GlobalRateLimiter = Depends(get_rate_limiter),
) -> dict[str, Any]:
    limiter_status = rate_limiter.status()
    try:
        tier: str | None = RateLimitTier(limiter_status.limit).name
    except ValueError:
        tier = None
    return RateLimitResponse(
        available_slots=limiter_status.available_slots,
        limit=limiter_status.limit,
        tier=tier,
    ).model_dump(by_alias=True)
