"""Pydantic models for the multi-series HTTP surface."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class QueueSeriesRequest(BaseModel):
    """Body of ``POST /api/series/multi-status``."""

    model_config = ConfigDict(populate_by_name=True)

    series_ids: List[str] = Field(
        default_factory=list,
        alias="seriesIds",
        description="Identifiers of series to queue for concurrent processing.",
    )


class RateLimiterStatusModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    available_slots: int = Field(..., alias="availableSlots")
    limit: int = Field(..., ge=1)


class RateLimitResponse(RateLimiterStatusModel):
    tier: str | None = Field(
        default=None, description="Named tier matching the current limit, if any."
    )


__all__ = ["QueueSeriesRequest", "RateLimitResponse", "RateLimiterStatusModel"]
