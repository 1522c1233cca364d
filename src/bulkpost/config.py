"""Application configuration for the bulk scheduling service.

Defaults mirror :data:`OPTIMIZATION_CONFIG`; every field can be overridden
through ``BULKPOST_*`` environment variables.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scheduling.constants import LATE_API_BASE_URL, OPTIMIZATION_CONFIG, RateLimitTier


class AppConfig(BaseSettings):
    """Pydantic settings container for the service layer."""

    model_config = SettingsConfigDict(env_prefix="BULKPOST_")

    late_api_base_url: str = Field(
        default=LATE_API_BASE_URL,
        description="Base URL of the Late posting API.",
    )
    late_api_key: str = Field(
        default="",
        description="Bearer credential used for Late API calls.",
    )
    rate_limit_tier: RateLimitTier = Field(
        default=RateLimitTier.BUILD,
        description="Requests per minute granted by the Late plan.",
    )
    max_concurrent_posts: int = Field(
        default=OPTIMIZATION_CONFIG.max_concurrent_posts,
        ge=1,
        description="Files published concurrently within one series.",
    )
    delay_between_posts_seconds: float = Field(
        default=OPTIMIZATION_CONFIG.delay_between_posts,
        ge=0.0,
        description="Pause between parallel chunks of files.",
    )
    verification_attempts: int = Field(
        default=OPTIMIZATION_CONFIG.verification_attempts,
        ge=1,
    )
    verification_delay_seconds: float = Field(
        default=OPTIMIZATION_CONFIG.verification_delay,
        ge=0.0,
    )
    max_retries: int = Field(
        default=OPTIMIZATION_CONFIG.max_retries,
        ge=1,
        description="Attempts per upload/create call before giving up.",
    )
    retry_base_delay_seconds: float = Field(
        default=OPTIMIZATION_CONFIG.retry_base_delay,
        ge=0.0,
    )
    retry_multiplier: float = Field(
        default=OPTIMIZATION_CONFIG.retry_multiplier,
        ge=1.0,
    )
    request_timeout_seconds: float = Field(
        default=OPTIMIZATION_CONFIG.request_timeout,
        ge=0.1,
        description="Timeout applied to every Late API request.",
    )
    media_cache_ttl_seconds: float = Field(
        default=OPTIMIZATION_CONFIG.media_cache_ttl,
        gt=0.0,
    )
    media_cache_max_entries: int = Field(
        default=OPTIMIZATION_CONFIG.media_cache_max_entries,
        ge=1,
    )
    max_concurrent_series: int = Field(
        default=OPTIMIZATION_CONFIG.max_concurrent_series,
        ge=1,
        description="Advisory cap on series processed at the same time.",
    )
    max_series_per_request: int = Field(
        default=OPTIMIZATION_CONFIG.max_series_per_request,
        ge=1,
        description="Upper bound on series ids accepted by one queue request.",
    )

    @classmethod
    def build_default(cls) -> "AppConfig":
        return cls()


__all__ = ["AppConfig"]
