"""Late API operations guarded by the global rate limiter and retries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

import httpx

from ..exceptions import LateResponseError
from ..scheduling.constants import LATE_API_BASE_URL, OPTIMIZATION_CONFIG
from ..scheduling.errors import classify_error, is_rate_limit_error
from ..scheduling.rate_limiter import GlobalRateLimiter, global_rate_limiter
from ..scheduling.retry import retry_with_backoff

logger = logging.getLogger(__name__)

T = TypeVar("T")

_POST_ID_FIELDS = ("_id", "id", "postId")


@dataclass(frozen=True, slots=True)
class PlatformTarget:
    """Social account the post is published to."""

    platform: str
    account_id: str

    def to_json(self) -> dict[str, str]:
        return {"platform": self.platform, "accountId": self.account_id}


@dataclass(frozen=True, slots=True)
class PostPayload:
    """Post creation request in application terms."""

    text: str
    platforms: Sequence[PlatformTarget]
    media_urls: Sequence[str] = ()
    scheduled_for: datetime | str | None = None
    timezone: str | None = None
    publish_now: bool | None = None
    use_queue: bool | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "content": self.text,
            "platforms": [target.to_json() for target in self.platforms],
        }
        if self.media_urls:
            body["mediaItems"] = [
                {"type": _media_type_for_url(url), "url": url} for url in self.media_urls
            ]
        if self.scheduled_for is not None:
            scheduled = self.scheduled_for
            body["scheduledFor"] = (
                scheduled.isoformat() if isinstance(scheduled, datetime) else scheduled
            )
        if self.timezone:
            body["timezone"] = self.timezone
        if self.use_queue is not None:
            body["useQueue"] = self.use_queue
        publish_now = self.publish_now
        if publish_now is None and self.scheduled_for is None and not self.use_queue:
            # Late requires an explicit flag for immediate posts
            publish_now = True
        if publish_now is not None:
            body["publishNow"] = publish_now
        return body


@dataclass(frozen=True, slots=True)
class CreatedPost:
    post_id: str
    success: bool = True


@dataclass(slots=True)
class LateClient:
    """Upload media, create posts and verify them on the Late API.

    Every request claims a slot from the shared :class:`GlobalRateLimiter`
    first, so concurrent series never exceed the account's tier together.
    """

    api_key: str
    base_url: str = LATE_API_BASE_URL
    timeout_seconds: float = OPTIMIZATION_CONFIG.request_timeout
    rate_limiter: GlobalRateLimiter = field(default_factory=lambda: global_rate_limiter)
    max_retries: int = OPTIMIZATION_CONFIG.max_retries
    retry_base_delay: float = OPTIMIZATION_CONFIG.retry_base_delay
    retry_multiplier: float = OPTIMIZATION_CONFIG.retry_multiplier
    verification_attempts: int = OPTIMIZATION_CONFIG.verification_attempts
    verification_delay: float = OPTIMIZATION_CONFIG.verification_delay
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    log: logging.Logger = field(default_factory=lambda: logger)

    async def upload_media(self, buffer: bytes, filename: str, mime_type: str) -> str:
        """Upload ``buffer`` and return the URL Late assigned to it."""

        async def _attempt() -> str:
            await self.rate_limiter.wait_for_slot()
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    self._url("media"),
                    headers=self._auth_headers(),
                    files={"files": (filename, buffer, mime_type)},
                )
            response.raise_for_status()
            return _extract_media_url(response.json())

        def _on_retry(attempt: int, error: Exception) -> None:
            self.log.warning(
                "late.media.upload.retry attempt=%s error=%s",
                attempt,
                error,
                extra={
                    "file_name": filename,
                    "attempt": attempt,
                    "error_kind": classify_error(error).value,
                },
            )

        url = await self._with_retry(_attempt, _on_retry)
        self.log.info(
            "late.media.upload.success",
            extra={"file_name": filename, "size_bytes": len(buffer)},
        )
        return url

    async def create_post(self, payload: PostPayload) -> CreatedPost:
        """Create (or schedule) a post and return its Late identifier."""

        body = payload.to_json()

        async def _attempt() -> CreatedPost:
            await self.rate_limiter.wait_for_slot()
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    self._url("posts"),
                    headers={**self._auth_headers(), "Content-Type": "application/json"},
                    json=body,
                )
            response.raise_for_status()
            post_id = _extract_post_id(response.json())
            if post_id is None:
                raise LateResponseError("Late API response does not contain a post id")
            return CreatedPost(post_id=post_id, success=True)

        def _on_retry(attempt: int, error: Exception) -> None:
            self.log.warning(
                "late.post.create.retry attempt=%s error=%s",
                attempt,
                error,
                extra={"attempt": attempt, "error_kind": classify_error(error).value},
            )
            if is_rate_limit_error(error):
                self.log.warning(
                    "late.post.create.rate_limited",
                    extra={"attempt": attempt, "limit": self.rate_limiter.limit},
                )

        created = await self._with_retry(_attempt, _on_retry)
        self.log.info(
            "late.post.create.success",
            extra={"post_id": created.post_id, "platforms": len(payload.platforms)},
        )
        return created

    async def verify_post(self, post_id: str) -> bool:
        """Poll until the post is visible on Late.

        Each attempt waits ``verification_delay`` first because the remote
        side is eventually consistent. Failed polls count as "not visible
        yet"; exhaustion returns ``False`` instead of raising.
        """

        for attempt in range(1, self.verification_attempts + 1):
            await self.sleep(self.verification_delay)
            try:
                await self.rate_limiter.wait_for_slot()
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.get(
                        self._url(f"posts/{post_id}"), headers=self._auth_headers()
                    )
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                self.log.debug(
                    "late.post.verify.miss",
                    extra={"post_id": post_id, "attempt": attempt, "error": str(exc)},
                )
                continue
            if _extract_post_id(data) is not None:
                self.log.info(
                    "late.post.verify.success",
                    extra={"post_id": post_id, "attempt": attempt},
                )
                return True

        self.log.warning(
            "late.post.verify.exhausted",
            extra={"post_id": post_id, "attempts": self.verification_attempts},
        )
        return False

    async def _with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: Callable[[int, Exception], None],
    ) -> T:
        return await retry_with_backoff(
            operation,
            max_retries=self.max_retries,
            base_delay=self.retry_base_delay,
            multiplier=self.retry_multiplier,
            on_retry=on_retry,
            sleep=self.sleep,
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path}"

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}


def _extract_media_url(data: Any) -> str:
    if isinstance(data, Mapping):
        url = data.get("url")
        if url:
            return str(url)
        files = data.get("files") or []
        if files and isinstance(files[0], Mapping) and files[0].get("url"):
            return str(files[0]["url"])
    raise LateResponseError("Late API response does not contain a media url")


def _extract_post_id(data: Any) -> str | None:
    if not isinstance(data, Mapping):
        return None
    for key in _POST_ID_FIELDS:
        value = data.get(key)
        if value:
            return str(value)
    nested = data.get("post")
    if isinstance(nested, Mapping):
        return _extract_post_id(nested)
    return None


def _media_type_for_url(url: str) -> str:
    lowered = url.lower().split("?", 1)[0]
    if lowered.endswith((".mp4", ".mov", ".avi", ".webm")):
        return "video"
    return "image"


async def upload_media_with_retry(
    buffer: bytes, filename: str, mime_type: str, api_key: str
) -> str:
    return await LateClient(api_key=api_key).upload_media(buffer, filename, mime_type)


async def create_post_with_retry(payload: PostPayload, api_key: str) -> CreatedPost:
    return await LateClient(api_key=api_key).create_post(payload)


async def verify_post_with_retry(post_id: str, api_key: str) -> bool:
    return await LateClient(api_key=api_key).verify_post(post_id)


__all__ = [
    "CreatedPost",
    "LateClient",
    "PlatformTarget",
    "PostPayload",
    "create_post_with_retry",
    "upload_media_with_retry",
    "verify_post_with_retry",
]
