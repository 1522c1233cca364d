"""Publish every media file of a series through the Late API."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import structlog

from ..exceptions import BulkPostError
from ..late.late_client import LateClient, PlatformTarget, PostPayload
from ..scheduling.constants import OPTIMIZATION_CONFIG
from ..scheduling.media_cache import MediaCache, media_cache
from ..scheduling.parallel import process_in_parallel
from .series_coordinator import SeriesCoordinator, series_coordinator
from .series_models import SeriesState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MediaFile:
    """A source file plus an async loader for its (already processed) bytes."""

    file_id: str
    filename: str
    mime_type: str
    load: Callable[[], Awaitable[bytes]]


CaptionProvider = Callable[[MediaFile], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class FileError:
    file: str
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"file": self.file, "error": self.error}


@dataclass(slots=True)
class BulkScheduleResult:
    success: bool
    total_processed: int
    successful: int
    failed: int
    errors: list[FileError] = field(default_factory=list)
    duration: float = 0.0
    post_ids: list[str | None] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "totalProcessed": self.total_processed,
            "successful": self.successful,
            "failed": self.failed,
            "errors": [error.to_dict() for error in self.errors],
            "duration": round(self.duration, 3),
        }


@dataclass(slots=True)
class _Counters:
    successful: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.successful + self.failed


class BulkScheduleRunner:
    """Drive one series through upload, post creation and verification.

    Files are fanned out with :func:`process_in_parallel`; progress is
    reported to the :class:`SeriesCoordinator` as each file settles and
    uploaded media is remembered in the :class:`MediaCache`.
    """

    def __init__(
        self,
        *,
        client: LateClient,
        caption_provider: CaptionProvider,
        coordinator: SeriesCoordinator | None = None,
        cache: MediaCache | None = None,
        concurrency: int = OPTIMIZATION_CONFIG.max_concurrent_posts,
        delay_between_chunks: float = OPTIMIZATION_CONFIG.delay_between_posts,
        verify_posts: bool = True,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._client = client
        self._caption_provider = caption_provider
        self._coordinator = coordinator or series_coordinator
        self._cache = cache if cache is not None else media_cache
        self._concurrency = concurrency
        self._delay_between_chunks = max(0.0, delay_between_chunks)
        self._verify_posts = verify_posts
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep

    async def run(
        self,
        series_id: str,
        files: Sequence[MediaFile],
        *,
        platforms: Sequence[PlatformTarget],
        schedule: Sequence[datetime] | None = None,
        timezone: str | None = None,
        series_name: str | None = None,
    ) -> BulkScheduleResult:
        with structlog.contextvars.bound_contextvars(series_id=series_id):
            return await self._run(
                series_id,
                files,
                platforms=platforms,
                schedule=schedule,
                timezone=timezone,
                series_name=series_name,
            )

    async def _run(
        self,
        series_id: str,
        files: Sequence[MediaFile],
        *,
        platforms: Sequence[PlatformTarget],
        schedule: Sequence[datetime] | None = None,
        timezone: str | None = None,
        series_name: str | None = None,
    ) -> BulkScheduleResult:
        if not platforms:
            raise ValueError("At least one platform target is required")
        if schedule is not None and len(schedule) < len(files):
            raise ValueError("schedule must provide a publish time for every file")

        coordinator = self._coordinator
        existing = coordinator.get_series_status(series_id)
        if existing is not None and existing.status is SeriesState.PROCESSING:
            logger.warning("bulk.series.already_processing", extra={"series_id": series_id})
            raise BulkPostError(f"Series {series_id} is already processing")

        started = self._clock()
        if existing is None or existing.status.is_terminal:
            coordinator.queue_series(series_id, series_name or series_id, len(files))
        coordinator.update_progress(
            series_id, total=len(files), processed=0, successful=0, failed=0
        )
        coordinator.start_processing(series_id)
        try:
            return await self._publish_all(
                series_id,
                files,
                platforms=platforms,
                schedule=schedule,
                timezone=timezone,
                started=started,
            )
        except BaseException as exc:
            # no-op when the series already reached a terminal state
            coordinator.complete_processing(series_id, False, str(exc) or type(exc).__name__)
            raise

    async def _publish_all(
        self,
        series_id: str,
        files: Sequence[MediaFile],
        *,
        platforms: Sequence[PlatformTarget],
        schedule: Sequence[datetime] | None,
        timezone: str | None,
        started: float,
    ) -> BulkScheduleResult:
        coordinator = self._coordinator
        if not files:
            coordinator.complete_processing(series_id, False, "No media files found")
            return BulkScheduleResult(
                success=False,
                total_processed=0,
                successful=0,
                failed=0,
                duration=self._clock() - started,
            )

        counters = _Counters()

        async def _process(media: MediaFile, index: int) -> str:
            scheduled_for = schedule[index] if schedule is not None else None
            try:
                post_id = await self._publish(
                    media,
                    platforms=platforms,
                    scheduled_for=scheduled_for,
                    timezone=timezone,
                )
            except Exception as exc:
                counters.failed += 1
                logger.warning(
                    "bulk.file.failed",
                    extra={"series_id": series_id, "file_name": media.filename, "error": str(exc)},
                )
                raise
            else:
                counters.successful += 1
                return post_id
            finally:
                coordinator.update_progress(
                    series_id,
                    processed=counters.processed,
                    successful=counters.successful,
                    failed=counters.failed,
                    current_file=media.filename,
                )

        outcome = await process_in_parallel(
            files,
            _process,
            self._concurrency,
            delay_between_chunks=self._delay_between_chunks,
            sleep=self._sleep,
        )

        errors = [
            FileError(
                file=files[item.index].filename,
                error=str(item.error) or type(item.error).__name__,
            )
            for item in outcome.errors
        ]
        success = counters.successful > 0
        coordinator.complete_processing(
            series_id,
            success,
            None if success else f"All {counters.failed} files failed",
        )
        result = BulkScheduleResult(
            success=success,
            total_processed=counters.processed,
            successful=counters.successful,
            failed=counters.failed,
            errors=errors,
            duration=self._clock() - started,
            post_ids=list(outcome.results),
        )
        logger.info(
            "bulk.series.finished",
            extra={
                "series_id": series_id,
                "successful": result.successful,
                "failed": result.failed,
                "duration": round(result.duration, 3),
            },
        )
        return result

    async def _publish(
        self,
        media: MediaFile,
        *,
        platforms: Sequence[PlatformTarget],
        scheduled_for: datetime | None,
        timezone: str | None,
    ) -> str:
        cached = self._cache.get(media.file_id)
        if cached is not None:
            media_url = cached.url
            logger.debug("bulk.media.cache_hit", extra={"file_id": media.file_id})
        else:
            buffer = await media.load()
            media_url = await self._client.upload_media(buffer, media.filename, media.mime_type)
            self._cache.put(media.file_id, buffer, media_url)

        text = await self._caption_provider(media)
        if not text or not text.strip():
            raise BulkPostError("Caption provider returned empty content")

        created = await self._client.create_post(
            PostPayload(
                text=text,
                platforms=platforms,
                media_urls=(media_url,),
                scheduled_for=scheduled_for,
                timezone=timezone,
            )
        )

        if self._verify_posts:
            verified = await self._client.verify_post(created.post_id)
            if not verified:
                # created but not visible yet; Late confirms asynchronously
                logger.warning(
                    "bulk.post.unverified",
                    extra={"post_id": created.post_id, "file_name": media.filename},
                )
        return created.post_id


__all__ = [
    "BulkScheduleResult",
    "BulkScheduleRunner",
    "CaptionProvider",
    "FileError",
    "MediaFile",
]
