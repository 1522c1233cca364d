"""Process-wide registry of bulk-posting series and their progress."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, Dict

from ..scheduling.constants import OPTIMIZATION_CONFIG
from .series_models import SeriesProgress, SeriesState, SeriesStatus, SeriesSummary

logger = logging.getLogger(__name__)


def _default_clock() -> datetime:
    return datetime.now(timezone.utc)


class SeriesCoordinator:
    """Track lifecycle and counters for concurrently running series.

    Every method is synchronous, so on a single event loop no mutation can
    interleave with another. Admission control via
    :meth:`can_start_new_series` is advisory: :meth:`start_processing` does
    not enforce it.
    """

    def __init__(
        self,
        *,
        max_concurrent_series: int = OPTIMIZATION_CONFIG.max_concurrent_series,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if max_concurrent_series < 1:
            raise ValueError("max_concurrent_series must be at least 1")
        self._max_concurrent_series = max_concurrent_series
        self._clock = clock or _default_clock
        self._series: Dict[str, SeriesStatus] = {}
        self._queue: Deque[str] = deque()

    @property
    def max_concurrent_series(self) -> int:
        return self._max_concurrent_series

    def get_all_status(self) -> list[SeriesStatus]:
        return list(self._series.values())

    def get_series_status(self, series_id: str) -> SeriesStatus | None:
        return self._series.get(series_id)

    def queue_series(self, series_id: str, series_name: str, total_files: int) -> None:
        """Register ``series_id`` as queued with zeroed counters.

        A series that is already processing is left untouched; a finished one
        is replaced by a fresh queued entry.
        """

        existing = self._series.get(series_id)
        if existing is not None and existing.status is SeriesState.PROCESSING:
            logger.warning("series.queue.ignored", extra={"series_id": series_id})
            return
        if series_id in self._queue:
            self._queue.remove(series_id)
        self._series[series_id] = SeriesStatus(
            series_id=series_id,
            series_name=series_name,
            status=SeriesState.QUEUED,
            progress=SeriesProgress(total=max(0, total_files)),
        )
        self._queue.append(series_id)
        logger.info(
            "series.queued",
            extra={"series_id": series_id, "series_name": series_name, "total_files": total_files},
        )

    def update_progress(
        self,
        series_id: str,
        *,
        total: int | None = None,
        processed: int | None = None,
        successful: int | None = None,
        failed: int | None = None,
        current_file: str | None = None,
    ) -> None:
        """Merge the supplied counters into the series progress."""

        status = self._series.get(series_id)
        if status is None:
            logger.debug("series.progress.unknown", extra={"series_id": series_id})
            return
        progress = status.progress
        if total is not None:
            progress.total = total
        if processed is not None:
            progress.processed = processed
        if successful is not None:
            progress.successful = successful
        if failed is not None:
            progress.failed = failed
        if current_file:
            status.current_file = current_file

    def start_processing(self, series_id: str) -> None:
        status = self._series.get(series_id)
        if status is None:
            logger.debug("series.start.unknown", extra={"series_id": series_id})
            return
        if status.status is not SeriesState.QUEUED:
            logger.warning(
                "series.start.ignored",
                extra={"series_id": series_id, "status": status.status.value},
            )
            return
        status.status = SeriesState.PROCESSING
        status.started_at = self._clock()
        if series_id in self._queue:
            self._queue.remove(series_id)
        if self.get_active_count() > self._max_concurrent_series:
            logger.warning(
                "series.start.over_capacity",
                extra={"series_id": series_id, "active": self.get_active_count()},
            )

    def complete_processing(
        self, series_id: str, success: bool, error: str | None = None
    ) -> None:
        status = self._series.get(series_id)
        if status is None:
            logger.debug("series.complete.unknown", extra={"series_id": series_id})
            return
        if status.status is not SeriesState.PROCESSING:
            logger.warning(
                "series.complete.ignored",
                extra={"series_id": series_id, "status": status.status.value},
            )
            return
        status.status = SeriesState.COMPLETED if success else SeriesState.FAILED
        status.completed_at = self._clock()
        if not success and error:
            status.error = error
        logger.info(
            "series.completed",
            extra={
                "series_id": series_id,
                "status": status.status.value,
                **status.progress.to_dict(),
            },
        )

    def get_active_count(self) -> int:
        return sum(
            1 for status in self._series.values() if status.status is SeriesState.PROCESSING
        )

    def can_start_new_series(self) -> bool:
        return self.get_active_count() < self._max_concurrent_series

    def get_next_from_queue(self) -> str | None:
        """Pop the oldest series id still waiting in the queue."""

        while self._queue:
            series_id = self._queue.popleft()
            status = self._series.get(series_id)
            if status is not None and status.status is SeriesState.QUEUED:
                return series_id
        return None

    def clear_completed(self) -> int:
        """Drop completed and failed series; return how many were removed."""

        finished = [
            series_id
            for series_id, status in self._series.items()
            if status.status.is_terminal
        ]
        for series_id in finished:
            del self._series[series_id]
        return len(finished)

    def get_summary(self) -> SeriesSummary:
        counts = {state: 0 for state in SeriesState}
        total_files = 0
        processed_files = 0
        for status in self._series.values():
            counts[status.status] += 1
            total_files += status.progress.total
            processed_files += status.progress.processed
        return SeriesSummary(
            queued=counts[SeriesState.QUEUED],
            processing=counts[SeriesState.PROCESSING],
            completed=counts[SeriesState.COMPLETED],
            failed=counts[SeriesState.FAILED],
            total_files=total_files,
            processed_files=processed_files,
        )


series_coordinator = SeriesCoordinator()

__all__ = ["SeriesCoordinator", "series_coordinator"]
