"""Queue several stored series onto the coordinator in one request."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from .series_coordinator import SeriesCoordinator

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "ACTIVE"


@dataclass(frozen=True, slots=True)
class SeriesRecord:
    """Subset of a stored series needed to queue it."""

    series_id: str
    name: str
    status: str = ACTIVE_STATUS
    media_folder: str | None = None


class SeriesRepository(Protocol):
    """Lookup of persisted series definitions."""

    async def get_series(self, series_id: str) -> SeriesRecord | None:
        """Return the series or ``None`` when it does not exist."""


class InMemorySeriesRepository:
    """Dictionary backed :class:`SeriesRepository`."""

    def __init__(self, records: Iterable[SeriesRecord] | Mapping[str, SeriesRecord] = ()) -> None:
        if isinstance(records, Mapping):
            self._records = dict(records)
        else:
            self._records = {record.series_id: record for record in records}

    async def get_series(self, series_id: str) -> SeriesRecord | None:
        return self._records.get(series_id)

    def add(self, record: SeriesRecord) -> None:
        self._records[record.series_id] = record


@dataclass(frozen=True, slots=True)
class QueueError:
    series_id: str
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"seriesId": self.series_id, "error": self.error}


@dataclass(slots=True)
class QueueOutcome:
    queued: list[str] = field(default_factory=list)
    errors: list[QueueError] = field(default_factory=list)


async def queue_multiple_series(
    series_ids: Iterable[str],
    *,
    repository: SeriesRepository,
    coordinator: SeriesCoordinator,
) -> QueueOutcome:
    """Validate each series and queue the eligible ones.

    Problems are collected per series; one bad id never blocks the others.
    The file count is unknown until processing lists the folder, so series
    are queued with ``total_files=0``.
    """

    outcome = QueueOutcome()
    for series_id in series_ids:
        try:
            record = await repository.get_series(series_id)
        except Exception as exc:
            logger.warning(
                "series.queue.lookup_failed",
                extra={"series_id": series_id, "error": str(exc)},
            )
            outcome.errors.append(QueueError(series_id, str(exc) or "Unknown error"))
            continue

        if record is None:
            outcome.errors.append(QueueError(series_id, "Series not found"))
            continue
        if record.status != ACTIVE_STATUS:
            outcome.errors.append(QueueError(series_id, "Series is not active"))
            continue
        if not record.media_folder:
            outcome.errors.append(QueueError(series_id, "No media folder configured"))
            continue

        coordinator.queue_series(series_id, record.name, 0)
        outcome.queued.append(series_id)

    return outcome


__all__ = [
    "ACTIVE_STATUS",
    "InMemorySeriesRepository",
    "QueueError",
    "QueueOutcome",
    "SeriesRecord",
    "SeriesRepository",
    "queue_multiple_series",
]
