"""Status records tracked for each bulk-posting series."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class SeriesState(str, Enum):
    """Lifecycle of a series: queued -> processing -> completed | failed."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"

    @property
    def is_terminal(self) -> bool:
        return self in (SeriesState.COMPLETED, SeriesState.FAILED)


@dataclass(slots=True)
class SeriesProgress:
    """Per-file counters; callers keep ``processed == successful + failed``."""

    total: int
    processed: int = 0
    successful: int = 0
    failed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "processed": self.processed,
            "successful": self.successful,
            "failed": self.failed,
        }


@dataclass(slots=True)
class SeriesStatus:
    series_id: str
    series_name: str
    status: SeriesState
    progress: SeriesProgress
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None
    current_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys the dashboard consumes."""

        payload: dict[str, Any] = {
            "seriesId": self.series_id,
            "seriesName": self.series_name,
            "status": self.status.value,
            "progress": self.progress.to_dict(),
        }
        if self.started_at is not None:
            payload["startedAt"] = self.started_at.isoformat()
        if self.completed_at is not None:
            payload["completedAt"] = self.completed_at.isoformat()
        if self.error is not None:
            payload["error"] = self.error
        if self.current_file is not None:
            payload["currentFile"] = self.current_file
        return payload


@dataclass(frozen=True, slots=True)
class SeriesSummary:
    queued: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    total_files: int = 0
    processed_files: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "queued": self.queued,
            "processing": self.processing,
            "completed": self.completed,
            "failed": self.failed,
            "totalFiles": self.total_files,
            "processedFiles": self.processed_files,
        }


__all__ = ["SeriesProgress", "SeriesState", "SeriesStatus", "SeriesSummary"]
