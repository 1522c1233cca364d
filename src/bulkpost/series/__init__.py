"""Coordination of many concurrent bulk-posting series."""

from .bulk_schedule import BulkScheduleResult, BulkScheduleRunner, FileError, MediaFile
from .schedule_dates import calculate_schedule_dates
from .series_coordinator import SeriesCoordinator, series_coordinator
from .series_models import SeriesProgress, SeriesState, SeriesStatus, SeriesSummary
from .series_queue import (
    InMemorySeriesRepository,
    QueueError,
    QueueOutcome,
    SeriesRecord,
    SeriesRepository,
    queue_multiple_series,
)

__all__ = [
    "BulkScheduleResult",
    "BulkScheduleRunner",
    "FileError",
    "MediaFile",
    "calculate_schedule_dates",
    "SeriesCoordinator",
    "series_coordinator",
    "SeriesProgress",
    "SeriesState",
    "SeriesStatus",
    "SeriesSummary",
    "InMemorySeriesRepository",
    "QueueError",
    "QueueOutcome",
    "SeriesRecord",
    "SeriesRepository",
    "queue_multiple_series",
]
