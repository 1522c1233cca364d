"""Expand a weekly recurrence rule into concrete publish times."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

_WEEKDAYS = {
    "MONDAY": 0,
    "TUESDAY": 1,
    "WEDNESDAY": 2,
    "THURSDAY": 3,
    "FRIDAY": 4,
    "SATURDAY": 5,
    "SUNDAY": 6,
}


def _parse_time_of_day(value: str) -> time:
    try:
        hours, minutes = (int(part) for part in value.split(":", 1))
        return time(hour=hours, minute=minutes)
    except ValueError as exc:
        raise ValueError(f"time_of_day must be HH:MM, got {value!r}") from exc


def calculate_schedule_dates(
    start_date: date | str,
    days_of_week: Sequence[str],
    time_of_day: str,
    tz: str,
    count: int,
) -> list[datetime]:
    """Return ``count`` aware datetimes on the allowed weekdays, from ``start_date`` on."""

    if count <= 0:
        return []
    if not days_of_week:
        raise ValueError("days_of_week must not be empty")
    try:
        allowed = {_WEEKDAYS[day.upper()] for day in days_of_week}
    except KeyError as exc:
        raise ValueError(f"Unknown day of week: {exc.args[0]}") from exc

    if isinstance(start_date, str):
        start_date = date.fromisoformat(start_date)
    zone = ZoneInfo(tz)
    slot = _parse_time_of_day(time_of_day)

    dates: list[datetime] = []
    current = start_date
    while len(dates) < count:
        if current.weekday() in allowed:
            dates.append(datetime.combine(current, slot, tzinfo=zone))
        current += timedelta(days=1)
    return dates


__all__ = ["calculate_schedule_dates"]
