"""Calendar helpers used to expand schedules into dated slots."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional


def sunday_based_weekday(day: date) -> int:
    """Weekday with 0 = Sunday ... 6 = Saturday, as stored in ``horarios.dias``."""
    return (day.weekday() + 1) % 7


def expand_dates(
    start: date,
    weekdays: Iterable[int],
    *,
    horizon_days: int,
    not_before: Optional[date] = None,
) -> list[date]:
    """Return the dates in ``[start, start + horizon_days)`` that fall on ``weekdays``.

    Dates earlier than ``not_before`` are left out.
    """

    allowed = set(weekdays)
    end = start + timedelta(days=horizon_days)
    current = start if not_before is None else max(start, not_before)

    dates: list[date] = []
    while current < end:
        if sunday_based_weekday(current) in allowed:
            dates.append(current)
        current += timedelta(days=1)
    return dates


__all__ = ["expand_dates", "sunday_based_weekday"]
