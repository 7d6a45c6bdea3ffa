"""Worked-hours derivation shared by the live summary and the CSV export."""
from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel

from weeksheet.domain.models import DayRecord, WorkPeriod
from weeksheet.domain.parsing import clock_minutes, parse_number

__all__ = ["HoursSummary", "derive_hours", "has_any_data", "parse_number", "summarize"]


class HoursSummary(BaseModel):
    total_hours: float
    total_kilometers: float
    days_worked: int


def derive_hours(day: DayRecord) -> float:
    """Stated total when positive, else end - start - break, else 0.

    Not clamped: an end time before the start time gives a negative result.
    """
    if day.total_hours is not None and day.total_hours > 0:
        return day.total_hours
    if day.start_time is not None and day.end_time is not None:
        worked = clock_minutes(day.end_time) - clock_minutes(day.start_time)
        return worked / 60 - (day.break_minutes or 0) / 60
    return 0.0


def _days(period: WorkPeriod | Iterable[DayRecord]) -> list[DayRecord]:
    return list(period.days) if isinstance(period, WorkPeriod) else list(period)


def summarize(period: WorkPeriod | Iterable[DayRecord]) -> HoursSummary:
    """Totals for display; each day's hours are clamped at 0 before summing."""
    total_hours = 0.0
    total_km = 0.0
    days_worked = 0
    for day in _days(period):
        hours = max(0.0, derive_hours(day))
        total_hours += hours
        total_km += day.kilometers or 0.0
        if hours > 0:
            days_worked += 1
    return HoursSummary(
        total_hours=total_hours,
        total_kilometers=total_km,
        days_worked=days_worked,
    )


def has_any_data(period: WorkPeriod | Iterable[DayRecord]) -> bool:
    return any(
        d.start_time or d.end_time or d.total_hours or d.kilometers
        for d in _days(period)
    )
