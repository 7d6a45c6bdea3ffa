"""Blank work periods."""
from __future__ import annotations

from datetime import date, timedelta

from weeksheet.config import settings
from weeksheet.domain.calendar import monday_of
from weeksheet.domain.models import DayRecord, WorkPeriod

MAX_PERIOD_DAYS = 7


def generate_period(start: date, length: int) -> WorkPeriod:
    """*length* consecutive empty days beginning on *start* (any weekday)."""
    if not 1 <= length <= MAX_PERIOD_DAYS:
        raise ValueError(f"period length must be 1-{MAX_PERIOD_DAYS}, got {length}")
    return WorkPeriod(days=[
        DayRecord(date=start + timedelta(days=i)) for i in range(length)
    ])


def generate_week_days(week_start: date) -> WorkPeriod:
    """Monday to Friday of the week containing *week_start*."""
    return generate_period(monday_of(week_start), 5)


def generate_default_period(
    start: date, policy: str | None = None, length: int | None = None,
) -> WorkPeriod:
    """Blank period following the configured policy (``weekdays`` or ``rolling``)."""
    policy = (policy or settings.PERIOD_POLICY).lower()
    if policy == "weekdays":
        return generate_week_days(start)
    if policy == "rolling":
        return generate_period(start, length or settings.PERIOD_DAYS)
    raise ValueError(f"Unknown period policy: {policy!r}")
