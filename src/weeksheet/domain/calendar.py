"""Calendar helpers: week starts, ISO dates and weekday codes.

All functions are pure. ``datetime`` inputs are reduced to their own
wall-clock date; no timezone conversion happens anywhere.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum


class DayOfWeek(str, Enum):
    SUN = "SUN"
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"


# Index-aligned with the Sunday-first numbering (0 = SUN ... 6 = SAT).
ALL_DAY_CODES: tuple[DayOfWeek, ...] = tuple(DayOfWeek)

DAY_LABELS: dict[DayOfWeek, str] = {
    DayOfWeek.SUN: "Sunday",
    DayOfWeek.MON: "Monday",
    DayOfWeek.TUE: "Tuesday",
    DayOfWeek.WED: "Wednesday",
    DayOfWeek.THU: "Thursday",
    DayOfWeek.FRI: "Friday",
    DayOfWeek.SAT: "Saturday",
}


def _as_date(d: date | datetime) -> date:
    return d.date() if isinstance(d, datetime) else d


def sunday_index(d: date | datetime) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6."""
    return (_as_date(d).weekday() + 1) % 7


def monday_of(d: date | datetime) -> date:
    """Monday of the week containing *d*; a Sunday belongs to the previous week."""
    day = sunday_index(d)
    offset = -6 if day == 0 else 1 - day
    return _as_date(d) + timedelta(days=offset)


def format_iso_date(d: date | datetime) -> str:
    return _as_date(d).strftime("%Y-%m-%d")


def parse_iso_date(text: str) -> date:
    """Parse ``YYYY-MM-DD``; raises ``ValueError`` on anything else."""
    return datetime.strptime(text.strip(), "%Y-%m-%d").date()


def weekday_code(d: date | datetime) -> DayOfWeek:
    return ALL_DAY_CODES[sunday_index(d)]


def current_week_start(today: date | None = None) -> date:
    return monday_of(today or date.today())


def parse_weekday(label: object) -> DayOfWeek | None:
    """Read a weekday label such as ``MON``, ``Monday`` or ``tue.``.

    Returns None for anything that is not recognisably a weekday.
    """
    if not isinstance(label, str):
        return None
    cleaned = label.strip().rstrip(".").upper()
    if len(cleaned) < 3:
        return None
    for code, name in DAY_LABELS.items():
        if name.upper().startswith(cleaned) and cleaned.startswith(code.value):
            return code
    return None


def day_label(code: DayOfWeek) -> str:
    return DAY_LABELS[code]
