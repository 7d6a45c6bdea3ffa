"""Payroll CSV export (Xero "Employee Name,Date,Earnings Rate,Units,Notes" layout).

Every field is wrapped in double quotes and nothing is escaped: a value that
itself contains a double quote produces a row that payroll importers may
misread.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date

from weeksheet.domain.hours import derive_hours
from weeksheet.domain.models import DayRecord, WorkPeriod

CSV_HEADER = "Employee Name,Date,Earnings Rate,Units,Notes"
ORDINARY_HOURS = "Ordinary Hours"
KILOMETERS = "Kilometers"
FALLBACK_NAME = "Employee"

_WHITESPACE_RE = re.compile(r"\s+")


def resolve_display_name(name: str | None, email: str | None) -> str:
    return (name or "").strip() or (email or "").strip() or FALLBACK_NAME


def _shortest(number: float) -> str:
    return str(int(number)) if number.is_integer() else repr(number)


def _row(*fields: str) -> str:
    return ",".join(f'"{f}"' for f in fields)


def generate_payroll_csv(employee_name: str, period: WorkPeriod | Iterable[DayRecord]) -> str:
    days = period.days if isinstance(period, WorkPeriod) else period
    rows = [CSV_HEADER]
    for day in days:
        hours = derive_hours(day)
        if hours > 0:
            rows.append(_row(
                employee_name, day.iso_date, ORDINARY_HOURS, f"{hours:.2f}", day.notes or "",
            ))
        km = day.kilometers or 0.0
        if km > 0:
            rows.append(_row(
                employee_name, day.iso_date, KILOMETERS, f"{km:.2f}", f"{_shortest(km)} km",
            ))
    return "\n".join(rows)


def export_filename(week_start: date | str, employee_name: str) -> str:
    start = week_start.isoformat() if isinstance(week_start, date) else week_start
    safe_name = _WHITESPACE_RE.sub("_", employee_name)
    return f"timesheet-{start}-{safe_name}.csv"
