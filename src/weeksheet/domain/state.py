"""Explicit application state for one timesheet being edited.

Operations return a new ``TimesheetState``; nothing is changed in place.
"""
from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from weeksheet.domain.calendar import current_week_start
from weeksheet.domain.export import resolve_display_name
from weeksheet.domain.hours import has_any_data
from weeksheet.domain.models import ConfidenceMap, DayRecord, WorkPeriod
from weeksheet.domain.period import generate_default_period
from weeksheet.domain.reconcile import ReconcileOutcome


class TimesheetState(BaseModel):
    employee_name: str = ""
    email: str = ""
    week_start: dt.date
    period: WorkPeriod
    confidences: ConfidenceMap = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def new(cls, week_start: dt.date | None = None) -> "TimesheetState":
        start = week_start or current_week_start()
        period = generate_default_period(start)
        return cls(week_start=period.start_date, period=period)

    def change_week(self, week_start: dt.date) -> "TimesheetState":
        """Blank period for another week; extraction results are cleared."""
        period = generate_default_period(week_start)
        return self.model_copy(update={
            "week_start": period.start_date,
            "period": period,
            "confidences": {},
            "warnings": [],
        })

    def update_day(self, day: DayRecord) -> "TimesheetState":
        """Replace the day with the same date (manual edit)."""
        if all(d.date != day.date for d in self.period.days):
            raise ValueError(f"{day.date} is not part of the current period")
        days = [day if d.date == day.date else d for d in self.period.days]
        return self.model_copy(update={"period": WorkPeriod(days=days)})

    def apply(self, outcome: ReconcileOutcome) -> "TimesheetState":
        """Merge a reconciliation outcome.

        Identity is only ever filled in, never replaced. A NO_CHANGE outcome
        keeps the current days, confidences and week.
        """
        update: dict = {}
        if outcome.employee_name and not self.employee_name.strip():
            update["employee_name"] = outcome.employee_name
        if outcome.email and not self.email.strip():
            update["email"] = outcome.email
        if outcome.warnings:
            update["warnings"] = list(outcome.warnings)
        if outcome.applied and outcome.period is not None:
            update["period"] = outcome.period
            update["confidences"] = outcome.confidences
            update["week_start"] = outcome.period.start_date
            update["warnings"] = list(outcome.warnings)
        return self.model_copy(update=update)

    @property
    def display_name(self) -> str:
        return resolve_display_name(self.employee_name, self.email)

    @property
    def can_export(self) -> bool:
        return bool(self.employee_name.strip()) and has_any_data(self.period)
