"""Timesheet use-cases behind the API: blank periods, merge, totals, export."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from weeksheet.domain.calendar import current_week_start
from weeksheet.domain.export import export_filename, generate_payroll_csv, resolve_display_name
from weeksheet.domain.hours import HoursSummary, summarize
from weeksheet.domain.models import DayRecord, WorkPeriod
from weeksheet.domain.period import generate_period, generate_week_days
from weeksheet.domain.reconcile import ReconcileStatus, reconcile_extraction
from weeksheet.domain.state import TimesheetState


class TimesheetService:
    def blank_period(self, start: date | None = None, days: int | None = None) -> WorkPeriod:
        start = start or current_week_start()
        if days is None:
            return generate_week_days(start)
        return generate_period(start, days)

    def new_state(self, start: date | None = None) -> TimesheetState:
        return TimesheetState.new(start)

    def reconcile(
        self, state: TimesheetState, payload: Any, reference: date | None = None,
    ) -> tuple[TimesheetState, ReconcileStatus]:
        outcome = reconcile_extraction(
            payload,
            employee_name=state.employee_name,
            email=state.email,
            reference=reference or state.week_start,
        )
        return state.apply(outcome), outcome.status

    def summary(self, days: Iterable[DayRecord]) -> HoursSummary:
        return summarize(days)

    def export(
        self,
        days: list[DayRecord],
        employee_name: str = "",
        email: str = "",
        week_start: date | None = None,
    ) -> tuple[str, str]:
        """(filename, csv text) for the given days."""
        name = resolve_display_name(employee_name, email)
        start = week_start or (days[0].date if days else current_week_start())
        return export_filename(start, name), generate_payroll_csv(name, days)
