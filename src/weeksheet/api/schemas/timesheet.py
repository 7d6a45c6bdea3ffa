"""Timesheet DTOs — pure Pydantic, reusing the domain records."""
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from weeksheet.domain.models import DayRecord
from weeksheet.domain.reconcile import ReconcileStatus
from weeksheet.domain.state import TimesheetState


class DaysRequest(BaseModel):
    days: list[DayRecord] = Field(default_factory=list)


class ExportRequest(BaseModel):
    employee_name: str = ""
    email: str = ""
    week_start: date | None = None
    days: list[DayRecord] = Field(default_factory=list)


class ReconcileRequest(BaseModel):
    state: TimesheetState
    payload: dict[str, Any] | None = None


class ReconcileResponse(BaseModel):
    status: ReconcileStatus
    state: TimesheetState
