"""Canonical timesheet records."""
from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from weeksheet.domain.calendar import DayOfWeek, weekday_code
from weeksheet.domain.parsing import parse_clock, parse_number

# date -> field name -> score in [0, 1], or None for "no signal"
ConfidenceMap = dict[str, dict[str, float | None]]

DAY_FIELDS = ("startTime", "endTime", "totalHours", "breakMinutes", "kilometers", "notes")


class DayRecord(BaseModel):
    """One calendar day of a work period.

    Numeric fields accept free text; text that does not parse, and negative
    values, become None. ``day_of_week`` is derived from ``date`` and is
    output only; any value supplied on input is ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: dt.date
    start_time: str | None = None
    end_time: str | None = None
    total_hours: float | None = None
    break_minutes: int | None = None
    kilometers: float | None = None
    notes: str | None = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _clock(cls, v: object) -> str | None:
        return parse_clock(v)

    @field_validator("total_hours", "kilometers", mode="before")
    @classmethod
    def _non_negative(cls, v: object) -> float | None:
        number = parse_number(v)
        if number is None or number < 0:
            return None
        return number

    @field_validator("break_minutes", mode="before")
    @classmethod
    def _minutes(cls, v: object) -> int | None:
        number = parse_number(v)
        if number is None or number < 0:
            return None
        return int(round(number))

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, v: object) -> str | None:
        if v is None:
            return None
        text = v if isinstance(v, str) else str(v)
        return text.strip() or None

    @computed_field(alias="dayOfWeek")
    @property
    def day_of_week(self) -> DayOfWeek:
        return weekday_code(self.date)

    @property
    def has_time_span(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def is_empty(self) -> bool:
        return self.total_hours is None and not self.has_time_span

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()


class WorkPeriod(BaseModel):
    """1-7 days in strictly increasing date order."""

    days: list[DayRecord] = Field(min_length=1, max_length=7)

    @model_validator(mode="after")
    def _chronological(self) -> "WorkPeriod":
        for prev, cur in zip(self.days, self.days[1:]):
            if cur.date <= prev.date:
                raise ValueError(
                    f"days must be in increasing date order: {prev.date} then {cur.date}"
                )
        return self

    @property
    def start_date(self) -> dt.date:
        return self.days[0].date

    @property
    def end_date(self) -> dt.date:
        return self.days[-1].date


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


def confidence_level(score: float | None) -> ConfidenceLevel | None:
    """Highlight band for a field score; None means no highlight."""
    if score is None:
        return None
    if score >= 0.8:
        return ConfidenceLevel.HIGH
    if score >= 0.5:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
