"""Untrusted extraction payload as returned by the AI provider.

Every field is optional and coerced on its own: a wrong type in one place
turns that value into None instead of rejecting the payload. Day items are
kept raw here and validated one by one during reconciliation.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from weeksheet.domain.parsing import parse_number


def _text(v: object) -> str | None:
    if isinstance(v, bool) or v is None:
        return None
    if isinstance(v, (int, float)):
        return str(v)
    if isinstance(v, str):
        return v.strip() or None
    return None


def _object(v: object) -> object:
    return v if isinstance(v, (dict, BaseModel)) else None


def _score(v: object) -> float | None:
    number = parse_number(v)
    if number is None:
        return None
    return min(1.0, max(0.0, number))


class _Lenient(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class EmployeeInfo(_Lenient):
    full_name: str | None = None
    employee_id: str | None = None
    email: str | None = None

    @field_validator("full_name", "employee_id", "email", mode="before")
    @classmethod
    def _clean(cls, v: object) -> object:
        return _text(v)


class PeriodInfo(_Lenient):
    week_start_date: str | None = None
    week_end_date: str | None = None

    @field_validator("week_start_date", "week_end_date", mode="before")
    @classmethod
    def _clean(cls, v: object) -> object:
        return _text(v)


class WorkFields(_Lenient):
    """Raw work values; DayRecord does the numeric and clock parsing."""

    start_time: Any = None
    end_time: Any = None
    total_hours: Any = None
    break_minutes: Any = None
    kilometers: Any = None


class ConfidenceBlock(_Lenient):
    overall: float | None = None
    fields: dict[str, float | None] = Field(default_factory=dict)

    @field_validator("overall", mode="before")
    @classmethod
    def _overall(cls, v: object) -> float | None:
        return _score(v)

    @field_validator("fields", mode="before")
    @classmethod
    def _fields(cls, v: object) -> dict[str, float | None]:
        if not isinstance(v, dict):
            return {}
        return {str(k): _score(score) for k, score in v.items()}


class PayloadDay(_Lenient):
    date: str | None = None
    day_of_week: str | None = None
    work: WorkFields = Field(default_factory=WorkFields)
    notes: str | None = None
    confidence: ConfidenceBlock = Field(default_factory=ConfidenceBlock)

    @field_validator("date", "day_of_week", "notes", mode="before")
    @classmethod
    def _clean(cls, v: object) -> object:
        return _text(v)

    @field_validator("work", "confidence", mode="before")
    @classmethod
    def _blocks(cls, v: object) -> object:
        return v if isinstance(v, (dict, BaseModel)) else {}


class SupervisorInfo(_Lenient):
    name: str | None = None
    signature: str | None = None

    @field_validator("name", "signature", mode="before")
    @classmethod
    def _clean(cls, v: object) -> object:
        return _text(v)


class ApproverInfo(_Lenient):
    name: str | None = None
    date: str | None = None

    @field_validator("name", "date", mode="before")
    @classmethod
    def _clean(cls, v: object) -> object:
        return _text(v)


class ClientInfo(_Lenient):
    name: str | None = None
    project: str | None = None

    @field_validator("name", "project", mode="before")
    @classmethod
    def _clean(cls, v: object) -> object:
        return _text(v)


class ValidationInfo(_Lenient):
    """Non-employee metadata found in the document."""

    supervisor: SupervisorInfo | None = None
    approver: ApproverInfo | None = None
    client: ClientInfo | None = None
    custom: dict[str, Any] = Field(default_factory=dict)

    @field_validator("supervisor", "approver", "client", mode="before")
    @classmethod
    def _objects(cls, v: object) -> object:
        return _object(v)

    @field_validator("custom", mode="before")
    @classmethod
    def _custom(cls, v: object) -> dict[str, Any]:
        return v if isinstance(v, dict) else {}


class SourceInfo(_Lenient):
    file_type: str | None = None
    page_or_image_count: int | None = None

    @field_validator("file_type", mode="before")
    @classmethod
    def _clean(cls, v: object) -> object:
        return _text(v)

    @field_validator("page_or_image_count", mode="before")
    @classmethod
    def _count(cls, v: object) -> int | None:
        number = parse_number(v)
        return int(number) if number is not None and number >= 0 else None


class ExtractionPayload(_Lenient):
    employee: EmployeeInfo | None = None
    period: PeriodInfo | None = None
    days: list[Any] | None = None
    validation: ValidationInfo | None = None
    warnings: list[str] = Field(default_factory=list)
    source: SourceInfo | None = None

    @field_validator("employee", "period", "validation", "source", mode="before")
    @classmethod
    def _objects(cls, v: object) -> object:
        return _object(v)

    @field_validator("days", mode="before")
    @classmethod
    def _days(cls, v: object) -> list[Any] | None:
        return v if isinstance(v, list) else None

    @field_validator("warnings", mode="before")
    @classmethod
    def _warnings(cls, v: object) -> list[str]:
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            return []
        return [w for w in v if isinstance(w, str) and w.strip()]
