"""Reconcile an untrusted extraction payload into a canonical work period.

The weekday label written in the source document is treated as
authoritative: when the numeric date disagrees with it, the date moves to
the nearest day carrying that label. Numeric dates that can be read as both
DD/MM and MM/DD are disambiguated by the dates already resolved earlier in
the same payload (the sequence must keep increasing).

None of the policy decisions taken here produce warnings; only the warnings
present in the payload are surfaced.
"""
from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from weeksheet.config import settings
from weeksheet.domain.calendar import (
    ALL_DAY_CODES,
    DayOfWeek,
    parse_iso_date,
    parse_weekday,
    sunday_index,
    weekday_code,
)
from weeksheet.domain.models import ConfidenceMap, DayRecord, WorkPeriod
from weeksheet.domain.parsing import parse_clock
from weeksheet.domain.payload import ExtractionPayload, PayloadDay, SourceInfo, ValidationInfo
from weeksheet.domain.period import MAX_PERIOD_DAYS

logger = logging.getLogger(__name__)

_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")
_NUMERIC_RE = re.compile(r"^(\d{1,2})[/.\-](\d{1,2})(?:[/.\-](\d{4}|\d{2}))?$")


class ReconcileStatus(str, Enum):
    APPLIED = "APPLIED"
    NO_CHANGE = "NO_CHANGE"


class ReconcileOutcome(BaseModel):
    """Result of one reconciliation.

    ``NO_CHANGE`` means the payload carried no usable days and the current
    period must be kept as is; ``period`` is None in that case.
    ``employee_name`` / ``email`` are only set when the caller had no value.
    """

    status: ReconcileStatus
    period: WorkPeriod | None = None
    confidences: ConfidenceMap = Field(default_factory=dict)
    overall_confidence: dict[str, float | None] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    employee_name: str | None = None
    email: str | None = None
    week_start_date: date | None = None
    week_end_date: date | None = None
    validation: ValidationInfo | None = None
    source: SourceInfo | None = None

    @property
    def applied(self) -> bool:
        return self.status == ReconcileStatus.APPLIED


# ---------------------------------------------------------------------------
# Date resolution
# ---------------------------------------------------------------------------


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def date_candidates(text: str | None, years: list[int]) -> list[date]:
    """Every calendar date *text* could mean, most literal reading first.

    ``years`` supplies the year for day/month forms that omit it.
    """
    if not text:
        return []
    found: list[date | None] = []

    iso = _ISO_RE.match(text)
    if iso:
        y, m, d = (int(g) for g in iso.groups())
        found.append(_safe_date(y, m, d))
        if m != d and m <= 12 and d <= 12:
            found.append(_safe_date(y, d, m))
    else:
        numeric = _NUMERIC_RE.match(text)
        if numeric:
            first, second = int(numeric.group(1)), int(numeric.group(2))
            if numeric.group(3):
                year = int(numeric.group(3))
                candidate_years = [year + 2000 if year < 100 else year]
            else:
                candidate_years = years
            for year in candidate_years:
                found.append(_safe_date(year, second, first))  # DD/MM
                found.append(_safe_date(year, first, second))  # MM/DD

    unique: list[date] = []
    for d in found:
        if d is not None and d not in unique:
            unique.append(d)
    return unique


def _pick_candidate(
    candidates: list[date],
    previous: date | None,
    anchor: date | None,
    stated: DayOfWeek | None,
) -> date:
    def rank(item: tuple[int, date]) -> tuple[bool, bool, bool, int, int]:
        index, candidate = item
        after_previous = previous is None or candidate > previous
        on_stated_day = stated is None or weekday_code(candidate) == stated
        gap = abs((candidate - anchor).days) if anchor is not None else 0
        return (gap > 7, not after_previous, not on_stated_day, gap, index)

    return min(enumerate(candidates), key=rank)[1]


def _next_on_or_after(start: date, stated: DayOfWeek) -> date:
    ahead = (ALL_DAY_CODES.index(stated) - sunday_index(start)) % 7
    return start + timedelta(days=ahead)


def align_to_weekday(candidate: date, stated: DayOfWeek | None, previous: date | None) -> date:
    """Move *candidate* onto *stated* (nearest, -3..+3 days) and after *previous*."""
    if stated is None:
        if previous is not None and candidate <= previous:
            return previous + timedelta(days=1)
        return candidate
    ahead = (ALL_DAY_CODES.index(stated) - sunday_index(candidate)) % 7
    shift = ahead if ahead <= 3 else ahead - 7
    aligned = candidate + timedelta(days=shift)
    if previous is not None and aligned <= previous:
        aligned = _next_on_or_after(previous + timedelta(days=1), stated)
    return aligned


def resolve_date(
    raw_date: str | None,
    stated: DayOfWeek | None,
    previous: date | None,
    period_start: date | None,
    reference: date,
) -> date | None:
    """Calendar date for one payload day, or None when nothing anchors it.

    Dates that would have to move past the first or last representable
    calendar day are unresolvable and also give None.
    """
    try:
        return _resolve_date(raw_date, stated, previous, period_start, reference)
    except OverflowError:
        logger.warning("Date %r cannot be resolved within the calendar range", raw_date)
        return None


def _resolve_date(
    raw_date: str | None,
    stated: DayOfWeek | None,
    previous: date | None,
    period_start: date | None,
    reference: date,
) -> date | None:
    if previous is not None:
        years = [previous.year, previous.year + 1]
    elif period_start is not None:
        years = [period_start.year]
    else:
        years = [reference.year]

    anchor = previous or period_start
    candidates = date_candidates(raw_date, years)
    if anchor is None and raw_date and _ISO_RE.match(raw_date):
        # Nothing to compare against: take a full ISO date literally.
        candidates = candidates[:1]
    if candidates:
        chosen = _pick_candidate(candidates, previous, anchor, stated)
        return align_to_weekday(chosen, stated, previous)

    if previous is not None:
        start = previous + timedelta(days=1)
    elif period_start is not None:
        start = period_start
    else:
        return None
    return _next_on_or_after(start, stated) if stated is not None else start


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


def _has_work_signal(day: DayRecord) -> bool:
    return day.has_time_span or (day.total_hours is not None and day.total_hours > 0)


def _build_record(item: PayloadDay, on: date, default_break: int) -> DayRecord:
    start = parse_clock(item.work.start_time)
    end = parse_clock(item.work.end_time)
    if start is None or end is None:
        start = end = None

    record = DayRecord(
        date=on,
        start_time=start,
        end_time=end,
        total_hours=item.work.total_hours,
        break_minutes=item.work.break_minutes,
        kilometers=item.work.kilometers,
        notes=item.notes,
    )
    if record.break_minutes is None and _has_work_signal(record):
        record = record.model_copy(update={"break_minutes": default_break})
    return record


def _parse_optional_date(text: str | None) -> date | None:
    if not text:
        return None
    try:
        return parse_iso_date(text[:10])
    except ValueError:
        return None


def _coerce_day(raw_day: Any) -> PayloadDay | None:
    if isinstance(raw_day, PayloadDay):
        return raw_day
    if isinstance(raw_day, BaseModel):
        raw_day = raw_day.model_dump(by_alias=True)
    if not isinstance(raw_day, dict):
        return None
    try:
        return PayloadDay.model_validate(raw_day)
    except ValidationError as exc:
        logger.warning("Skipping malformed extracted day: %s", exc)
        return None


def _coerce_payload(raw: Any) -> ExtractionPayload | None:
    if isinstance(raw, ExtractionPayload):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return ExtractionPayload.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Extraction payload rejected: %s", exc)
        return None


def reconcile_extraction(
    raw: Any,
    *,
    employee_name: str = "",
    email: str = "",
    reference: date | None = None,
    default_break_minutes: int | None = None,
) -> ReconcileOutcome:
    """Turn one extraction payload into a canonical period.

    *employee_name* / *email* are the values the user already has; the
    payload's identity is only returned where these are blank. *reference*
    supplies the year for dates written without one when nothing else in
    the payload does (defaults to today).
    """
    payload = _coerce_payload(raw)
    if payload is None:
        return ReconcileOutcome(status=ReconcileStatus.NO_CHANGE)

    default_break = (
        settings.DEFAULT_BREAK_MINUTES if default_break_minutes is None else default_break_minutes
    )

    outcome = ReconcileOutcome(
        status=ReconcileStatus.NO_CHANGE,
        warnings=list(payload.warnings),
        validation=payload.validation,
        source=payload.source,
    )
    if payload.employee is not None:
        if not employee_name.strip() and payload.employee.full_name:
            outcome.employee_name = payload.employee.full_name
        if not email.strip() and payload.employee.email:
            outcome.email = payload.employee.email

    if not payload.days:
        return outcome

    period_start = _parse_optional_date(payload.period.week_start_date) if payload.period else None
    reference = reference or date.today()

    records: list[DayRecord] = []
    confidences: ConfidenceMap = {}
    overall: dict[str, float | None] = {}
    previous: date | None = None

    for raw_day in payload.days:
        if len(records) >= MAX_PERIOD_DAYS:
            break
        item = _coerce_day(raw_day)
        if item is None:
            continue

        stated = parse_weekday(item.day_of_week)
        resolved = resolve_date(item.date, stated, previous, period_start, reference)
        if resolved is None:
            continue

        record = _build_record(item, resolved, default_break)
        records.append(record)
        confidences[record.iso_date] = dict(item.confidence.fields)
        overall[record.iso_date] = item.confidence.overall
        previous = resolved

    if not records:
        return outcome

    period = WorkPeriod(days=records)
    logger.debug(
        "Reconciled %d day(s) %s..%s", len(records), period.start_date, period.end_date,
    )
    return outcome.model_copy(update={
        "status": ReconcileStatus.APPLIED,
        "period": period,
        "confidences": confidences,
        "overall_confidence": overall,
        "week_start_date": period.start_date,
        "week_end_date": period.end_date,
    })
