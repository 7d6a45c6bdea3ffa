"""Timesheet endpoints: blank period, extraction, merge, totals, CSV."""
import unicodedata
from datetime import date
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response

from weeksheet.api.deps import get_extraction_service, get_timesheet_service
from weeksheet.api.schemas.timesheet import (
    DaysRequest, ExportRequest, ReconcileRequest, ReconcileResponse,
)
from weeksheet.domain.hours import HoursSummary
from weeksheet.domain.models import WorkPeriod
from weeksheet.domain.reconcile import ReconcileOutcome
from weeksheet.extraction.providers import UploadedDocument
from weeksheet.services.extraction_service import ExtractionService
from weeksheet.services.timesheet_service import TimesheetService

router = APIRouter(prefix="/timesheet", tags=["timesheet"])


def _content_disposition(filename: str) -> str:
    """Attachment header safe for any name: ASCII `filename` plus RFC 5987 `filename*`."""
    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace('"', "").replace(";", "").replace("\\", "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get("/week", response_model=WorkPeriod)
def blank_week(
    start: date | None = None,
    days: int | None = Query(None, ge=1, le=7),
    svc: TimesheetService = Depends(get_timesheet_service),
) -> WorkPeriod:
    return svc.blank_period(start, days)


@router.post("/extract", response_model=ReconcileOutcome)
def extract(
    file: UploadFile = File(...),
    employee_name: str = Form(""),
    email: str = Form(""),
    svc: ExtractionService = Depends(get_extraction_service),
) -> ReconcileOutcome:
    document = UploadedDocument(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        content=file.file.read(),
    )
    return svc.extract_and_reconcile(document, employee_name=employee_name, email=email)


@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile(
    payload: ReconcileRequest, svc: TimesheetService = Depends(get_timesheet_service),
) -> ReconcileResponse:
    state, status = svc.reconcile(payload.state, payload.payload)
    return ReconcileResponse(status=status, state=state)


@router.post("/summary", response_model=HoursSummary)
def summary(
    payload: DaysRequest, svc: TimesheetService = Depends(get_timesheet_service),
) -> HoursSummary:
    return svc.summary(payload.days)


@router.post("/export")
def export(
    payload: ExportRequest, svc: TimesheetService = Depends(get_timesheet_service),
) -> Response:
    filename, csv_text = svc.export(
        payload.days, payload.employee_name, payload.email, payload.week_start,
    )
    return Response(
        content=csv_text.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": _content_disposition(filename)},
    )
