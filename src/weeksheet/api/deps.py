"""FastAPI dependencies."""
from __future__ import annotations

from weeksheet.extraction.providers import get_provider
from weeksheet.services.extraction_service import ExtractionService
from weeksheet.services.timesheet_service import TimesheetService


def get_extraction_service() -> ExtractionService:
    """Provider is resolved per request so configuration errors surface as 500s."""
    return ExtractionService(get_provider())


def get_timesheet_service() -> TimesheetService:
    return TimesheetService()
