"""Shared test fixtures.

FakeProvider  — stands in for the AI provider; returns a canned reply.
client        — FastAPI TestClient whose extraction service uses FakeProvider.
"""
from __future__ import annotations

import json
from typing import Any

import pytest

from weeksheet.extraction.providers import UploadedDocument


class FakeProvider:
    """Test double satisfying ExtractionProvider; records the last call."""

    name = "fake"

    def __init__(self, reply: Any = None, error: Exception | None = None) -> None:
        self._reply = reply if isinstance(reply, str) else json.dumps(reply or {})
        self._error = error
        self.call_count = 0
        self.last_prompt: str | None = None
        self.last_document: UploadedDocument | None = None

    def complete(self, *, prompt: str, document: UploadedDocument) -> str:
        self.call_count += 1
        self.last_prompt = prompt
        self.last_document = document
        if self._error is not None:
            raise self._error
        return self._reply


def make_payload(days: list[dict[str, Any]] | None, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "employee": {"fullName": "Jane Doe", "employeeId": None, "email": "jane@example.com"},
        "period": {"weekStartDate": None, "weekEndDate": None},
        "days": days,
        "validation": {
            "supervisor": {"name": "Sam Boss", "signature": None},
            "approver": {"name": None, "date": None},
            "client": {"name": "Acme", "project": "Warehouse"},
            "custom": {},
        },
        "warnings": [],
        "source": {"fileType": "image", "pageOrImageCount": 1},
    }
    payload.update(extra)
    return payload


def make_day(date: str | None, day_of_week: str | None = None, **work: Any) -> dict[str, Any]:
    confidence = work.pop("confidence", None)
    notes = work.pop("notes", None)
    return {
        "date": date,
        "dayOfWeek": day_of_week,
        "work": {
            "startTime": work.get("startTime"),
            "endTime": work.get("endTime"),
            "totalHours": work.get("totalHours"),
            "breakMinutes": work.get("breakMinutes"),
            "kilometers": work.get("kilometers"),
        },
        "notes": notes,
        "confidence": confidence if confidence is not None else {"overall": 0.9, "fields": {}},
    }


@pytest.fixture
def fake_provider():
    return FakeProvider(make_payload([
        make_day("2024-01-08", "MON", startTime="09:00", endTime="17:30", confidence={
            "overall": 0.95, "fields": {"startTime": 0.9, "endTime": 0.4, "totalHours": None},
        }),
        make_day("2024-01-09", "TUE", totalHours=7.5, kilometers=12),
    ]))


@pytest.fixture
def client(fake_provider):
    """FastAPI TestClient with the extraction service wired to FakeProvider."""
    from fastapi.testclient import TestClient
    from weeksheet.api.app import create_app
    from weeksheet.api.deps import get_extraction_service
    from weeksheet.services.extraction_service import ExtractionService

    app = create_app()
    app.dependency_overrides[get_extraction_service] = lambda: ExtractionService(fake_provider)
    with TestClient(app) as c:
        yield c
