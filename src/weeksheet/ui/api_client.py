"""Typed HTTP client for the Streamlit page.

Only imports DTOs and domain records — never services.
Instantiate via ``get_client()`` which caches per Streamlit session.
"""
from __future__ import annotations

from datetime import date
from typing import Any
from urllib.parse import unquote

import httpx

from weeksheet.api.schemas.timesheet import ReconcileResponse
from weeksheet.config import settings
from weeksheet.domain.hours import HoursSummary
from weeksheet.domain.models import DayRecord, WorkPeriod
from weeksheet.domain.reconcile import ReconcileOutcome


class APIError(Exception):
    """Raised when the backend returns a 4xx/5xx response."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}")


def _attachment_filename(disposition: str, default: str = "timesheet.csv") -> str:
    """Filename from a Content-Disposition header, preferring RFC 5987 `filename*`."""
    params: dict[str, str] = {}
    for part in disposition.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        params[key.strip().lower()] = value.strip()
    encoded = params.get("filename*", "")
    if encoded.lower().startswith("utf-8''"):
        return unquote(encoded[len("utf-8''"):])
    return params.get("filename", "").strip('"') or default


def _days_json(days: list[DayRecord]) -> list[dict[str, Any]]:
    return [d.model_dump(mode="json", by_alias=True) for d in days]


class WeeksheetClient:
    """One method per backend endpoint."""

    def __init__(
        self, base_url: str | None = None, transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url or settings.API_BASE_URL, timeout=90.0, transport=transport,
        )

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        raise APIError(resp.status_code, str(detail))

    def health(self) -> dict:
        resp = self._client.get("/health")
        self._raise_for_status(resp)
        return resp.json()

    def blank_week(self, start: date, days: int | None = None) -> WorkPeriod:
        params: dict[str, Any] = {"start": start.isoformat()}
        if days is not None:
            params["days"] = days
        resp = self._client.get("/timesheet/week", params=params)
        self._raise_for_status(resp)
        return WorkPeriod.model_validate(resp.json())

    def extract(
        self, filename: str, content: bytes, content_type: str, employee_name: str, email: str = "",
    ) -> ReconcileOutcome:
        resp = self._client.post(
            "/timesheet/extract",
            files={"file": (filename, content, content_type)},
            data={"employee_name": employee_name, "email": email},
        )
        self._raise_for_status(resp)
        return ReconcileOutcome.model_validate(resp.json())

    def reconcile(self, state: dict[str, Any], payload: dict[str, Any] | None) -> ReconcileResponse:
        resp = self._client.post("/timesheet/reconcile", json={"state": state, "payload": payload})
        self._raise_for_status(resp)
        return ReconcileResponse.model_validate(resp.json())

    def summary(self, days: list[DayRecord]) -> HoursSummary:
        resp = self._client.post("/timesheet/summary", json={"days": _days_json(days)})
        self._raise_for_status(resp)
        return HoursSummary.model_validate(resp.json())

    def export_csv(
        self, days: list[DayRecord], employee_name: str, email: str, week_start: date,
    ) -> tuple[str, bytes]:
        """(filename, csv bytes) as served by the backend."""
        resp = self._client.post("/timesheet/export", json={
            "employee_name": employee_name,
            "email": email,
            "week_start": week_start.isoformat(),
            "days": _days_json(days),
        })
        self._raise_for_status(resp)
        return _attachment_filename(resp.headers.get("content-disposition", "")), resp.content


def get_client() -> WeeksheetClient:
    """Return a cached ``WeeksheetClient`` for the current Streamlit session."""
    import streamlit as st

    if "weeksheet_api_client" not in st.session_state:
        st.session_state["weeksheet_api_client"] = WeeksheetClient()
    return st.session_state["weeksheet_api_client"]
