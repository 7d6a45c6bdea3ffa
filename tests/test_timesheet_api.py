"""HTTP tests for the timesheet endpoints."""
import io
from datetime import date

import pytest
from fastapi.testclient import TestClient

from weeksheet.api.app import create_app
from weeksheet.api.deps import get_extraction_service
from weeksheet.domain.exceptions import ConfigurationError
from weeksheet.domain.state import TimesheetState
from weeksheet.services.extraction_service import ExtractionService

from conftest import FakeProvider

PNG = ("sheet.png", b"\x89PNG fake", "image/png")


def _client_with(provider=None, error=None) -> TestClient:
    app = create_app()

    def _service():
        if error is not None:
            raise error
        return ExtractionService(provider)

    app.dependency_overrides[get_extraction_service] = _service
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestWeek:
    def test_monday_to_friday(self, client):
        resp = client.get("/timesheet/week", params={"start": "2024-01-10"})
        assert resp.status_code == 200
        days = resp.json()["days"]
        assert [d["date"] for d in days] == [
            "2024-01-08", "2024-01-09", "2024-01-10", "2024-01-11", "2024-01-12",
        ]
        assert days[0]["dayOfWeek"] == "MON"
        assert days[0]["totalHours"] is None

    def test_rolling_period(self, client):
        days = client.get("/timesheet/week", params={"start": "2024-01-12", "days": 3}).json()["days"]
        assert [d["dayOfWeek"] for d in days] == ["FRI", "SAT", "SUN"]

    @pytest.mark.parametrize("days", [0, 8])
    def test_invalid_length(self, client, days):
        assert client.get("/timesheet/week", params={"days": days}).status_code == 422


class TestExtract:
    def test_applied(self, client, fake_provider):
        resp = client.post(
            "/timesheet/extract",
            files={"file": PNG},
            data={"employee_name": "Jane Doe"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "APPLIED"
        monday = body["period"]["days"][0]
        assert monday["date"] == "2024-01-08"
        assert monday["startTime"] == "09:00"
        assert monday["breakMinutes"] == 30
        assert body["confidences"]["2024-01-08"]["endTime"] == 0.4
        assert body["employee_name"] is None
        assert body["email"] == "jane@example.com"
        assert fake_provider.last_document.content_type == "image/png"

    def test_missing_employee_name_is_400(self, client, fake_provider):
        resp = client.post("/timesheet/extract", files={"file": PNG}, data={"employee_name": ""})
        assert resp.status_code == 400
        assert "Employee name" in resp.json()["detail"]
        assert fake_provider.call_count == 0

    def test_unsupported_type_is_400(self, client):
        resp = client.post(
            "/timesheet/extract",
            files={"file": ("sheet.gif", io.BytesIO(b"GIF89a"), "image/gif")},
            data={"employee_name": "Jane"},
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Unsupported file type: image/gif"

    def test_provider_failure_is_502(self):
        client = _client_with(FakeProvider(error=RuntimeError("timeout")))
        resp = client.post("/timesheet/extract", files={"file": PNG}, data={"employee_name": "Jane"})
        assert resp.status_code == 502
        assert "timeout" in resp.json()["detail"]

    def test_missing_configuration_is_500(self):
        client = _client_with(error=ConfigurationError("AI API key not configured."))
        resp = client.post("/timesheet/extract", files={"file": PNG}, data={"employee_name": "Jane"})
        assert resp.status_code == 500
        assert resp.json() == {"detail": "AI API key not configured."}

    def test_blank_document_is_no_change(self):
        client = _client_with(FakeProvider({"days": [], "warnings": ["Blank page"]}))
        body = client.post("/timesheet/extract", files={"file": PNG}, data={"employee_name": "Jane"}).json()
        assert body["status"] == "NO_CHANGE"
        assert body["period"] is None
        assert body["warnings"] == ["Blank page"]


class TestReconcile:
    def _state(self, **update):
        state = TimesheetState.new(date(2024, 1, 8)).model_copy(update=update)
        return state.model_dump(mode="json", by_alias=True)

    def test_empty_payload_keeps_state(self, client):
        state = self._state(employee_name="Jane")
        resp = client.post("/timesheet/reconcile", json={"state": state, "payload": {"days": []}})
        body = resp.json()
        assert body["status"] == "NO_CHANGE"
        assert body["state"]["period"] == state["period"]

    def test_payload_replaces_days(self, client):
        payload = {
            "employee": {"fullName": "Someone Else"},
            "days": [{"date": "2024-01-09", "dayOfWeek": "MON", "work": {"totalHours": 8}}],
        }
        body = client.post(
            "/timesheet/reconcile", json={"state": self._state(employee_name="Jane"), "payload": payload},
        ).json()
        assert body["status"] == "APPLIED"
        assert body["state"]["employee_name"] == "Jane"
        assert body["state"]["week_start"] == "2024-01-08"
        assert body["state"]["period"]["days"] == [{
            "date": "2024-01-08",
            "dayOfWeek": "MON",
            "startTime": None,
            "endTime": None,
            "totalHours": 8.0,
            "breakMinutes": 30,
            "kilometers": None,
            "notes": None,
        }]


def test_summary(client):
    resp = client.post("/timesheet/summary", json={"days": [
        {"date": "2024-01-08", "startTime": "09:00", "endTime": "17:30", "breakMinutes": "30"},
        {"date": "2024-01-09", "totalHours": "7.5", "kilometers": "15"},
        {"date": "2024-01-10", "startTime": "18:00", "endTime": "08:00"},
    ]})
    assert resp.json() == {"total_hours": 15.5, "total_kilometers": 15.0, "days_worked": 2}


class TestExport:
    def test_csv_download(self, client):
        resp = client.post("/timesheet/export", json={
            "employee_name": "Jane Doe",
            "week_start": "2024-01-08",
            "days": [
                {"date": "2024-01-08", "totalHours": "8", "kilometers": "15"},
                {"date": "2024-01-09"},
            ],
        })
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"] == (
            'attachment; filename="timesheet-2024-01-08-Jane_Doe.csv"; '
            "filename*=UTF-8''timesheet-2024-01-08-Jane_Doe.csv"
        )
        assert resp.text == (
            "Employee Name,Date,Earnings Rate,Units,Notes\n"
            '"Jane Doe","2024-01-08","Ordinary Hours","8.00",""\n'
            '"Jane Doe","2024-01-08","Kilometers","15.00","15 km"'
        )

    def test_name_falls_back_to_email(self, client):
        resp = client.post("/timesheet/export", json={
            "email": "jane@example.com",
            "days": [{"date": "2024-01-10", "totalHours": 4}],
        })
        assert 'filename="timesheet-2024-01-10-jane@example.com.csv"' in resp.headers["content-disposition"]
        assert '"jane@example.com","2024-01-10","Ordinary Hours","4.00",""' in resp.text

    def test_non_latin1_name(self, client):
        resp = client.post("/timesheet/export", json={
            "employee_name": "Łukasz Nowak",
            "week_start": "2024-01-08",
            "days": [{"date": "2024-01-08", "totalHours": 8}],
        })
        assert resp.status_code == 200
        disposition = resp.headers["content-disposition"]
        assert 'filename="timesheet-2024-01-08-ukasz_Nowak.csv"' in disposition
        assert "filename*=UTF-8''timesheet-2024-01-08-%C5%81ukasz_Nowak.csv" in disposition
        assert resp.content.decode("utf-8").endswith(
            '"Łukasz Nowak","2024-01-08","Ordinary Hours","8.00",""'
        )
