import json
from datetime import date

from typer.testing import CliRunner

from weeksheet.cli import app
from weeksheet.config import Settings
from weeksheet.domain.models import DayRecord
from weeksheet.domain.state import TimesheetState

runner = CliRunner()


def test_week_prints_blank_period():
    result = runner.invoke(app, ["week", "--start", "2024-01-10"])
    assert result.exit_code == 0
    days = json.loads(result.stdout)["days"]
    assert [d["date"] for d in days][0] == "2024-01-08"
    assert len(days) == 5


def test_week_rejects_bad_date():
    result = runner.invoke(app, ["week", "--start", "10/01/2024"])
    assert result.exit_code == 1


def test_export_writes_csv(tmp_path):
    state = TimesheetState.new(date(2024, 1, 8)).model_copy(update={"employee_name": "Jane Doe"})
    state = state.update_day(DayRecord(date="2024-01-08", totalHours=8, kilometers=15))
    src = tmp_path / "week.json"
    src.write_text(state.model_dump_json(by_alias=True), encoding="utf-8")
    out = tmp_path / "out.csv"

    result = runner.invoke(app, ["export", str(src), "--out", str(out)])

    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").splitlines() == [
        "Employee Name,Date,Earnings Rate,Units,Notes",
        '"Jane Doe","2024-01-08","Ordinary Hours","8.00",""',
        '"Jane Doe","2024-01-08","Kilometers","15.00","15 km"',
    ]


def test_export_rejects_invalid_file(tmp_path):
    src = tmp_path / "broken.json"
    src.write_text("{not json", encoding="utf-8")
    assert runner.invoke(app, ["export", str(src)]).exit_code == 1


def test_doctor_reports_missing_key(monkeypatch):
    cfg = Settings(_env_file=None, AI_PROVIDER="openai", AI_API_KEY=None, OPENAI_API_KEY=None)
    monkeypatch.setattr("weeksheet.cli.settings", cfg)
    result = runner.invoke(app, ["doctor"])
    assert result.exit_code == 1
    assert "API key" in result.stdout


def test_doctor_passes_when_configured(monkeypatch):
    cfg = Settings(_env_file=None, AI_PROVIDER="anthropic", AI_API_KEY=None, ANTHROPIC_API_KEY="sk-ant-test")
    monkeypatch.setattr("weeksheet.cli.settings", cfg)
    result = runner.invoke(app, ["doctor"])
    assert result.exit_code == 0
    assert "all good" in result.stdout
