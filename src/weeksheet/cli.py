import json
import mimetypes
import sys
from datetime import date
from pathlib import Path

import typer

from weeksheet.config import settings
from weeksheet.domain.exceptions import WeeksheetError
from weeksheet.logging import get_session_id, logger

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main():
    """
    Weekly timesheet extraction and payroll CSV export.
    """
    pass


@app.command(name="doctor")
def doctor():
    """
    Check configuration and environment health.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 Weeksheet Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    print(f"  Session: {get_session_id()}")
    passed += 1

    # ── Check 2: Provider ───────────────────────────────────────────────────
    print("\n[AI Provider]")
    provider = settings.provider_name
    if provider in ("openai", "anthropic"):
        print(f"  AI_PROVIDER:            ✅ {provider}")
        passed += 1
    else:
        print(f"  AI_PROVIDER:            ❌ Unknown: {provider!r}")
        failures.append(f"AI_PROVIDER must be 'openai' or 'anthropic', got {provider!r}")

    # ── Check 3: API key ────────────────────────────────────────────────────
    if settings.api_key_for(provider):
        print("  API key:                ✅ Set")
        passed += 1
    else:
        print("  API key:                ❌ Missing")
        failures.append("No API key — set AI_API_KEY, ANTHROPIC_API_KEY or OPENAI_API_KEY in .env")

    model = settings.ANTHROPIC_MODEL if provider == "anthropic" else settings.OPENAI_MODEL_VISION
    print(f"  Model:                  {model}")
    if provider == "anthropic" and settings.ANTHROPIC_BASE_URL:
        print(f"  ANTHROPIC_BASE_URL:     {settings.ANTHROPIC_BASE_URL}")

    # ── Check 4: Timesheet policy ───────────────────────────────────────────
    print("\n[Timesheet Policy]")
    print(f"  DEFAULT_BREAK_MINUTES:  {settings.DEFAULT_BREAK_MINUTES}")
    print(f"  MAX_UPLOAD_SIZE_MB:     {settings.MAX_UPLOAD_SIZE_MB}")
    policy = settings.PERIOD_POLICY.lower()
    if policy == "weekdays" or (policy == "rolling" and 1 <= settings.PERIOD_DAYS <= 7):
        print(f"  PERIOD_POLICY:          ✅ {policy} ({settings.PERIOD_DAYS} days)")
        passed += 1
    else:
        print(f"  PERIOD_POLICY:          ❌ {policy} ({settings.PERIOD_DAYS} days)")
        failures.append("PERIOD_POLICY must be 'weekdays' or 'rolling' with PERIOD_DAYS between 1 and 7")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed — all good ✅")
        print()


def _parse_start(start: str | None) -> date | None:
    if start is None:
        return None
    try:
        return date.fromisoformat(start)
    except ValueError:
        print(f"❌ Not a YYYY-MM-DD date: {start}")
        raise typer.Exit(code=1)


def _write_csv(csv_text: str, filename: str, out: Path | None) -> None:
    target = out or Path(filename)
    target.write_text(csv_text, encoding="utf-8")
    print(f"✅ Wrote {target}")


@app.command(name="week")
def week(
    start: str | None = typer.Option(None, help="First day (YYYY-MM-DD); defaults to this week"),
    days: int | None = typer.Option(None, min=1, max=7, help="Rolling period length instead of Mon-Fri"),
):
    """Print a blank period as JSON."""
    from weeksheet.services.timesheet_service import TimesheetService

    period = TimesheetService().blank_period(_parse_start(start), days)
    print(period.model_dump_json(by_alias=True, indent=2))


@app.command(name="extract")
def extract(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document or photo to extract"),
    employee: str = typer.Option(..., "--employee", "-e", help="Confirmed employee name"),
    email: str = typer.Option("", help="Employee email"),
    out: Path | None = typer.Option(None, help="CSV path; defaults to the payroll filename"),
):
    """Extract a week from FILE with the configured provider and write payroll CSV."""
    from weeksheet.domain.export import export_filename, generate_payroll_csv, resolve_display_name
    from weeksheet.extraction.providers import UploadedDocument, get_provider
    from weeksheet.services.extraction_service import ExtractionService

    content_type = mimetypes.guess_type(file.name)[0] or "application/octet-stream"
    document = UploadedDocument(filename=file.name, content_type=content_type, content=file.read_bytes())
    try:
        outcome = ExtractionService(get_provider()).extract_and_reconcile(
            document, employee_name=employee, email=email,
        )
    except WeeksheetError as e:
        logger.error(f"Extraction failed: {e.message}")
        print(f"❌ Failed: {e.message}")
        raise typer.Exit(code=1)

    for warning in outcome.warnings:
        print(f"⚠️  {warning}")
    if not outcome.applied:
        print("❌ No days could be extracted from this file.")
        raise typer.Exit(code=1)

    name = resolve_display_name(employee, email or outcome.email)
    _write_csv(
        generate_payroll_csv(name, outcome.period),
        export_filename(outcome.period.start_date, name),
        out,
    )


@app.command(name="export")
def export(
    timesheet: Path = typer.Argument(..., exists=True, dir_okay=False, help="Timesheet state JSON"),
    out: Path | None = typer.Option(None, help="CSV path; defaults to the payroll filename"),
):
    """Write payroll CSV for a saved timesheet (TimesheetState JSON)."""
    from pydantic import ValidationError
    from weeksheet.domain.export import export_filename, generate_payroll_csv
    from weeksheet.domain.state import TimesheetState

    try:
        state = TimesheetState.model_validate(json.loads(timesheet.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"❌ Invalid timesheet file: {e}")
        raise typer.Exit(code=1)

    name = state.display_name
    _write_csv(
        generate_payroll_csv(name, state.period),
        export_filename(state.week_start, name),
        out,
    )


@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address"),
    port: int | None = typer.Option(None, help="Port"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "weeksheet.api.app:create_app",
        factory=True,
        host=host or settings.API_HOST,
        port=port or settings.API_PORT,
    )


if __name__ == "__main__":
    app()
