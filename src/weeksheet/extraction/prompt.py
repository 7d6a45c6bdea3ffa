"""Instructions sent to the AI provider with every uploaded document."""
from __future__ import annotations

EXTRACTION_PROMPT = """You extract worked hours from whatever an employee uploads: handwritten notes, photos, spreadsheets, text files or any other format. Be pragmatic. The goal is a clean timesheet, not a critique of the source.

EMPLOYEE
- The submitting employee is confirmed below. Every hour in the document belongs to them.
- Any other name is a coworker, supervisor, customer or client. Never drop hours because another name appears and never warn about identity.
- Put other names under "validation" (supervisor, client, custom) and/or in the day's "notes".

PERIOD
- A pay period may start on any weekday. The first day listed is the start of the period.
- Return one entry per worked day (1 to 7 entries), in chronological order.
- weekStartDate is the first day returned, weekEndDate the last.

DATES
- Dates such as 06/02 are often DD/MM (6 February). Use neighbouring dates and weekday labels to decide.
- When a day is labelled (e.g. "Friday 06/02"), the label wins: resolve the date so it falls on that weekday.
- Do not warn about weekday/date mismatches.

BREAKS
- Use break times when they are written down.
- When a worked day mentions no break, use breakMinutes: 30.
- Use breakMinutes: 0 only when the document says no break was taken.

HOURS
- Stated total hours go into totalHours as written. Do not second-guess them.
- With only start/end times, totalHours = (end - start) - breakMinutes/60.
- With only a total, startTime and endTime are null.
- Kilometers when present, otherwise null.

NOTES
- Job sites, clients, tasks, locations and coworkers go into the day's "notes".

WARNINGS
- Leave "warnings" empty unless the data is unreadable or critically incomplete (no hours at all, blank or corrupt file).
- Never warn about identity, period shape, date formats, weekday labels, other names, break assumptions or how totals were calculated.

Reply with JSON only, no markdown, in exactly this shape:
{
  "employee": { "fullName": "string", "employeeId": "string|null", "email": "string|null" },
  "period": { "weekStartDate": "YYYY-MM-DD", "weekEndDate": "YYYY-MM-DD" },
  "days": [
    {
      "date": "YYYY-MM-DD",
      "dayOfWeek": "MON|TUE|WED|THU|FRI|SAT|SUN",
      "work": {
        "startTime": "HH:MM|null",
        "endTime": "HH:MM|null",
        "totalHours": number|null,
        "breakMinutes": number|null,
        "kilometers": number|null
      },
      "notes": "string|null",
      "confidence": {
        "overall": number_between_0_and_1,
        "fields": { "startTime": number|null, "endTime": number|null, "totalHours": number|null, "breakMinutes": number|null, "kilometers": number|null }
      }
    }
  ],
  "validation": {
    "supervisor": { "name": "string|null", "signature": "string|null" },
    "approver": { "name": "string|null", "date": "YYYY-MM-DD|null" },
    "client": { "name": "string|null", "project": "string|null" },
    "custom": {}
  },
  "warnings": [],
  "source": { "fileType": "string", "pageOrImageCount": number }
}

Dates are YYYY-MM-DD, times HH:MM (24h), confidence between 0 and 1."""


def build_prompt(employee_name: str) -> str:
    return (
        f"{EXTRACTION_PROMPT}\n\n"
        f'CONFIRMED EMPLOYEE: "{employee_name}". All hours in the uploaded data belong '
        "to this person. Any other names are coworkers, supervisors, clients or "
        "references from their notes."
    )


def inline_document(prompt: str, filename: str, text: str) -> str:
    """Prompt followed by a text document's content."""
    return f"{prompt}\n\nFile: {filename}\nContent:\n{text}"
