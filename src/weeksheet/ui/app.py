import streamlit as st

from weeksheet.domain.calendar import day_label
from weeksheet.domain.models import ConfidenceLevel, DayRecord, confidence_level
from weeksheet.ui.api_client import APIError, get_client
from weeksheet.ui.state import bump_revision, get_revision, get_state, init_session, set_state

LEVEL_ICONS = {
    ConfidenceLevel.HIGH: "\U0001f7e2",
    ConfidenceLevel.MEDIUM: "\U0001f7e1",
    ConfidenceLevel.LOW: "\U0001f534",
}
UPLOAD_TYPES = ["jpg", "jpeg", "png", "webp", "pdf", "txt", "csv"]

st.set_page_config(page_title="Weekly Timesheet", layout="wide")
init_session()
client = get_client()

st.title("Weekly Timesheet")
st.caption(
    "Enter your hours manually or upload a document for AI extraction. "
    "Download as Xero-ready CSV when done."
)

# --- Employee + week ---
state = get_state()
c1, c2, c3 = st.columns(3)
name = c1.text_input("Full Name", value=state.employee_name, placeholder="John Smith")
email = c2.text_input("Email", value=state.email, placeholder="john@company.com")
picked = c3.date_input("Week starting", value=state.week_start, key=f"week_{get_revision()}")

state = state.model_copy(update={"employee_name": name, "email": email})
if picked != state.week_start:
    state = state.change_week(picked)
    bump_revision()
set_state(state)

# --- AI extraction ---
st.divider()
st.subheader("AI Extraction")
st.caption("Upload a photo or document to auto-fill the timesheet")

uploaded = st.file_uploader("Timesheet file (max 20MB)", type=UPLOAD_TYPES)
if uploaded is not None and st.button("Extract", disabled=not state.employee_name.strip()):
    with st.spinner(f"Extracting data from {uploaded.name}..."):
        try:
            outcome = client.extract(
                uploaded.name,
                uploaded.getvalue(),
                uploaded.type or "application/octet-stream",
                state.employee_name,
                state.email,
            )
        except APIError as e:
            st.error(e.detail)
        else:
            state = state.apply(outcome)
            set_state(state)
            bump_revision()
            if outcome.applied:
                st.success(f"Filled {len(outcome.period.days)} day(s) from {uploaded.name}")
            else:
                st.info("Nothing to apply from this file; your entries are unchanged.")

if state.confidences:
    st.caption(
        f"{LEVEL_ICONS[ConfidenceLevel.HIGH]} High confidence   "
        f"{LEVEL_ICONS[ConfidenceLevel.MEDIUM]} Medium   "
        f"{LEVEL_ICONS[ConfidenceLevel.LOW]} Low, please review"
    )

if state.warnings:
    st.warning("**Extraction Warnings**\n\n" + "\n".join(f"- {w}" for w in state.warnings))

# --- Grid ---
st.divider()
st.subheader(f"Hours — Period Starting {state.week_start}")


def _label(text: str, day: DayRecord, field: str) -> str:
    level = confidence_level(state.confidences.get(day.iso_date, {}).get(field))
    return f"{text} {LEVEL_ICONS[level]}" if level else text


def _text(value: object) -> str:
    return "" if value is None else str(value)


for day in state.period.days:
    with st.container(border=True):
        cols = st.columns([2, 1, 1, 1, 1, 1, 3])
        cols[0].markdown(f"**{day_label(day.day_of_week)}**  \n{day.iso_date}")
        key = f"{day.iso_date}_{get_revision()}"
        edited = DayRecord(
            date=day.date,
            start_time=cols[1].text_input(_label("Start", day, "startTime"), _text(day.start_time), key=f"s_{key}"),
            end_time=cols[2].text_input(_label("End", day, "endTime"), _text(day.end_time), key=f"e_{key}"),
            total_hours=cols[3].text_input(_label("Hours", day, "totalHours"), _text(day.total_hours), key=f"h_{key}"),
            break_minutes=cols[4].text_input(_label("Break (min)", day, "breakMinutes"), _text(day.break_minutes), key=f"b_{key}"),
            kilometers=cols[5].text_input(_label("Km", day, "kilometers"), _text(day.kilometers), key=f"k_{key}"),
            notes=cols[6].text_input(_label("Notes", day, "notes"), _text(day.notes), key=f"n_{key}"),
        )
        if edited != day:
            state = state.update_day(edited)
set_state(state)

# --- Summary + download ---
st.divider()
st.subheader("Summary")

try:
    totals = client.summary(state.period.days)
except APIError as e:
    st.error(f"Failed to compute totals: {e.detail}")
    st.stop()

m1, m2 = st.columns(2)
m1.metric("Total Hours", f"{totals.total_hours:.1f}")
m2.metric("Total Km", f"{totals.total_kilometers:.0f}")

if not state.employee_name.strip():
    st.info("Enter employee name first")
elif not state.can_export:
    st.info("Enter some timesheet data first")
else:
    try:
        filename, csv_bytes = client.export_csv(
            state.period.days, state.employee_name, state.email, state.week_start,
        )
    except APIError as e:
        st.error(f"Export failed: {e.detail}")
    else:
        st.download_button("Download Xero CSV", csv_bytes, file_name=filename, mime="text/csv")
