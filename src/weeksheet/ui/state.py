"""Session-state helpers for the Streamlit UI.

The whole form lives in one ``TimesheetState`` under a single key; pages
read it, derive a new value and store it back.
"""
import streamlit as st

from weeksheet.domain.state import TimesheetState

_KEY = "timesheet"


def init_session() -> None:
    """Initialize session state with a blank current week."""
    if _KEY not in st.session_state:
        st.session_state[_KEY] = TimesheetState.new()


def get_state() -> TimesheetState:
    init_session()
    return st.session_state[_KEY]


def set_state(state: TimesheetState) -> None:
    st.session_state[_KEY] = state


def get_revision() -> int:
    """Bumped whenever the days are replaced wholesale, to reset grid widgets."""
    return st.session_state.get("timesheet_revision", 0)


def bump_revision() -> None:
    st.session_state["timesheet_revision"] = get_revision() + 1
