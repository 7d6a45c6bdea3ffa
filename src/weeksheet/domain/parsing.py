"""Lenient readers for free-text numbers and clock times.

Values typed into a form or returned by a model arrive as ``"7.5"``, ``7.5``,
``""`` or ``None`` interchangeably; these helpers turn them into typed values
and return None instead of raising.
"""
from __future__ import annotations

import math
import re

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def parse_number(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_clock(value: object) -> str | None:
    """Normalize ``9:00`` / ``09:00:00`` to ``09:00``; None when not a 24h time."""
    if not isinstance(value, str):
        return None
    match = _CLOCK_RE.match(value.strip())
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def clock_minutes(clock: str) -> int:
    """Minutes since midnight for a normalized ``HH:MM`` string."""
    hours, minutes = clock.split(":")
    return int(hours) * 60 + int(minutes)
