from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Optional

_HOURS_MINUTES = re.compile(r"^\s*(?:(?P<h>\d+)\s*h)?\s*(?:(?P<m>\d+)\s*m)?\s*$", re.IGNORECASE)
_CLOCK = re.compile(r"^\s*(?P<h>\d+):(?P<m>[0-5]\d)\s*$")
_DECIMAL_HOURS = re.compile(r"^\s*\d+(?:\.\d+)?\s*$")

# A single day. Larger hints are treated as malformed.
_MAX_HINT = timedelta(hours=24)


def format_duration(value: timedelta) -> str:
    """``7h 30m`` style, minutes floored, never negative."""
    total_minutes = max(int(value.total_seconds() // 60), 0)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def parse_duration_hint(value: Any) -> Optional[timedelta]:
    """Parse a client supplied worked-hours string.

    Accepted: ``"7h 30m"``, ``"7h"``, ``"45m"``, ``"07:30"`` and decimal hours
    (``"7.5"``), up to 24 hours. Anything else yields ``None`` so the caller
    falls back to the elapsed time.
    """

    if not isinstance(value, str) or not value.strip():
        return None

    try:
        parsed = _parse(value)
    except (OverflowError, ValueError):
        return None
    if parsed is None or parsed > _MAX_HINT:
        return None
    return parsed


def _parse(value: str) -> Optional[timedelta]:
    m = _HOURS_MINUTES.match(value)
    if m and (m.group("h") or m.group("m")):
        return timedelta(hours=int(m.group("h") or 0), minutes=int(m.group("m") or 0))

    m = _CLOCK.match(value)
    if m:
        return timedelta(hours=int(m.group("h")), minutes=int(m.group("m")))

    if _DECIMAL_HOURS.match(value):
        return timedelta(hours=float(value))

    return None
