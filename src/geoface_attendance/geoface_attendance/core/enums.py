from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role; only ``USER`` accounts take attendance."""

    ADMIN = "admin"
    USER = "user"


class AttendanceStatus(str, Enum):
    """Attendance status values persisted in the database."""

    PRESENT = "present"
    COMPLETE = "complete"
    ABSENT = "absent"
    INCOMPLETE = "incomplete"
    LATE = "late"


class AttendanceState(str, Enum):
    """Position of a (user, day) in the check-in/check-out state machine."""

    NO_RECORD = "NO_RECORD"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
