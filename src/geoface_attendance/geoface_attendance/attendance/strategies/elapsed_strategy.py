from __future__ import annotations

from datetime import datetime

from ..duration import format_duration
from .base import DurationDecision, DurationStrategy


class ElapsedStrategy(DurationStrategy):
    """Worked time is simply check-out minus check-in."""

    def decide(self, *, check_in_time: datetime, now: datetime) -> DurationDecision:
        worked = now - check_in_time
        return DurationDecision(worked=worked, hours_worked=format_duration(worked), source="elapsed")
