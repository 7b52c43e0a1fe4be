from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..duration import format_duration
from .base import DurationDecision, DurationStrategy


@dataclass(frozen=True)
class ClientHintStrategy(DurationStrategy):
    """Worked time reported by the client timer (already validated)."""

    hint: timedelta

    def decide(self, *, check_in_time: datetime, now: datetime) -> DurationDecision:
        return DurationDecision(worked=self.hint, hours_worked=format_duration(self.hint), source="client")
