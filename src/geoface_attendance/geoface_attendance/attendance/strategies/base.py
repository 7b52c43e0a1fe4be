from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class DurationDecision:
    worked: timedelta
    hours_worked: str
    source: str


class DurationStrategy(ABC):
    """Strategy Pattern: how the worked duration of a day is decided at check-out."""

    @abstractmethod
    def decide(self, *, check_in_time: datetime, now: datetime) -> DurationDecision:
        raise NotImplementedError
