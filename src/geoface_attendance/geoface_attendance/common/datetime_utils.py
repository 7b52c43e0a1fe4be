from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..core.constants import CIVIL_DATETIME_FORMAT, DEFAULT_CIVIL_UTC_OFFSET_MINUTES


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


@dataclass(frozen=True)
class CivilClock:
    """Clock pinned to a fixed UTC offset instead of an IANA time zone.

    All attendance timestamps and the tenant-local "today" are derived from it,
    never from the server's local time.
    """

    offset_minutes: int = DEFAULT_CIVIL_UTC_OFFSET_MINUTES

    @property
    def tz(self) -> timezone:
        return timezone(timedelta(minutes=self.offset_minutes))

    def now(self) -> datetime:
        """Current civil time, truncated to whole seconds like the DATETIME columns.

        Note: Wrapped so tests can patch/mocked easier.
        """
        return self.truncate(datetime.now(timezone.utc).astimezone(self.tz))

    @staticmethod
    def truncate(value: datetime) -> datetime:
        return value.replace(microsecond=0)

    def to_civil(self, value: datetime) -> datetime:
        # Naive values are taken as already civil (that is how they are stored).
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tz)
        return value.astimezone(self.tz)

    def today(self, now: Optional[datetime] = None) -> date:
        return self.to_civil(now or self.now()).date()

    def to_storage(self, value: datetime) -> datetime:
        """Civil wall-clock value without tzinfo, for DATETIME columns."""
        return self.to_civil(value).replace(tzinfo=None, microsecond=0)

    def format(self, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        return self.to_civil(value).strftime(CIVIL_DATETIME_FORMAT)
