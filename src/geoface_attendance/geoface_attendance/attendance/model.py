from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceState, AttendanceStatus
from ..geo.model import Coordinates


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one civil day.

    Construction enforces the record invariants, so an illegal combination of
    check-in/check-out/tracking fields can never exist in memory.
    """

    record_id: Optional[int]
    user_id: str
    company_code: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime] = None
    check_in_location: Optional[Coordinates] = None
    check_out_location: Optional[Coordinates] = None
    is_tracking: bool = False
    hours_worked: Optional[str] = None
    status: AttendanceStatus = AttendanceStatus.INCOMPLETE

    def __post_init__(self) -> None:
        if self.check_out_time is not None:
            if self.check_in_time is None:
                raise ValueError("check-out recorded without a check-in")
            if self.check_out_time <= self.check_in_time:
                raise ValueError("check-out must be later than check-in")
        tracking = self.check_in_time is not None and self.check_out_time is None
        if bool(self.is_tracking) != tracking:
            raise ValueError("is_tracking must be true exactly while checked in and not checked out")

    @property
    def state(self) -> AttendanceState:
        if self.check_out_time is not None:
            return AttendanceState.CHECKED_OUT
        if self.check_in_time is not None:
            return AttendanceState.CHECKED_IN
        return AttendanceState.NO_RECORD

    @classmethod
    def checked_in(
        cls,
        *,
        user_id: str,
        company_code: str,
        work_date: date,
        at: datetime,
        location: Optional[Coordinates],
    ) -> "AttendanceRecord":
        return cls(
            record_id=None,
            user_id=user_id,
            company_code=company_code,
            work_date=work_date,
            check_in_time=at,
            check_in_location=location,
            is_tracking=True,
            status=AttendanceStatus.PRESENT,
        )

    def with_check_in(self, *, at: datetime, location: Optional[Coordinates]) -> "AttendanceRecord":
        """Check-in on a row that exists for the day without one (e.g. pre-marked absent)."""
        return replace(
            self,
            check_in_time=at,
            check_in_location=location,
            is_tracking=True,
            status=AttendanceStatus.PRESENT,
        )

    def checked_out(self, *, at: datetime, location: Optional[Coordinates], hours_worked: str) -> "AttendanceRecord":
        return replace(
            self,
            check_out_time=at,
            check_out_location=location,
            is_tracking=False,
            hours_worked=hours_worked,
            status=AttendanceStatus.COMPLETE,
        )
