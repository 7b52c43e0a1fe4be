from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    DuplicateRecordError,
    InvalidRequest,
    NoActiveCheckIn,
)
from ..geo.model import Coordinates
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceStateStore:
    """Owns the per-(user, day) state machine: NoRecord -> CheckedIn -> CheckedOut.

    Every transition is a single atomic write against the repository: the
    check-in relies on the (user, day) unique key, the check-out on a
    compare-and-set of the still-open row. Pre-reads only exist to give a
    precise error; they are not what keeps the invariants.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def get_record_for_day(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, work_date)

    def get_active_record(self, user_id: str) -> Optional[AttendanceRecord]:
        return self._attendance.get_active_for_user(user_id)

    def list_for_company_and_date(self, company_code: str, work_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_company_and_date(company_code, work_date)

    def list_recent_for_user(self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, int(limit))

    def ensure_can_check_in(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        """Return the day's row if one exists without a check-in (e.g. pre-marked absent)."""
        existing = self.get_record_for_day(user_id, work_date)
        if existing and existing.check_in_time is not None:
            raise AlreadyCheckedIn("Already checked in today", details={"date": work_date.isoformat()})
        return existing

    def check_in(
        self,
        *,
        user_id: str,
        company_code: str,
        work_date: date,
        at: datetime,
        location: Optional[Coordinates],
    ) -> AttendanceRecord:
        existing = self.ensure_can_check_in(user_id, work_date)

        if existing is not None:
            saved = self._attendance.claim_checkin(existing.with_check_in(at=at, location=location))
            if saved is None:
                raise AlreadyCheckedIn("Already checked in today", details={"date": work_date.isoformat()})
        else:
            record = AttendanceRecord.checked_in(
                user_id=user_id,
                company_code=company_code,
                work_date=work_date,
                at=at,
                location=location,
            )
            try:
                saved = self._attendance.create_checkin(record)
            except DuplicateRecordError:
                # Lost a race with a concurrent check-in for the same day.
                raise AlreadyCheckedIn("Already checked in today", details={"date": work_date.isoformat()}) from None

        logger.info("User %s checked in for %s at %s", user_id, work_date, at.isoformat())
        return saved

    def require_open_record(self, user_id: str, work_date: date) -> AttendanceRecord:
        record = self.get_record_for_day(user_id, work_date)
        if record is None or record.check_in_time is None:
            raise NoActiveCheckIn("No active check-in found for today", details={"date": work_date.isoformat()})
        if record.check_out_time is not None:
            raise AlreadyCheckedOut("Already checked out today", details={"date": work_date.isoformat()})
        return record

    def check_out(
        self,
        record: AttendanceRecord,
        *,
        at: datetime,
        location: Optional[Coordinates],
        hours_worked: str,
    ) -> AttendanceRecord:
        """Close ``record``, which must come from :meth:`require_open_record`."""

        user_id, work_date = record.user_id, record.work_date
        if record.check_in_time is None:
            raise NoActiveCheckIn("No active check-in found for today", details={"date": work_date.isoformat()})
        if record.check_out_time is not None:
            raise AlreadyCheckedOut("Already checked out today", details={"date": work_date.isoformat()})
        if at <= record.check_in_time:
            raise InvalidRequest("Check-out time must be later than check-in time")

        updated = self._attendance.update_checkout(record.checked_out(at=at, location=location, hours_worked=hours_worked))
        if updated is None:
            raise AlreadyCheckedOut("Already checked out today", details={"date": work_date.isoformat()})

        logger.info("User %s checked out for %s after %s", user_id, work_date, hours_worked)
        return updated
