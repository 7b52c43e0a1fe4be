from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_active_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_company_and_date(self, company_code: str, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert a freshly checked-in record.

        Raises ``DuplicateRecordError`` when a row for (user, day) already exists.
        """

        raise NotImplementedError

    def claim_checkin(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        """Compare-and-set: store the check-in on the day's existing row only if it has none yet.

        Returns ``None`` when another request checked in first.
        """

        raise NotImplementedError

    def update_checkout(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        """Compare-and-set: store the check-out only if the row is still open.

        Returns ``None`` when the row was already checked out (or vanished).
        """

        raise NotImplementedError
