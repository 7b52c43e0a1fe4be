from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import CivilClock
from .model import AttendanceRecord


def record_to_dict(record: AttendanceRecord, clock: CivilClock, *, live_hours_worked: Optional[str] = None) -> dict:
    """JSON shape used by the API and the change notification (camelCase, civil time strings)."""

    out = {
        "id": record.record_id,
        "userId": record.user_id,
        "companyCode": record.company_code,
        "date": record.work_date.isoformat(),
        "checkInTime": clock.format(record.check_in_time),
        "checkOutTime": clock.format(record.check_out_time),
        "checkInLocation": record.check_in_location.to_dict() if record.check_in_location else None,
        "checkOutLocation": record.check_out_location.to_dict() if record.check_out_location else None,
        "isTracking": record.is_tracking,
        "hoursWorked": record.hours_worked,
        "status": record.status.value,
    }
    if live_hours_worked is not None:
        out["liveHoursWorked"] = live_hours_worked
    return out
