from __future__ import annotations

import logging
from typing import Optional

from blinker import Namespace

from ..common.datetime_utils import CivilClock
from .model import AttendanceRecord
from .serializers import record_to_dict

logger = logging.getLogger(__name__)

attendance_signals = Namespace()

#: Sent after a check-in or check-out is committed. Receivers get the event
#: dict as the ``event`` keyword; they are UI-refresh collaborators only.
attendance_updated = attendance_signals.signal("attendance-updated")


class AttendanceNotifier:
    """Best-effort, fire-and-forget change notification.

    A failing receiver is logged and dropped; it never fails the check-in or
    check-out that triggered it.
    """

    def __init__(self, clock: Optional[CivilClock] = None, signal=attendance_updated):
        self._clock = clock or CivilClock()
        self._signal = signal

    def build_event(self, record: AttendanceRecord) -> dict:
        return {
            "type": "attendanceUpdated",
            "userId": record.user_id,
            "companyCode": record.company_code,
            "date": record.work_date.isoformat(),
            "record": record_to_dict(record, self._clock),
        }

    def notify(self, record: AttendanceRecord) -> None:
        event = self.build_event(record)
        for receiver in list(self._signal.receivers_for(self)):
            try:
                receiver(self, event=event)
            except Exception:
                logger.warning(
                    "attendanceUpdated receiver %r failed for user %s; event dropped",
                    receiver,
                    record.user_id,
                    exc_info=True,
                )
