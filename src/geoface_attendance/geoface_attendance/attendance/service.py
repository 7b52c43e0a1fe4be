from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import CivilClock
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    FaceVerificationFailed,
    NoCompanyAssociation,
    RoleNotAllowed,
    UserNotFound,
)
from ..face.matcher import FaceMatcher
from ..geo.policy import GeofencePolicyFactory
from ..geo.repository import GeofenceRepository
from ..geo.validator import GeoValidator
from ..users.model import User
from ..users.repository import UserRepository
from .duration import format_duration
from .events import AttendanceNotifier
from .factory import DurationStrategyFactory
from .model import AttendanceRecord
from .payloads import CheckInRequest, CheckOutRequest
from .state_store import AttendanceStateStore

logger = logging.getLogger(__name__)


class CheckInOutService:
    """Verifies and records check-ins and check-outs.

    Each call is one attempt: every gate either passes or raises an
    ``AttendanceError`` before anything is written, and nothing is retried here.
    """

    def __init__(
        self,
        users: UserRepository,
        geofences: GeofenceRepository,
        store: AttendanceStateStore,
        *,
        face_matcher: FaceMatcher | None = None,
        policy_factory: GeofencePolicyFactory | None = None,
        duration_factory: DurationStrategyFactory | None = None,
        notifier: AttendanceNotifier | None = None,
        clock: CivilClock | None = None,
    ):
        self._users = users
        self._geofences = geofences
        self._store = store
        self._matcher = face_matcher or FaceMatcher()
        self._policies = policy_factory or GeofencePolicyFactory(validator=GeoValidator())
        self._durations = duration_factory or DurationStrategyFactory()
        self._clock = clock or CivilClock()
        self._notifier = notifier or AttendanceNotifier(self._clock)

    @property
    def clock(self) -> CivilClock:
        return self._clock

    def _now(self, now: datetime | None) -> datetime:
        return self._clock.truncate(self._clock.to_civil(now)) if now else self._clock.now()

    def _load_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFound("User not found", details={"userId": user_id})
        return user

    def _verify_face(self, user: User, request: CheckInRequest) -> None:
        if user.reference_face_descriptor is None or request.face_descriptor is None:
            logger.warning("Face verification for user %s failed: missing descriptor", user.user_id)
            raise FaceVerificationFailed(
                "Face verification failed: missing descriptor",
                distance=float("inf"),
                threshold=self._matcher.threshold,
            )

        result = self._matcher.matches(user.reference_face_descriptor, request.face_descriptor)
        if not result.matches:
            logger.warning("Face verification for user %s failed: distance %.3f", user.user_id, result.distance)
            raise FaceVerificationFailed(
                f"Face did not match (distance {result.distance:.3f})",
                distance=result.distance,
                threshold=result.threshold,
            )

    def check_in(self, request: CheckInRequest, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)
        today = now.date()

        user = self._load_user(request.user_id)
        if user.is_admin:
            raise RoleNotAllowed("Admins are not allowed to check in", details={"role": user.role.value})
        if not user.company_code:
            raise NoCompanyAssociation("User is not associated with any company")

        self._store.ensure_can_check_in(user.user_id, today)
        self._verify_face(user, request)

        fence = self._geofences.get_for_company(user.company_code)
        self._policies.for_company(fence).enforce(company_code=user.company_code, point=request.location)

        record = self._store.check_in(
            user_id=user.user_id,
            company_code=user.company_code,
            work_date=today,
            at=now,
            location=request.location,
        )
        self._notifier.notify(record)
        return record

    def check_out(self, request: CheckOutRequest, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)
        today = now.date()

        record = self._store.require_open_record(request.user_id, today)
        strategy = self._durations.for_checkout(hours_worked_hint=request.hours_worked_hint)
        decision = strategy.decide(check_in_time=record.check_in_time, now=now)

        updated = self._store.check_out(
            record,
            at=now,
            location=request.location,
            hours_worked=decision.hours_worked,
        )
        self._notifier.notify(updated)
        return updated

    def get_today_record(self, user_id: str, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        return self._store.get_record_for_day(user_id, self._now(now).date())

    def get_active_record(self, user_id: str) -> Optional[AttendanceRecord]:
        return self._store.get_active_record(user_id)

    def list_company_attendance(
        self,
        company_code: str,
        work_date: date | None = None,
        *,
        now: datetime | None = None,
    ) -> Sequence[AttendanceRecord]:
        return self._store.list_for_company_and_date(company_code, work_date or self._now(now).date())

    def get_history(self, user_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._store.list_recent_for_user(user_id, limit)

    def live_hours_worked(self, record: AttendanceRecord, *, now: datetime | None = None) -> Optional[str]:
        """Stored duration, or a running estimate while the user is still checked in."""
        if record.is_tracking and record.check_in_time is not None:
            return format_duration(self._now(now) - record.check_in_time)
        return record.hours_worked
