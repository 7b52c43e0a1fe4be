from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.geoface_attendance.geoface_attendance.attendance.model import AttendanceRecord
from src.geoface_attendance.geoface_attendance.common.datetime_utils import CivilClock
from src.geoface_attendance.geoface_attendance.container import AttendanceSettings, build_services
from src.geoface_attendance.geoface_attendance.core.constants import EARTH_RADIUS_METERS
from src.geoface_attendance.geoface_attendance.core.enums import Role
from src.geoface_attendance.geoface_attendance.core.exceptions import DuplicateRecordError
from src.geoface_attendance.geoface_attendance.geo.model import Coordinates, Geofence
from src.geoface_attendance.geoface_attendance.users.model import User

OFFICE = Coordinates(latitude=12.9716, longitude=77.5946)
REFERENCE_DESCRIPTOR = tuple(round(0.01 * (i % 17), 2) for i in range(128))


def descriptor_at_distance(distance: float, base=REFERENCE_DESCRIPTOR) -> tuple:
    """Same vector with the first component shifted, so the Euclidean distance is ``distance``."""
    return (base[0] + distance,) + tuple(base[1:])


def north_of(point: Coordinates, meters: float) -> Coordinates:
    """Point due north of ``point``; its great-circle distance is exactly ``meters``."""
    return Coordinates(
        latitude=point.latitude + math.degrees(meters / EARTH_RADIUS_METERS),
        longitude=point.longitude,
    )


@dataclass
class InMemoryUsers:
    users_by_id: dict[str, User] = field(default_factory=dict)

    def add(self, user: User) -> User:
        self.users_by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users_by_id.get(user_id)


@dataclass
class InMemoryGeofences:
    fences: dict[str, Geofence] = field(default_factory=dict)

    def get_for_company(self, company_code: str) -> Optional[Geofence]:
        return self.fences.get(company_code)


class InMemoryAttendance:
    """Honors the same atomicity the MySQL repository gets from its unique key and CAS update."""

    def __init__(self):
        self._by_user_date: dict[tuple[str, date], AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def get_active_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        items = [r for r in self._by_user_date.values() if r.user_id == user_id and r.is_tracking]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[0] if items else None

    def list_for_company_and_date(self, company_code: str, work_date: date):
        items = [r for r in self._by_user_date.values() if r.company_code == company_code and r.work_date == work_date]
        items.sort(key=lambda r: (r.check_in_time is None, r.check_in_time or datetime.min))
        return items

    def get_recent_for_user(self, user_id: str, limit: int):
        items = [r for r in self._by_user_date.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def create_checkin(self, record: AttendanceRecord) -> AttendanceRecord:
        key = (record.user_id, record.work_date)
        with self._lock:
            if key in self._by_user_date:
                raise DuplicateRecordError(f"attendance for {key} exists")
            self._id += 1
            saved = replace(record, record_id=self._id)
            self._by_user_date[key] = saved
            return saved

    def claim_checkin(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        key = (record.user_id, record.work_date)
        with self._lock:
            current = self._by_user_date.get(key)
            if current is None or current.check_in_time is not None:
                return None
            saved = replace(record, record_id=current.record_id)
            self._by_user_date[key] = saved
            return saved

    def update_checkout(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        key = (record.user_id, record.work_date)
        with self._lock:
            current = self._by_user_date.get(key)
            if current is None or current.record_id != record.record_id or current.check_out_time is not None:
                return None
            self._by_user_date[key] = record
            return record

    def put(self, record: AttendanceRecord) -> AttendanceRecord:
        """Store a row as-is, the way another flow (e.g. marking absences) would."""
        with self._lock:
            self._id += 1
            saved = replace(record, record_id=self._id)
            self._by_user_date[(record.user_id, record.work_date)] = saved
            return saved

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_user_date.values())


@pytest.fixture
def fixed_now() -> datetime:
    # Naive values are civil wall-clock time.
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def clock() -> CivilClock:
    return CivilClock()


@pytest.fixture
def employee() -> User:
    return User(
        user_id="u-1",
        role=Role.USER,
        company_code="ACME",
        reference_face_descriptor=REFERENCE_DESCRIPTOR,
        full_name="Asha Rao",
    )


@pytest.fixture
def users_repo(employee) -> InMemoryUsers:
    repo = InMemoryUsers()
    repo.add(employee)
    repo.add(User(user_id="admin-1", role=Role.ADMIN, company_code="ACME", reference_face_descriptor=REFERENCE_DESCRIPTOR))
    repo.add(User(user_id="drifter", role=Role.USER, company_code=None, reference_face_descriptor=REFERENCE_DESCRIPTOR))
    repo.add(User(user_id="no-face", role=Role.USER, company_code="ACME", reference_face_descriptor=None))
    return repo


@pytest.fixture
def geofences_repo() -> InMemoryGeofences:
    return InMemoryGeofences(
        {"ACME": Geofence(company_code="ACME", latitude=OFFICE.latitude, longitude=OFFICE.longitude, radius_meters=100)}
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def make_container(users_repo, geofences_repo, attendance_repo, clock):
    def _make(**settings):
        return build_services(
            users_repo=users_repo,
            geofences_repo=geofences_repo,
            attendance_repo=attendance_repo,
            settings=AttendanceSettings(**settings),
            clock=clock,
        )

    return _make


@pytest.fixture
def service(make_container):
    return make_container().check_in_out_service


@pytest.fixture
def office() -> Coordinates:
    return OFFICE


@pytest.fixture
def reference_descriptor() -> tuple:
    return REFERENCE_DESCRIPTOR


@pytest.fixture
def descriptor_at():
    return descriptor_at_distance


@pytest.fixture
def point_north():
    return north_of
