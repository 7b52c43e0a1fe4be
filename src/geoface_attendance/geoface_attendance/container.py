from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.events import AttendanceNotifier
from .attendance.factory import DurationStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import CheckInOutService
from .attendance.state_store import AttendanceStateStore
from .common.datetime_utils import CivilClock
from .core.constants import (
    DEFAULT_CIVIL_UTC_OFFSET_MINUTES,
    DEFAULT_FACE_MATCH_THRESHOLD,
    DEFAULT_GEOFENCE_RADIUS_METERS,
)
from .database.connection import DBConfig, DatabaseConnection
from .face.matcher import FaceMatcher
from .geo.mysql_geofence_repository import MySQLGeofenceRepository
from .geo.policy import GeofencePolicyFactory
from .geo.repository import GeofenceRepository
from .geo.validator import GeoValidator
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class AttendanceSettings:
    civil_utc_offset_minutes: int = DEFAULT_CIVIL_UTC_OFFSET_MINUTES
    face_match_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD
    default_geofence_radius_meters: int = DEFAULT_GEOFENCE_RADIUS_METERS
    allow_checkin_without_geofence: bool = True

    @classmethod
    def from_module(cls, settings: Any) -> "AttendanceSettings":
        return cls(
            civil_utc_offset_minutes=int(getattr(settings, "CIVIL_UTC_OFFSET_MINUTES", DEFAULT_CIVIL_UTC_OFFSET_MINUTES)),
            face_match_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD", DEFAULT_FACE_MATCH_THRESHOLD)),
            default_geofence_radius_meters=int(
                getattr(settings, "DEFAULT_GEOFENCE_RADIUS_METERS", DEFAULT_GEOFENCE_RADIUS_METERS)
            ),
            allow_checkin_without_geofence=bool(getattr(settings, "ALLOW_CHECKIN_WITHOUT_GEOFENCE", True)),
        )


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: CivilClock

    users_repo: UserRepository
    geofences_repo: GeofenceRepository
    attendance_repo: AttendanceRepository

    state_store: AttendanceStateStore
    check_in_out_service: CheckInOutService


def build_services(
    *,
    users_repo: UserRepository,
    geofences_repo: GeofenceRepository,
    attendance_repo: AttendanceRepository,
    settings: AttendanceSettings,
    clock: CivilClock,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    state_store = AttendanceStateStore(attendance_repo)
    service = CheckInOutService(
        users_repo,
        geofences_repo,
        state_store,
        face_matcher=FaceMatcher(settings.face_match_threshold),
        policy_factory=GeofencePolicyFactory(
            validator=GeoValidator(),
            allow_without_geofence=settings.allow_checkin_without_geofence,
        ),
        duration_factory=DurationStrategyFactory(),
        notifier=AttendanceNotifier(clock),
        clock=clock,
    )
    return Container(
        conn=conn,
        clock=clock,
        users_repo=users_repo,
        geofences_repo=geofences_repo,
        attendance_repo=attendance_repo,
        state_store=state_store,
        check_in_out_service=service,
    )


def build_container(*, db_config: dict, settings: Optional[AttendanceSettings] = None) -> Container:
    settings = settings or AttendanceSettings()
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", 5)),
    )
    conn = DatabaseConnection.get_instance(config)
    clock = CivilClock(settings.civil_utc_offset_minutes)

    return build_services(
        users_repo=MySQLUserRepository(conn),
        geofences_repo=MySQLGeofenceRepository(conn, default_radius_meters=settings.default_geofence_radius_meters),
        attendance_repo=MySQLAttendanceRepository(conn, clock),
        settings=settings,
        clock=clock,
        conn=conn,
    )
