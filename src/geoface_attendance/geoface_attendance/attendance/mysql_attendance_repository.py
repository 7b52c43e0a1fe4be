from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import CivilClock
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..geo.model import Coordinates
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, company_code, work_date, check_in_time, check_out_time,
    check_in_lat, check_in_lon, check_out_lat, check_out_lon, is_tracking, hours_worked, status
"""


def _location(lat, lon) -> Optional[Coordinates]:
    if lat is None or lon is None:
        return None
    return Coordinates(latitude=float(lat), longitude=float(lon))


def _lat_lon(location: Optional[Coordinates]) -> tuple:
    if location is None:
        return None, None
    return location.latitude, location.longitude


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, clock: Optional[CivilClock] = None):
        self._conn_factory = conn_factory
        self._clock = clock or CivilClock()

    def _to_record(self, r: dict) -> AttendanceRecord:
        check_in = r.get("check_in_time")
        check_out = r.get("check_out_time")
        return AttendanceRecord(
            record_id=int(r["attendance_id"]),
            user_id=str(r["user_id"]),
            company_code=r["company_code"],
            work_date=r["work_date"],
            check_in_time=self._clock.to_civil(check_in) if check_in else None,
            check_out_time=self._clock.to_civil(check_out) if check_out else None,
            check_in_location=_location(r.get("check_in_lat"), r.get("check_in_lon")),
            check_out_location=_location(r.get("check_out_lat"), r.get("check_out_lon")),
            is_tracking=bool(r.get("is_tracking")),
            hours_worked=r.get("hours_worked"),
            status=AttendanceStatus(r["status"]),
        )

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (user_id, work_date),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def get_active_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE user_id=%s AND is_tracking=1
                ORDER BY work_date DESC
                LIMIT 1
                """,
                (user_id,),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def list_for_company_and_date(self, company_code: str, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE company_code=%s AND work_date=%s
                ORDER BY check_in_time ASC
                """,
                (company_code, work_date),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def create_checkin(self, record: AttendanceRecord) -> AttendanceRecord:
        lat, lon = _lat_lon(record.check_in_location)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # The unique key on (user_id, work_date) settles concurrent check-ins.
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, company_code, work_date, check_in_time,
                        check_in_lat, check_in_lon, is_tracking, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.user_id,
                        record.company_code,
                        record.work_date,
                        self._clock.to_storage(record.check_in_time),
                        lat,
                        lon,
                        1 if record.is_tracking else 0,
                        record.status.value,
                    ),
                )
                record_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateRecordError(f"attendance for {record.user_id} on {record.work_date} exists") from exc
            raise
        return replace(record, record_id=record_id)

    def claim_checkin(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        lat, lon = _lat_lon(record.check_in_location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_lat=%s, check_in_lon=%s, is_tracking=1, status=%s
                WHERE user_id=%s AND work_date=%s AND check_in_time IS NULL
                """,
                (
                    self._clock.to_storage(record.check_in_time),
                    lat,
                    lon,
                    record.status.value,
                    record.user_id,
                    record.work_date,
                ),
            )
            if cur.rowcount == 0:
                return None
        return record

    def update_checkout(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        lat, lon = _lat_lon(record.check_out_location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_lat=%s, check_out_lon=%s,
                    is_tracking=0, hours_worked=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (
                    self._clock.to_storage(record.check_out_time),
                    lat,
                    lon,
                    record.hours_worked,
                    record.status.value,
                    record.record_id,
                ),
            )
            if cur.rowcount == 0:
                return None
        return record
