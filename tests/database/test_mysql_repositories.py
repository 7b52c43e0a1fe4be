from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.geoface_attendance.geoface_attendance.attendance.model import AttendanceRecord
from src.geoface_attendance.geoface_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.geoface_attendance.geoface_attendance.core.enums import AttendanceStatus, Role
from src.geoface_attendance.geoface_attendance.core.exceptions import DuplicateRecordError, StorageUnavailable
from src.geoface_attendance.geoface_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements
from src.geoface_attendance.geoface_attendance.database.mysql_base import db_cursor
from src.geoface_attendance.geoface_attendance.geo.mysql_geofence_repository import MySQLGeofenceRepository
from src.geoface_attendance.geoface_attendance.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, rows=None, *, rowcount=1, lastrowid=1, error=None):
        self.rows = list(rows or [])
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.error = error
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, cursor: FakeCursor | None = None, *, connect_error=None):
        self.cursor = cursor or FakeCursor()
        self.connection = FakeConnection(self.cursor)
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        return self.connection


def _open_record(**overrides) -> AttendanceRecord:
    values = dict(
        user_id="u-1",
        company_code="ACME",
        work_date=date(2026, 2, 2),
        at=datetime(2026, 2, 2, 9, 0),
        location=None,
    )
    values.update(overrides)
    return AttendanceRecord.checked_in(**values)


def test_db_cursor_commits_and_closes():
    factory = FakeConnFactory()
    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    assert factory.connection.commits == 1
    assert factory.connection.rollbacks == 0
    assert factory.connection.closed is True
    assert factory.cursor.closed is True


def test_connect_failure_is_storage_unavailable():
    factory = FakeConnFactory(connect_error=mysql.connector.errors.InterfaceError("no route to host"))
    with pytest.raises(StorageUnavailable):
        with db_cursor(factory):
            pass


def test_driver_error_rolls_back_and_is_storage_unavailable():
    factory = FakeConnFactory(FakeCursor(error=mysql.connector.errors.OperationalError("gone away")))
    with pytest.raises(StorageUnavailable):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")

    assert factory.connection.rollbacks == 1
    assert factory.connection.commits == 0
    assert factory.connection.closed is True


def test_integrity_error_is_left_to_the_repository():
    factory = FakeConnFactory(FakeCursor(error=mysql.connector.IntegrityError("dup", errno=errorcode.ER_DUP_ENTRY)))
    with pytest.raises(mysql.connector.IntegrityError):
        with db_cursor(factory) as (_, cur):
            cur.execute("INSERT")

    assert factory.connection.rollbacks == 1


def test_create_checkin_stores_naive_civil_time_and_returns_id():
    factory = FakeConnFactory(FakeCursor(lastrowid=42))
    saved = MySQLAttendanceRepository(factory).create_checkin(_open_record())

    assert saved.record_id == 42
    _, params = factory.cursor.executed[0]
    assert params[3] == datetime(2026, 2, 2, 9, 0)
    assert params[3].tzinfo is None
    assert params[-1] == "present"


def test_duplicate_key_becomes_duplicate_record_error():
    error = mysql.connector.IntegrityError("Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    factory = FakeConnFactory(FakeCursor(error=error))

    with pytest.raises(DuplicateRecordError):
        MySQLAttendanceRepository(factory).create_checkin(_open_record())


def test_checkout_compare_and_set_miss_returns_none():
    factory = FakeConnFactory(FakeCursor(rowcount=0))
    closed = _open_record().checked_out(at=datetime(2026, 2, 2, 17, 0), location=None, hours_worked="8h 0m")

    assert MySQLAttendanceRepository(factory).update_checkout(closed) is None
    sql, _ = factory.cursor.executed[0]
    assert "check_out_time IS NULL" in sql


def test_rows_are_read_back_as_civil_records(clock):
    row = {
        "attendance_id": 7,
        "user_id": "u-1",
        "company_code": "ACME",
        "work_date": date(2026, 2, 2),
        "check_in_time": datetime(2026, 2, 2, 9, 0),
        "check_out_time": None,
        "check_in_lat": 12.97,
        "check_in_lon": 77.59,
        "check_out_lat": None,
        "check_out_lon": None,
        "is_tracking": 1,
        "hours_worked": None,
        "status": "present",
    }
    factory = FakeConnFactory(FakeCursor([row]))

    record = MySQLAttendanceRepository(factory, clock).get_for_user_and_date("u-1", date(2026, 2, 2))

    assert record.record_id == 7
    assert record.check_in_time == datetime(2026, 2, 2, 9, 0, tzinfo=clock.tz)
    assert record.check_in_location.latitude == 12.97
    assert record.is_tracking is True
    assert record.status == AttendanceStatus.PRESENT


def test_user_row_with_descriptor():
    row = {
        "user_id": "u-1",
        "full_name": "Asha",
        "role": "user",
        "company_code": "ACME",
        "face_descriptor": json.dumps([0.1, 0.2]),
    }
    user = MySQLUserRepository(FakeConnFactory(FakeCursor([row]))).get_by_id("u-1")

    assert user.role == Role.USER
    assert user.reference_face_descriptor == (0.1, 0.2)


def test_unusable_stored_descriptor_is_treated_as_missing():
    row = {"user_id": "u-1", "full_name": None, "role": "user", "company_code": "", "face_descriptor": "{oops"}
    user = MySQLUserRepository(FakeConnFactory(FakeCursor([row]))).get_by_id("u-1")

    assert user.reference_face_descriptor is None
    assert user.company_code is None


def test_geofence_without_radius_gets_default():
    row = {"company_code": "ACME", "latitude": 12.97, "longitude": 77.59, "radius_meters": None}
    fence = MySQLGeofenceRepository(FakeConnFactory(FakeCursor([row])), default_radius_meters=150).get_for_company("ACME")

    assert fence.radius_meters == 150
    assert fence.center.latitude == 12.97


def test_geofence_radius_zero_is_kept():
    row = {"company_code": "ACME", "latitude": 12.97, "longitude": 77.59, "radius_meters": 0}
    fence = MySQLGeofenceRepository(FakeConnFactory(FakeCursor([row]))).get_for_company("ACME")

    assert fence.radius_meters == 0


def test_sql_splitter_respects_quotes_and_comments():
    sql = """
    -- leading comment
    CREATE TABLE a (x VARCHAR(8) DEFAULT 'a;b');
    INSERT INTO a VALUES ("c;d");
    SELECT 1
    """
    statements = list(iter_sql_statements(sql))
    assert len(statements) == 3
    assert statements[0].startswith("CREATE TABLE a")
    assert "'a;b'" in statements[0]
    assert statements[2] == "SELECT 1"


def test_schema_defines_the_attendance_tables():
    schema = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
    statements = list(iter_sql_statements(_strip_create_db_and_use(schema.read_text(encoding="utf-8"))))
    joined = "\n".join(statements)

    for table in ("users", "geofences", "attendance_records"):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in joined or f"CREATE TABLE {table}" in joined
    assert "uq_attendance_user_day" in joined
    assert not any(s.upper().startswith("USE ") for s in statements)


def test_claim_checkin_only_fills_a_row_without_check_in():
    absent = AttendanceRecord(
        record_id=3,
        user_id="u-1",
        company_code="ACME",
        work_date=date(2026, 2, 2),
        check_in_time=None,
        status=AttendanceStatus.ABSENT,
    )
    claimed = absent.with_check_in(at=datetime(2026, 2, 2, 9, 0), location=None)

    factory = FakeConnFactory(FakeCursor(rowcount=1))
    assert MySQLAttendanceRepository(factory).claim_checkin(claimed) == claimed
    sql, params = factory.cursor.executed[0]
    assert "check_in_time IS NULL" in sql
    assert params[3] == "present"

    lost = FakeConnFactory(FakeCursor(rowcount=0))
    assert MySQLAttendanceRepository(lost).claim_checkin(claimed) is None
