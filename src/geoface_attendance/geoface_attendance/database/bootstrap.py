from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

import mysql.connector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "geoface_attendance")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    params = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        params["database"] = target.database
    return mysql.connector.connect(**params)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured database name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside quotes; ``--`` line comments are dropped."""
    buf: list[str] = []
    quote = ""
    escape = False
    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]

    for ch in "\n".join(lines):
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied schema %s", schema_path)


def ensure_demo_tenant(
    db_config: dict,
    *,
    company_code: str = "DEMO01",
    center: Sequence[float] = (12.9716, 77.5946),
    radius_meters: int = 100,
) -> None:
    """Idempotently seed one company with a geofence, an admin and an employee.

    The employee gets a zero descriptor so the flow can be exercised without a
    camera (submit 128 zeros).
    """

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO users (user_id, full_name, role, company_code, face_descriptor)
            VALUES (%s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), role=VALUES(role),
                                    company_code=VALUES(company_code), face_descriptor=VALUES(face_descriptor)
            """,
            ("demo-admin", "Demo Admin", "admin", company_code, None),
        )
        cur.execute(
            """
            INSERT INTO users (user_id, full_name, role, company_code, face_descriptor)
            VALUES (%s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), role=VALUES(role),
                                    company_code=VALUES(company_code), face_descriptor=VALUES(face_descriptor)
            """,
            ("demo-user", "Demo Employee", "user", company_code, json.dumps([0.0] * 128)),
        )
        cur.execute("SELECT geofence_id FROM geofences WHERE company_code=%s", (company_code,))
        if not cur.fetchall():
            cur.execute(
                """
                INSERT INTO geofences (admin_id, company_code, latitude, longitude, radius_meters)
                VALUES (%s, %s, %s, %s, %s)
                """,
                ("demo-admin", company_code, center[0], center[1], int(radius_meters)),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
