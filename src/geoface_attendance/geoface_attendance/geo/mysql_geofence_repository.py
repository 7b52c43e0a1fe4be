from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Geofence
from .repository import GeofenceRepository


class MySQLGeofenceRepository(GeofenceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_radius_meters: int = DEFAULT_GEOFENCE_RADIUS_METERS):
        self._conn_factory = conn_factory
        self._default_radius = int(default_radius_meters)

    def get_for_company(self, company_code: str) -> Optional[Geofence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_code, latitude, longitude, radius_meters
                FROM geofences
                WHERE company_code=%s
                ORDER BY geofence_id DESC
                LIMIT 1
                """,
                (company_code,),
            )
            row = fetchone(cur)
            if not row:
                return None
            radius = row.get("radius_meters")
            return Geofence(
                company_code=row["company_code"],
                latitude=float(row["latitude"]),
                longitude=float(row["longitude"]),
                radius_meters=int(radius) if radius is not None else self._default_radius,
            )
