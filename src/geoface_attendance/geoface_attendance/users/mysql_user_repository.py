from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..face.matcher import DescriptorFormatError, parse_descriptor
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, role, company_code, face_descriptor
                FROM users
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return User(
                user_id=str(row["user_id"]),
                full_name=row.get("full_name"),
                role=Role(row["role"]),
                company_code=row.get("company_code") or None,
                reference_face_descriptor=self._load_descriptor(row),
            )

    @staticmethod
    def _load_descriptor(row: dict):
        raw = row.get("face_descriptor")
        if raw is None or raw == "":
            return None
        try:
            return parse_descriptor(raw)
        except DescriptorFormatError as exc:
            # Treated as "not registered"; face verification then fails closed.
            logger.warning("Stored face descriptor of user %s is unusable: %s", row.get("user_id"), exc)
            return None
