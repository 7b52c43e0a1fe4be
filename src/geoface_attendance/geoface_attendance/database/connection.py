from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5


class DatabaseConnection:
    """Singleton-like DB connection factory backed by a mysql-connector pool.

    Note: Each repository call borrows one connection for the length of a
    single transaction and hands it back on close.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def _params(self) -> dict:
        return {
            "host": self._config.host,
            "port": int(self._config.port),
            "user": self._config.user,
            "password": self._config.password,
            "database": self._config.database,
            "autocommit": False,
        }

    def connect(self):
        if self._config.pool_size <= 0:
            return mysql.connector.connect(**self._params())
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="geoface_attendance",
                    pool_size=int(self._config.pool_size),
                    **self._params(),
                )
        return self._pool.get_connection()
