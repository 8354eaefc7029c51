from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "skyhr_attendance")),
        )


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Connections come from a small mysql-connector pool; every repository
    operation borrows one and returns it when the cursor context exits.
    """

    _instance: Optional["DatabaseConnection"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: DBConfig, *, pool_size: int = 5):
        self._config = config
        self._pool_size = pool_size
        self._pool = None
        self._pool_lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = DatabaseConnection(config)
        return cls._instance

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        # Created on first use, once per instance.
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="skyhr_attendance",
                    pool_size=self._pool_size,
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                )
            return self._pool

    def connect(self):
        return self._get_pool().get_connection()
