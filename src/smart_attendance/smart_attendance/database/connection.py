from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

from ..core.constants import DEFAULT_STORE_TIMEOUT_SECONDS


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    Every connection is bounded by ``timeout_seconds`` both when connecting and
    per statement, so a stalled server surfaces as an error instead of a hang.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def timeout_ms(self) -> int:
        return int(float(self._config.timeout_seconds) * 1000)

    def connect(self):
        conn = mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=max(1, int(round(float(self._config.timeout_seconds)))),
            autocommit=False,
        )
        cur = conn.cursor()
        try:
            cur.execute("SET SESSION MAX_EXECUTION_TIME=%s", (self.timeout_ms,))
        finally:
            cur.close()
        return conn
