from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import mysql.connector

from ..core.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
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
            database=str(db_config.get("database", "attendance_db")),
        )


class DatabaseConnection:
    """Explicitly constructed DB connection factory.

    One instance is built by the container and injected into every
    repository. Connections are short-lived (one per operation).
    ``initialize()`` checks connectivity once; repeated calls are no-ops.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        with self._init_lock:
            if self._initialized:
                return
            conn = self.connect()
            conn.close()
            self._initialized = True
            logger.info(
                "database ready: %s@%s:%s/%s",
                self._config.user, self._config.host, self._config.port, self._config.database,
            )

    def connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
        except mysql.connector.Error as e:
            logger.warning("cannot connect to %s:%s: %s", self._config.host, self._config.port, e)
            raise StorageUnavailable("Database is unavailable") from e
