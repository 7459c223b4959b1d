from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag

from ..core.exceptions import UnavailableError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: Outside a transaction every repository call uses its own short-lived
    connection. Inside ``transaction()`` the connection is bound to the current
    thread and shared by all repository calls until the block ends.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                connection_timeout=int(self._config.connect_timeout),
                # rowcount = matched rows, so idempotent UPDATEs still report success.
                client_flags=[ClientFlag.FOUND_ROWS],
                autocommit=False,
            )
        except mysql.connector.Error as e:
            logger.error("database connection failed: %s", e)
            raise UnavailableError("Database unavailable") from e

    @property
    def active(self):
        """Connection of the transaction running on this thread, if any."""
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self.active is not None:
            # Nested blocks join the outer transaction.
            yield
            return

        conn = self.connect()
        try:
            conn.start_transaction(isolation_level="READ COMMITTED")
            self._local.conn = conn
            try:
                yield
                conn.commit()
            except BaseException:
                conn.rollback()
                raise
        except mysql.connector.errors.IntegrityError:
            raise
        except mysql.connector.Error as e:
            logger.error("transaction failed: %s", e)
            raise UnavailableError("Database unavailable") from e
        finally:
            self._local.conn = None
            conn.close()
