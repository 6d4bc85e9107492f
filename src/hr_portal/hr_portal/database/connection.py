from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterator, Optional, Protocol

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class TransactionScope(Protocol):
    """Anything that can group repository writes into one unit."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Outside ``transaction()`` every repository call opens a short-lived
    connection. Inside it, calls made on the same thread share one connection
    which is committed or rolled back when the block exits.
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
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            # rowcount counts matched rows, so an UPDATE that changes nothing still finds the row.
            client_flags=[ClientFlag.FOUND_ROWS],
        )

    def current(self):
        """Connection bound by an enclosing ``transaction()``, if any."""
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self.current() is not None:
            # Nested blocks join the outer transaction.
            yield
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()
