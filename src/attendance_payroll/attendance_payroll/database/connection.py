from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import mysql.connector

from ..core.exceptions import DomainError, TransactionError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Outside a transaction every repository call gets a short-lived connection.
    Inside ``transaction()`` the calling thread is pinned to one connection and
    every repository call joins it, so a multi-step mutation commits or rolls
    back as a whole.
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
        )

    def active_connection(self):
        """Connection pinned by an enclosing ``transaction()``, if any."""
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self.active_connection() is not None:
            # Nested use joins the outer transaction.
            yield
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            conn.start_transaction()
            yield
            conn.commit()
        except DomainError:
            conn.rollback()
            raise
        except mysql.connector.Error as e:
            conn.rollback()
            logger.error("Transaction rolled back: %s", e)
            raise TransactionError(f"Transaction rolled back: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()
