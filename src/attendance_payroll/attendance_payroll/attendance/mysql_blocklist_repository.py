from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import BlockedIdentifier
from .repository import BlocklistRepository


class MySQLBlocklistRepository(BlocklistRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def blocked_ids(self) -> frozenset[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT biometric_id FROM blocked_identifiers")
            return frozenset(str(r["biometric_id"]).strip() for r in fetchall(cur))

    def add(self, *, biometric_id: str, reason: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO blocked_identifiers(biometric_id, reason) VALUES(%s,%s)",
                (str(biometric_id).strip(), reason),
            )
            return cur.rowcount > 0

    def remove(self, biometric_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM blocked_identifiers WHERE biometric_id=%s", (str(biometric_id).strip(),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[BlockedIdentifier]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT biometric_id, reason, created_at FROM blocked_identifiers ORDER BY created_at DESC")
            return [
                BlockedIdentifier(biometric_id=r["biometric_id"], reason=r.get("reason"), created_at=r.get("created_at"))
                for r in fetchall(cur)
            ]
