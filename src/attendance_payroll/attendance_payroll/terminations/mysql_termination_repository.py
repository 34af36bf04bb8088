from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TerminationRecord
from .repository import TerminationRepository

_COLUMNS = "termination_id, employee_id, termination_date, reason, notes, settlement_snapshot, created_at"


def _to_record(r: Dict[str, Any]) -> TerminationRecord:
    snapshot = r["settlement_snapshot"]
    if isinstance(snapshot, (bytes, bytearray)):
        snapshot = snapshot.decode("utf-8")
    return TerminationRecord(
        termination_id=int(r["termination_id"]),
        employee_id=int(r["employee_id"]),
        termination_date=r["termination_date"],
        reason=r["reason"],
        notes=r.get("notes"),
        settlement=json.loads(snapshot) if isinstance(snapshot, str) else snapshot,
        created_at=r.get("created_at"),
    )


class MySQLTerminationRepository(TerminationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        termination_date: date,
        reason: str,
        notes: Optional[str],
        settlement: Dict[str, Any],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO terminations(employee_id, termination_date, reason, notes, settlement_snapshot)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), termination_date, reason, notes, json.dumps(settlement)),
            )
            return int(cur.lastrowid)

    def get(self, termination_id: int) -> Optional[TerminationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM terminations WHERE termination_id=%s", (int(termination_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_all(self) -> Sequence[TerminationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM terminations ORDER BY termination_date DESC, termination_id DESC")
            return [_to_record(r) for r in fetchall(cur)]
