from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import UnmatchedPunch
from .repository import UnmatchedPunchRepository


class MySQLUnmatchedPunchRepository(UnmatchedPunchRepository):
    """Buckets live in ``unmatched_punches``; their time sets in ``unmatched_punch_times``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, unmatched_id: int, *, for_update: bool = False) -> Optional[UnmatchedPunch]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT unmatched_id, biometric_id, work_date FROM unmatched_punches WHERE unmatched_id=%s{lock}",
                (int(unmatched_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            cur.execute(
                "SELECT punch_time FROM unmatched_punch_times WHERE unmatched_id=%s",
                (int(unmatched_id),),
            )
            punches = frozenset(normalize_mysql_time(p["punch_time"]) for p in fetchall(cur))
            return UnmatchedPunch(
                unmatched_id=int(r["unmatched_id"]),
                biometric_id=r["biometric_id"],
                work_date=r["work_date"],
                punches=punches,
            )

    def add_punches(self, *, biometric_id: str, work_date: date, punches: Iterable[time]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(expr) makes lastrowid point at the existing bucket on duplicates.
            cur.execute(
                """
                INSERT INTO unmatched_punches(biometric_id, work_date)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE unmatched_id=LAST_INSERT_ID(unmatched_id)
                """,
                (biometric_id, work_date),
            )
            unmatched_id = int(cur.lastrowid)
            cur.executemany(
                "INSERT IGNORE INTO unmatched_punch_times(unmatched_id, punch_time) VALUES(%s,%s)",
                [(unmatched_id, t) for t in sorted(set(punches))],
            )
            return unmatched_id

    def delete(self, unmatched_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM unmatched_punches WHERE unmatched_id=%s", (int(unmatched_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[UnmatchedPunch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.unmatched_id, u.biometric_id, u.work_date, t.punch_time
                FROM unmatched_punches u
                LEFT JOIN unmatched_punch_times t ON t.unmatched_id = u.unmatched_id
                ORDER BY u.work_date DESC, u.biometric_id ASC
                """
            )
            buckets: dict[int, dict] = {}
            for r in fetchall(cur):
                b = buckets.setdefault(
                    int(r["unmatched_id"]),
                    {"biometric_id": r["biometric_id"], "work_date": r["work_date"], "punches": set()},
                )
                if r.get("punch_time") is not None:
                    b["punches"].add(normalize_mysql_time(r["punch_time"]))
            return [
                UnmatchedPunch(
                    unmatched_id=uid,
                    biometric_id=b["biometric_id"],
                    work_date=b["work_date"],
                    punches=frozenset(b["punches"]),
                )
                for uid, b in buckets.items()
            ]
