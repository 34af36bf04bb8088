from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, placeholders
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, work_date, check_in, check_out, source, is_synced_to_cloud, is_paid"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=normalize_mysql_time(r["check_in"]),
        check_out=normalize_mysql_time(r.get("check_out")),
        source=r.get("source"),
        is_synced_to_cloud=bool(r.get("is_synced_to_cloud")),
        is_paid=bool(r.get("is_paid")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(
        self,
        employee_id: int,
        work_date: date,
        *,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s{lock}",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: time,
        check_out: Optional[time],
        source: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, check_in, check_out, source, is_synced_to_cloud)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (int(employee_id), work_date, check_in, check_out, source),
            )
            return int(cur.lastrowid)

    def update_punches(self, *, attendance_id: int, check_in: time, check_out: Optional[time]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in=%s, check_out=%s, is_synced_to_cloud=0
                WHERE attendance_id=%s
                """,
                (check_in, check_out, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def mark_paid(self, *, employee_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET is_paid=1
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s AND is_paid=0
                """,
                (int(employee_id), start_date, end_date),
            )
            return int(cur.rowcount)

    def list_unsynced(self, *, limit: int = 500) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE is_synced_to_cloud=0
                ORDER BY work_date ASC, attendance_id ASC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def mark_synced(self, attendance_ids: Sequence[int]) -> int:
        if not attendance_ids:
            return 0
        ids = [int(i) for i in attendance_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET is_synced_to_cloud=1 WHERE attendance_id IN ({placeholders(ids)})",
                tuple(ids),
            )
            return int(cur.rowcount)
