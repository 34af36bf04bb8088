from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import WorkScheduleEntry
from .repository import ScheduleHistoryRepository


class MySQLScheduleHistoryRepository(ScheduleHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, *, employee_id: int, hours: float, effective_start_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_schedule_history(employee_id, hours, effective_start_date)
                VALUES(%s,%s,%s)
                """,
                (int(employee_id), float(hours), effective_start_date),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, employee_id: int) -> Sequence[WorkScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, employee_id, hours, effective_start_date
                FROM work_schedule_history
                WHERE employee_id=%s
                ORDER BY effective_start_date ASC, entry_id ASC
                """,
                (int(employee_id),),
            )
            return [
                WorkScheduleEntry(
                    entry_id=int(r["entry_id"]),
                    employee_id=int(r["employee_id"]),
                    hours=float(r["hours"]),
                    effective_start_date=r["effective_start_date"],
                )
                for r in fetchall(cur)
            ]
