from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AdvanceStatus, LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Bonus, Deduction, LeaveRequest, SalaryAdvance
from .repository import AdvanceRepository, BonusRepository, DeductionRepository, LeaveRepository


def _to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=RequestStatus(r["status"]),
        deduct_from_salary=bool(r.get("deduct_from_salary")),
        reason=r.get("reason"),
        status_reason=r.get("status_reason"),
    )


def _to_advance(r: Dict[str, Any]) -> SalaryAdvance:
    return SalaryAdvance(
        advance_id=int(r["advance_id"]),
        employee_id=int(r["employee_id"]),
        amount=float(r["amount"]),
        currency=r["currency"],
        advance_date=r["advance_date"],
        status=AdvanceStatus(r["status"]),
        reason=r.get("reason"),
        status_reason=r.get("status_reason"),
    )


class MySQLLeaveRepository(LeaveRepository):
    _COLUMNS = "request_id, employee_id, leave_type, start_date, end_date, status, deduct_from_salary, reason, status_reason"

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        deduct_from_salary: bool = False,
        reason: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, reason, status, deduct_from_salary)
                VALUES(%s,%s,%s,%s,%s,'Pending',%s)
                """,
                (int(employee_id), leave_type.value, start_date, end_date, reason, int(bool(deduct_from_salary))),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def decide(self, *, request_id: int, status: RequestStatus, status_reason: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, status_reason=%s
                WHERE request_id=%s AND status='Pending'
                """,
                (status.value, status_reason, int(request_id)),
            )
            return cur.rowcount > 0

    def list_approved_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s AND status='Approved' AND start_date <= %s AND end_date >= %s
                ORDER BY start_date ASC
                """,
                (int(employee_id), end_date, start_date),
            )
            return [_to_leave(r) for r in fetchall(cur)]


class MySQLAdvanceRepository(AdvanceRepository):
    _COLUMNS = "advance_id, employee_id, amount, currency, advance_date, status, reason, status_reason"

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        amount: float,
        currency: str,
        advance_date: date,
        reason: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_advances(employee_id, amount, currency, advance_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,'Pending')
                """,
                (int(employee_id), float(amount), currency, advance_date, reason),
            )
            return int(cur.lastrowid)

    def get(self, advance_id: int) -> Optional[SalaryAdvance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._COLUMNS} FROM salary_advances WHERE advance_id=%s", (int(advance_id),))
            r = fetchone(cur)
            return _to_advance(r) if r else None

    def set_status(self, *, advance_id: int, status: AdvanceStatus, status_reason: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_advances SET status=%s, status_reason=COALESCE(%s, status_reason) WHERE advance_id=%s",
                (status.value, status_reason, int(advance_id)),
            )
            return cur.rowcount > 0

    def list_by_status(self, *, employee_id: int, status: AdvanceStatus) -> Sequence[SalaryAdvance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._COLUMNS}
                FROM salary_advances
                WHERE employee_id=%s AND status=%s
                ORDER BY advance_date ASC, advance_id ASC
                """,
                (int(employee_id), status.value),
            )
            return [_to_advance(r) for r in fetchall(cur)]


class _MySQLLedgerRepository:
    """Shared SQL for the bonus and deduction ledgers (identical shape)."""

    _TABLE = ""
    _ID_COLUMN = ""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, employee_id: int, amount: float, currency: str, entry_date: date, reason: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {self._TABLE}(employee_id, amount, currency, entry_date, reason)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), float(amount), currency, entry_date, reason),
            )
            return int(cur.lastrowid)

    def _rows_in_range(self, *, employee_id: int, start_date: date, end_date: date) -> list[Dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._ID_COLUMN} AS entry_id, employee_id, amount, currency, entry_date, reason
                FROM {self._TABLE}
                WHERE employee_id=%s AND entry_date BETWEEN %s AND %s
                ORDER BY entry_date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return fetchall(cur)


class MySQLBonusRepository(_MySQLLedgerRepository, BonusRepository):
    _TABLE = "bonuses"
    _ID_COLUMN = "bonus_id"

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Bonus]:
        return [
            Bonus(
                bonus_id=int(r["entry_id"]),
                employee_id=int(r["employee_id"]),
                amount=float(r["amount"]),
                currency=r["currency"],
                entry_date=r["entry_date"],
                reason=r.get("reason"),
            )
            for r in self._rows_in_range(employee_id=employee_id, start_date=start_date, end_date=end_date)
        ]


class MySQLDeductionRepository(_MySQLLedgerRepository, DeductionRepository):
    _TABLE = "deductions"
    _ID_COLUMN = "deduction_id"

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Deduction]:
        return [
            Deduction(
                deduction_id=int(r["entry_id"]),
                employee_id=int(r["employee_id"]),
                amount=float(r["amount"]),
                currency=r["currency"],
                entry_date=r["entry_date"],
                reason=r.get("reason"),
            )
            for r in self._rows_in_range(employee_id=employee_id, start_date=start_date, end_date=end_date)
        ]
