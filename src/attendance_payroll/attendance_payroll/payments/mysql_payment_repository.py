from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PaymentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PaymentRecord
from .repository import PaymentRepository

_COLUMNS = """
    payment_id, employee_id, year, month, week_number, payment_type,
    gross_amount, advances_deducted, net_amount, payment_date
"""


def _to_payment(r: Dict[str, Any]) -> PaymentRecord:
    return PaymentRecord(
        payment_id=int(r["payment_id"]),
        employee_id=int(r["employee_id"]),
        year=int(r["year"]),
        month=int(r["month"]),
        week_number=int(r["week_number"]) if r.get("week_number") is not None else None,
        payment_type=PaymentType(r["payment_type"]),
        gross_amount=float(r["gross_amount"]),
        advances_deducted=float(r["advances_deducted"]),
        net_amount=float(r["net_amount"]),
        payment_date=r["payment_date"],
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        year: int,
        month: int,
        week_number: Optional[int],
        payment_type: PaymentType,
        gross_amount: float,
        advances_deducted: float,
        net_amount: float,
        payment_date: date,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payments(
                    employee_id, year, month, week_number, payment_type,
                    gross_amount, advances_deducted, net_amount, payment_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(year),
                    int(month),
                    week_number,
                    payment_type.value,
                    float(gross_amount),
                    float(advances_deducted),
                    float(net_amount),
                    payment_date,
                ),
            )
            return int(cur.lastrowid)

    def get(self, payment_id: int) -> Optional[PaymentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payments WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _to_payment(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[PaymentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payments WHERE employee_id=%s ORDER BY payment_date DESC, payment_id DESC",
                (int(employee_id),),
            )
            return [_to_payment(r) for r in fetchall(cur)]
