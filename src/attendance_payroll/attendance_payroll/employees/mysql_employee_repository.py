from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.enums import EmployeeStatus, FlatRatePeriod, PaymentType, Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Employee, FlatRateProfile
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = """
    employee_id, employee_code, name, hire_date, status, phone, biometric_id,
    payment_type, monthly_salary, weekly_salary, hourly_rate, agreed_daily_hours,
    overtime_rate, lateness_deduction_rate, calculate_by_30_days,
    check_in_start, check_in_end, check_out_start, check_out_end, salary_currency
"""


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_workdays(self, cur, employee_ids: Sequence[int]) -> Dict[int, frozenset]:
        if not employee_ids:
            return {}
        marks = ",".join(["%s"] * len(employee_ids))
        cur.execute(
            f"SELECT employee_id, weekday FROM employee_workdays WHERE employee_id IN ({marks})",
            tuple(employee_ids),
        )
        out: Dict[int, set] = {}
        for r in fetchall(cur):
            out.setdefault(int(r["employee_id"]), set()).add(Weekday(int(r["weekday"])))
        return {k: frozenset(v) for k, v in out.items()}

    @staticmethod
    def _to_employee(r: Dict[str, Any], workdays: frozenset) -> Employee:
        return Employee(
            employee_id=int(r["employee_id"]),
            employee_code=r["employee_code"],
            name=r["name"],
            hire_date=r["hire_date"],
            status=EmployeeStatus(r["status"]),
            phone=r.get("phone"),
            biometric_id=r.get("biometric_id"),
            payment_type=PaymentType(r["payment_type"]),
            monthly_salary=float(r.get("monthly_salary") or 0),
            weekly_salary=float(r.get("weekly_salary") or 0),
            hourly_rate=float(r.get("hourly_rate") or 0),
            agreed_daily_hours=float(r.get("agreed_daily_hours") or 0),
            overtime_rate=float(r.get("overtime_rate") or 0),
            lateness_deduction_rate=float(r.get("lateness_deduction_rate") or 0),
            calculate_by_30_days=bool(r.get("calculate_by_30_days")),
            check_in_start=normalize_mysql_time(r.get("check_in_start")),
            check_in_end=normalize_mysql_time(r.get("check_in_end")),
            check_out_start=normalize_mysql_time(r.get("check_out_start")),
            check_out_end=normalize_mysql_time(r.get("check_out_end")),
            workdays=workdays,
            salary_currency=r["salary_currency"],
        )

    def _select_one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE {where}", params)
            r = fetchone(cur)
            if not r:
                return None
            employee_id = int(r["employee_id"])
            workdays = self._load_workdays(cur, [employee_id]).get(employee_id, frozenset())
            return self._to_employee(r, workdays)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._select_one("employee_id=%s", (int(employee_id),))

    def get_by_biometric_id(self, biometric_id: str) -> Optional[Employee]:
        return self._select_one("biometric_id=%s", (str(biometric_id).strip(),))

    def biometric_id_map(self) -> Mapping[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id, biometric_id FROM employees WHERE biometric_id IS NOT NULL")
            return {
                str(r["biometric_id"]).strip(): int(r["employee_id"])
                for r in fetchall(cur)
                if str(r["biometric_id"]).strip()
            }

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees ORDER BY employee_id")
            rows = fetchall(cur)
            workdays = self._load_workdays(cur, [int(r["employee_id"]) for r in rows])
            return [self._to_employee(r, workdays.get(int(r["employee_id"]), frozenset())) for r in rows]

    @staticmethod
    def _profile_params(e: Employee) -> tuple:
        return (
            e.employee_code,
            e.name,
            e.hire_date,
            e.status.value,
            e.phone,
            e.biometric_id,
            e.payment_type.value,
            e.monthly_salary,
            e.weekly_salary,
            e.hourly_rate,
            e.agreed_daily_hours,
            e.overtime_rate,
            e.lateness_deduction_rate,
            int(e.calculate_by_30_days),
            e.check_in_start,
            e.check_in_end,
            e.check_out_start,
            e.check_out_end,
            e.salary_currency,
        )

    def _replace_workdays(self, cur, employee_id: int, workdays) -> None:
        cur.execute("DELETE FROM employee_workdays WHERE employee_id=%s", (employee_id,))
        if workdays:
            cur.executemany(
                "INSERT INTO employee_workdays(employee_id, weekday) VALUES(%s,%s)",
                [(employee_id, int(d)) for d in sorted(workdays)],
            )

    def create(self, employee: Employee) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_code, name, hire_date, status, phone, biometric_id,
                    payment_type, monthly_salary, weekly_salary, hourly_rate, agreed_daily_hours,
                    overtime_rate, lateness_deduction_rate, calculate_by_30_days,
                    check_in_start, check_in_end, check_out_start, check_out_end, salary_currency
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                self._profile_params(employee),
            )
            employee_id = int(cur.lastrowid)
            self._replace_workdays(cur, employee_id, employee.workdays)
            return employee_id

    def update(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees SET
                    employee_code=%s, name=%s, hire_date=%s, status=%s, phone=%s, biometric_id=%s,
                    payment_type=%s, monthly_salary=%s, weekly_salary=%s, hourly_rate=%s,
                    agreed_daily_hours=%s, overtime_rate=%s, lateness_deduction_rate=%s,
                    calculate_by_30_days=%s, check_in_start=%s, check_in_end=%s,
                    check_out_start=%s, check_out_end=%s, salary_currency=%s
                WHERE employee_id=%s
                """,
                self._profile_params(employee) + (int(employee.employee_id),),
            )
            # rowcount is 0 when nothing changed, so check existence separately.
            cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (int(employee.employee_id),))
            if not fetchone(cur):
                return False
            self._replace_workdays(cur, int(employee.employee_id), employee.workdays)
            return True

    def set_biometric_id(self, employee_id: int, biometric_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET biometric_id=%s WHERE employee_id=%s",
                (str(biometric_id).strip(), int(employee_id)),
            )
            return cur.rowcount > 0

    def set_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET status=%s WHERE employee_id=%s", (status.value, int(employee_id)))
            return cur.rowcount > 0

    def delete(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def get_flat_rate_profile(self, employee_id: int) -> Optional[FlatRateProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id, flat_salary, currency, period FROM flat_rate_profiles WHERE employee_id=%s",
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return FlatRateProfile(
                employee_id=int(r["employee_id"]),
                flat_salary=float(r.get("flat_salary") or 0),
                currency=r["currency"],
                period=FlatRatePeriod(r["period"]),
            )
