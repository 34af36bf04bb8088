from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..adjustments.model import SalaryAdvance
from ..adjustments.repository import AdvanceRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, month_bounds, today_local
from ..core.enums import AdvanceStatus, PaymentType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.transactions import TransactionManager
from ..employees.repository import EmployeeRepository
from ..payroll.service import PayrollService
from .model import PaymentRecord, PayPeriod
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


class SalaryDeliveryService:
    """Pays out one period and marks what it consumed.

    The payment row, the paid attendance rows and the Paid advances are
    written in one transaction.
    """

    def __init__(
        self,
        payments: PaymentRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        advances: AdvanceRepository,
        payroll: PayrollService,
        tx: TransactionManager,
        *,
        clock: Clock = today_local,
    ):
        self._payments = payments
        self._employees = employees
        self._attendance = attendance
        self._advances = advances
        self._payroll = payroll
        self._tx = tx
        self._clock = clock

    @staticmethod
    def _check_period(period: PayPeriod) -> None:
        if not 1 <= int(period.month) <= 12:
            raise ValidationError(f"Month must be 1-12, got {period.month}")
        if period.week_number is not None and not 1 <= int(period.week_number) <= 5:
            raise ValidationError(f"Week number must be 1-5, got {period.week_number}")

    def _selected_advances(self, employee_id: int, advance_ids: Iterable[int]) -> Sequence[SalaryAdvance]:
        selected: list[SalaryAdvance] = []
        for advance_id in dict.fromkeys(int(a) for a in advance_ids):
            advance = self._advances.get(advance_id)
            if not advance or advance.employee_id != employee_id:
                raise NotFoundError(f"Salary advance {advance_id} not found for employee {employee_id}")
            if advance.status != AdvanceStatus.APPROVED:
                raise ConflictError(f"Salary advance {advance_id} is {advance.status.value}, not Approved")
            selected.append(advance)
        return selected

    def deliver_salary(self, employee_id: int, period: PayPeriod, advance_ids: Iterable[int] = ()) -> PaymentRecord:
        self._check_period(period)

        with self._tx.transaction():
            employee = self._employees.get_by_id(int(employee_id))
            if not employee:
                raise NotFoundError(f"Employee {employee_id} not found")

            advances = self._selected_advances(employee.employee_id, advance_ids)
            advances_deducted = sum(a.amount for a in advances)

            first, last = month_bounds(int(period.year), int(period.month))
            weekly = employee.payment_type == PaymentType.WEEKLY
            if weekly and period.week_number:
                gross = employee.weekly_salary
                deductions = 0.0
            else:
                result = self._payroll.compute(employee.employee_id, first, last)
                gross = result.base_salary + result.overtime_pay + result.bonuses_total
                deductions = result.total_deductions
            net = gross - deductions - advances_deducted

            payment_id = self._payments.create(
                employee_id=employee.employee_id,
                year=int(period.year),
                month=int(period.month),
                week_number=period.week_number,
                payment_type=employee.payment_type,
                gross_amount=gross,
                advances_deducted=advances_deducted,
                net_amount=net,
                payment_date=self._clock(),
            )

            if not weekly:
                self._attendance.mark_paid(employee_id=employee.employee_id, start_date=first, end_date=last)
            for advance in advances:
                self._advances.set_status(advance_id=advance.advance_id, status=AdvanceStatus.PAID)

            payment = self._payments.get(payment_id)

        logger.info(
            "Delivered salary to employee %s for %04d-%02d%s: gross=%.2f net=%.2f (%d advance(s))",
            employee.employee_id, int(period.year), int(period.month),
            f" week {period.week_number}" if period.week_number else "",
            gross, net, len(advances),
        )
        return payment
