from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..adjustments.repository import AdvanceRepository, BonusRepository, DeductionRepository, LeaveRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, today_local
from ..common.validators import require_date_range
from ..core.enums import AdvanceStatus
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from ..schedules.repository import ScheduleHistoryRepository
from ..settings.service import SettingsService
from .engine import compute_payroll
from .factory import PayCalculatorFactory
from .model import PayrollInputs, PayrollResult

logger = logging.getLogger(__name__)


class PayrollService:
    """Reads a consistent snapshot for one employee and runs the engine over it.

    Never writes. Termination and salary delivery call ``compute`` inside
    their own transaction so the snapshot matches what they persist.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        schedules: ScheduleHistoryRepository,
        leaves: LeaveRepository,
        advances: AdvanceRepository,
        bonuses: BonusRepository,
        deductions: DeductionRepository,
        settings: SettingsService,
        *,
        clock: Clock = today_local,
        calculator_factory: Optional[PayCalculatorFactory] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._schedules = schedules
        self._leaves = leaves
        self._advances = advances
        self._bonuses = bonuses
        self._deductions = deductions
        self._settings = settings
        self._clock = clock
        self._factory = calculator_factory or PayCalculatorFactory()

    def snapshot(self, employee_id: int, start_date: date, end_date: date) -> PayrollInputs:
        require_date_range(start_date, end_date)
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")

        eid = employee.employee_id
        return PayrollInputs(
            employee=employee,
            start_date=start_date,
            end_date=end_date,
            today=self._clock(),
            attendance=tuple(self._attendance.list_range(employee_id=eid, start_date=start_date, end_date=end_date)),
            schedule_history=tuple(self._schedules.list_for_employee(eid)),
            approved_leaves=tuple(
                self._leaves.list_approved_overlapping(employee_id=eid, start_date=start_date, end_date=end_date)
            ),
            bonuses=tuple(self._bonuses.list_range(employee_id=eid, start_date=start_date, end_date=end_date)),
            deductions=tuple(self._deductions.list_range(employee_id=eid, start_date=start_date, end_date=end_date)),
            outstanding_advances=tuple(self._advances.list_by_status(employee_id=eid, status=AdvanceStatus.APPROVED)),
            default_workdays=self._settings.default_workdays(),
            flat_rate=self._employees.get_flat_rate_profile(eid),
        )

    def compute(self, employee_id: int, start_date: date, end_date: date) -> PayrollResult:
        inputs = self.snapshot(employee_id, start_date, end_date)
        result = compute_payroll(inputs, calculator=self._factory.for_inputs(inputs))
        logger.debug(
            "Payroll for employee %s %s..%s: net=%.2f",
            employee_id, start_date.isoformat(), end_date.isoformat(), result.net_salary,
        )
        return result
