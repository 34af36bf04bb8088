from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import Clock, today_local
from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.transactions import TransactionManager
from ..schedules.service import ScheduleHistoryService
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: maintain employee profiles together with their schedule history."""

    def __init__(
        self,
        employees: EmployeeRepository,
        schedules: ScheduleHistoryService,
        tx: TransactionManager,
        *,
        clock: Clock = today_local,
    ):
        self._employees = employees
        self._schedules = schedules
        self._tx = tx
        self._clock = clock

    def _check_biometric_id_free(self, biometric_id: Optional[str], *, employee_id: Optional[int] = None) -> None:
        if not biometric_id:
            return
        holder = self._employees.get_by_biometric_id(biometric_id)
        if holder and holder.employee_id != employee_id:
            raise ConflictError(f"Biometric id {biometric_id} already belongs to employee {holder.employee_id}")

    def create_employee(self, employee: Employee, *, created_on: Optional[date] = None) -> int:
        require_non_empty(employee.name, "Name")
        require_non_empty(employee.employee_code, "Employee code")
        if employee.agreed_daily_hours <= 0:
            raise ValidationError("Agreed daily hours must be greater than zero")

        created_on = created_on or self._clock()
        with self._tx.transaction():
            self._check_biometric_id_free(employee.biometric_id)
            employee_id = self._employees.create(employee)
            self._schedules.record_initial(
                employee_id=employee_id,
                hours=employee.agreed_daily_hours,
                created_on=created_on,
            )
        logger.info("Created employee %s (%s)", employee_id, employee.employee_code)
        return employee_id

    def update_employee(self, employee: Employee) -> Employee:
        """Persist a changed profile; a change of agreed hours is appended to history."""

        if employee.agreed_daily_hours <= 0:
            raise ValidationError("Agreed daily hours must be greater than zero")

        with self._tx.transaction():
            current = self._employees.get_by_id(employee.employee_id)
            if not current:
                raise NotFoundError(f"Employee {employee.employee_id} not found")
            self._check_biometric_id_free(employee.biometric_id, employee_id=employee.employee_id)

            self._employees.update(employee)
            self._schedules.record_change(
                employee_id=employee.employee_id,
                old_hours=current.agreed_daily_hours,
                new_hours=employee.agreed_daily_hours,
                today=self._clock(),
            )
        return employee

    def change_agreed_hours(self, employee_id: int, hours: float) -> Employee:
        current = self.get(employee_id)
        return self.update_employee(replace(current, agreed_daily_hours=float(hours)))

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def delete_employee(self, employee_id: int) -> None:
        """Delete the employee; attendance, history and ledger rows cascade."""

        if not self._employees.delete(int(employee_id)):
            raise NotFoundError(f"Employee {employee_id} not found")
        logger.info("Deleted employee %s and related data", employee_id)
