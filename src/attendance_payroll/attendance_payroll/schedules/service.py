from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.effective_dated import effective_value
from ..core.constants import DEFAULT_AGREED_DAILY_HOURS
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import WorkScheduleEntry
from .repository import ScheduleHistoryRepository

logger = logging.getLogger(__name__)


def hours_on(entries: Sequence[WorkScheduleEntry], on: date, *, fallback: Optional[float]) -> float:
    """Agreed daily hours in force on ``on`` given an employee's history."""

    default = fallback if fallback else DEFAULT_AGREED_DAILY_HOURS
    return effective_value(
        entries,
        on,
        start_of=lambda e: e.effective_start_date,
        value_of=lambda e: e.hours,
        fallback=default,
    )


class ScheduleHistoryService:
    """Keeps the work-schedule audit trail.

    Callers that change the employee profile run ``record_*`` inside the same
    transaction as the profile write.
    """

    def __init__(self, history: ScheduleHistoryRepository, employees: EmployeeRepository):
        self._history = history
        self._employees = employees

    @staticmethod
    def _check_hours(hours: float) -> float:
        hours = float(hours)
        if hours < 0 or hours > 24:
            raise ValidationError(f"Agreed daily hours must be between 0 and 24, got {hours}")
        return hours

    def record_initial(self, *, employee_id: int, hours: float, created_on: date) -> int:
        return self._history.append(
            employee_id=int(employee_id),
            hours=self._check_hours(hours),
            effective_start_date=created_on,
        )

    def record_change(self, *, employee_id: int, old_hours: float, new_hours: float, today: date) -> Optional[int]:
        """Append a new entry effective ``today`` when the hours actually changed."""

        if float(old_hours) == float(new_hours):
            return None
        entry_id = self._history.append(
            employee_id=int(employee_id),
            hours=self._check_hours(new_hours),
            effective_start_date=today,
        )
        logger.info(
            "Schedule change for employee %s: %s -> %s hours effective %s",
            employee_id, old_hours, new_hours, today.isoformat(),
        )
        return entry_id

    def history(self, employee_id: int) -> Sequence[WorkScheduleEntry]:
        return self._history.list_for_employee(int(employee_id))

    def hours_effective_on(self, employee_id: int, on: date) -> float:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return hours_on(self._history.list_for_employee(employee.employee_id), on, fallback=employee.agreed_daily_hours)
