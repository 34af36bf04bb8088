from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import BlocklistRepository
from ..common.validators import require_non_empty
from ..core.enums import EmployeeStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..core.transactions import TransactionManager
from ..employees.repository import EmployeeRepository
from ..payroll.service import PayrollService
from .model import TerminationRecord
from .repository import TerminationRepository

logger = logging.getLogger(__name__)


class TerminationService:
    """Ends employment with a final settlement.

    The settlement covers the termination month up to the termination date
    and is stored as a snapshot. The employee's biometric id is blocked so
    later punches from a reissued badge are dropped.
    """

    def __init__(
        self,
        terminations: TerminationRepository,
        employees: EmployeeRepository,
        blocklist: BlocklistRepository,
        payroll: PayrollService,
        tx: TransactionManager,
    ):
        self._terminations = terminations
        self._employees = employees
        self._blocklist = blocklist
        self._payroll = payroll
        self._tx = tx

    def terminate(
        self,
        employee_id: int,
        termination_date: date,
        reason: str,
        notes: Optional[str] = None,
    ) -> TerminationRecord:
        reason = require_non_empty(reason, "Termination reason")
        notes = (notes or "").strip() or None

        with self._tx.transaction():
            employee = self._employees.get_by_id(int(employee_id))
            if not employee:
                raise NotFoundError(f"Employee {employee_id} not found")
            if employee.status == EmployeeStatus.INACTIVE:
                raise ConflictError(f"Employee {employee_id} is already inactive")

            settlement = self._payroll.compute(
                employee.employee_id,
                termination_date.replace(day=1),
                termination_date,
            )
            termination_id = self._terminations.create(
                employee_id=employee.employee_id,
                termination_date=termination_date,
                reason=reason,
                notes=notes,
                settlement=settlement.to_dict(),
            )
            self._employees.set_status(employee.employee_id, EmployeeStatus.INACTIVE)
            if employee.biometric_id:
                self._blocklist.add(
                    biometric_id=employee.biometric_id,
                    reason=f"Terminated employee ID: {employee.employee_id}",
                )

            record = self._terminations.get(termination_id)

        logger.info(
            "Terminated employee %s on %s (net settlement %.2f)",
            employee.employee_id, termination_date.isoformat(), settlement.net_salary,
        )
        return record

    def list_terminations(self) -> Sequence[TerminationRecord]:
        return self._terminations.list_all()
