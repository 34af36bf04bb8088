from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_date_range, require_non_empty, require_positive_amount
from ..core.constants import DEFAULT_SALARY_CURRENCY
from ..core.enums import AdvanceStatus, LeaveType, RequestStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import LeaveRequest, SalaryAdvance
from .repository import AdvanceRepository, BonusRepository, DeductionRepository, LeaveRepository

logger = logging.getLogger(__name__)


class AdjustmentService:
    """Leave requests, salary advances and the bonus/deduction ledgers.

    Approval moves a Pending item to Approved or Rejected exactly once; the
    payroll engine only ever reads Approved items.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        advances: AdvanceRepository,
        bonuses: BonusRepository,
        deductions: DeductionRepository,
        employees: EmployeeRepository,
    ):
        self._leaves = leaves
        self._advances = advances
        self._bonuses = bonuses
        self._deductions = deductions
        self._employees = employees

    def _require_employee(self, employee_id: int) -> int:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError(f"Employee {employee_id} not found")
        return int(employee_id)

    @staticmethod
    def _clean_reason(reason: Optional[str]) -> Optional[str]:
        return (reason or "").strip() or None

    # ----- leave -----

    def submit_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        deduct_from_salary: bool = False,
        reason: str = "",
    ) -> int:
        employee_id = self._require_employee(employee_id)
        require_date_range(start_date, end_date)
        return self._leaves.create(
            employee_id=employee_id,
            leave_type=LeaveType(leave_type),
            start_date=start_date,
            end_date=end_date,
            deduct_from_salary=bool(deduct_from_salary),
            reason=self._clean_reason(reason),
        )

    def _decide_leave(self, request_id: int, status: RequestStatus, status_reason: Optional[str]) -> LeaveRequest:
        req = self._leaves.get(int(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} not found")
        if req.status != RequestStatus.PENDING:
            raise ConflictError(f"Leave request {request_id} was already {req.status.value}")
        if not self._leaves.decide(request_id=req.request_id, status=status, status_reason=status_reason):
            raise ConflictError(f"Leave request {request_id} was decided concurrently")
        logger.info("Leave request %s %s", request_id, status.value.lower())
        return self._leaves.get(req.request_id)

    def approve_leave(self, request_id: int) -> LeaveRequest:
        return self._decide_leave(request_id, RequestStatus.APPROVED, None)

    def reject_leave(self, request_id: int, *, reason: str) -> LeaveRequest:
        return self._decide_leave(request_id, RequestStatus.REJECTED, require_non_empty(reason, "Rejection reason"))

    # ----- advances -----

    def request_advance(
        self,
        *,
        employee_id: int,
        amount: float,
        advance_date: date,
        currency: str = DEFAULT_SALARY_CURRENCY,
        reason: str = "",
    ) -> int:
        employee_id = self._require_employee(employee_id)
        return self._advances.create(
            employee_id=employee_id,
            amount=require_positive_amount(amount, "Advance amount"),
            currency=require_non_empty(currency, "Currency"),
            advance_date=advance_date,
            reason=self._clean_reason(reason),
        )

    def _decide_advance(self, advance_id: int, status: AdvanceStatus, status_reason: Optional[str]) -> SalaryAdvance:
        advance = self._advances.get(int(advance_id))
        if not advance:
            raise NotFoundError(f"Salary advance {advance_id} not found")
        if advance.status != AdvanceStatus.PENDING:
            raise ConflictError(f"Salary advance {advance_id} was already {advance.status.value}")
        self._advances.set_status(advance_id=advance.advance_id, status=status, status_reason=status_reason)
        logger.info("Salary advance %s %s", advance_id, status.value.lower())
        return self._advances.get(advance.advance_id)

    def approve_advance(self, advance_id: int) -> SalaryAdvance:
        return self._decide_advance(advance_id, AdvanceStatus.APPROVED, None)

    def reject_advance(self, advance_id: int, *, reason: str) -> SalaryAdvance:
        return self._decide_advance(advance_id, AdvanceStatus.REJECTED, require_non_empty(reason, "Rejection reason"))

    def outstanding_advances(self, employee_id: int) -> Sequence[SalaryAdvance]:
        return self._advances.list_by_status(employee_id=int(employee_id), status=AdvanceStatus.APPROVED)

    # ----- ledgers -----

    def add_bonus(
        self,
        *,
        employee_id: int,
        amount: float,
        entry_date: date,
        currency: str = DEFAULT_SALARY_CURRENCY,
        reason: str = "",
    ) -> int:
        employee_id = self._require_employee(employee_id)
        return self._bonuses.create(
            employee_id=employee_id,
            amount=require_positive_amount(amount, "Bonus amount"),
            currency=require_non_empty(currency, "Currency"),
            entry_date=entry_date,
            reason=self._clean_reason(reason),
        )

    def add_deduction(
        self,
        *,
        employee_id: int,
        amount: float,
        entry_date: date,
        currency: str = DEFAULT_SALARY_CURRENCY,
        reason: str = "",
    ) -> int:
        employee_id = self._require_employee(employee_id)
        if not self._clean_reason(reason):
            raise ValidationError("A deduction needs a reason")
        return self._deductions.create(
            employee_id=employee_id,
            amount=require_positive_amount(amount, "Deduction amount"),
            currency=require_non_empty(currency, "Currency"),
            entry_date=entry_date,
            reason=self._clean_reason(reason),
        )
