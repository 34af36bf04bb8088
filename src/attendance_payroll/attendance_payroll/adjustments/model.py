from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AdvanceStatus, LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    status: RequestStatus
    deduct_from_salary: bool = False
    reason: Optional[str] = None
    status_reason: Optional[str] = None

    @property
    def is_deductible(self) -> bool:
        """Unpaid leave, or paid leave the operator chose to deduct."""
        return self.leave_type == LeaveType.UNPAID or self.deduct_from_salary

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class SalaryAdvance:
    advance_id: int
    employee_id: int
    amount: float
    currency: str
    advance_date: date
    status: AdvanceStatus
    reason: Optional[str] = None
    status_reason: Optional[str] = None


@dataclass(frozen=True)
class Bonus:
    bonus_id: int
    employee_id: int
    amount: float
    currency: str
    entry_date: date
    reason: Optional[str] = None


@dataclass(frozen=True)
class Deduction:
    deduction_id: int
    employee_id: int
    amount: float
    currency: str
    entry_date: date
    reason: Optional[str] = None
