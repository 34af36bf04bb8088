from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AdvanceStatus, LeaveType, RequestStatus
from .model import Bonus, Deduction, LeaveRequest, SalaryAdvance


class LeaveRepository(Protocol):
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
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, status_reason: Optional[str] = None) -> bool:
        """Move a Pending request to Approved/Rejected; False if it was not Pending."""

        raise NotImplementedError

    def list_approved_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError


class AdvanceRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        amount: float,
        currency: str,
        advance_date: date,
        reason: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def get(self, advance_id: int) -> Optional[SalaryAdvance]:
        raise NotImplementedError

    def set_status(self, *, advance_id: int, status: AdvanceStatus, status_reason: Optional[str] = None) -> bool:
        raise NotImplementedError

    def list_by_status(self, *, employee_id: int, status: AdvanceStatus) -> Sequence[SalaryAdvance]:
        raise NotImplementedError


class BonusRepository(Protocol):
    def create(self, *, employee_id: int, amount: float, currency: str, entry_date: date, reason: Optional[str] = None) -> int:
        raise NotImplementedError

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Bonus]:
        raise NotImplementedError


class DeductionRepository(Protocol):
    def create(self, *, employee_id: int, amount: float, currency: str, entry_date: date, reason: Optional[str] = None) -> int:
        raise NotImplementedError

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Deduction]:
        raise NotImplementedError
