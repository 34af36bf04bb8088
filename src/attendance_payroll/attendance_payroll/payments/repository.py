from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentType
from .model import PaymentRecord


class PaymentRepository(Protocol):
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
        raise NotImplementedError

    def get(self, payment_id: int) -> Optional[PaymentRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[PaymentRecord]:
        raise NotImplementedError
