from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import PaymentType


@dataclass(frozen=True)
class PayPeriod:
    """Calendar month being paid; ``week_number`` selects a week for weekly staff."""

    year: int
    month: int
    week_number: Optional[int] = None


@dataclass(frozen=True)
class PaymentRecord:
    payment_id: int
    employee_id: int
    year: int
    month: int
    week_number: Optional[int]
    payment_type: PaymentType
    gross_amount: float
    advances_deducted: float
    net_amount: float
    payment_date: date

    def to_dict(self) -> dict:
        return {
            "payment_id": self.payment_id,
            "employee_id": self.employee_id,
            "year": self.year,
            "month": self.month,
            "week_number": self.week_number,
            "payment_type": self.payment_type.value,
            "gross_amount": self.gross_amount,
            "advances_deducted": self.advances_deducted,
            "net_amount": self.net_amount,
            "payment_date": self.payment_date.isoformat(),
        }
