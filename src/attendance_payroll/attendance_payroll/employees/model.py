from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import FrozenSet, Optional

from ..core.constants import DEFAULT_AGREED_DAILY_HOURS, DEFAULT_SALARY_CURRENCY
from ..core.enums import EmployeeStatus, FlatRatePeriod, PaymentType, Weekday


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee's pay profile.

    Plain data object; repositories build it, services and the payroll
    engine read it.
    """

    employee_id: int
    employee_code: str
    name: str
    hire_date: date
    payment_type: PaymentType = PaymentType.HOURLY
    monthly_salary: float = 0.0
    weekly_salary: float = 0.0
    hourly_rate: float = 0.0
    agreed_daily_hours: float = DEFAULT_AGREED_DAILY_HOURS
    overtime_rate: float = 0.0
    lateness_deduction_rate: float = 0.0
    calculate_by_30_days: bool = False
    check_in_start: Optional[time] = None
    check_in_end: Optional[time] = None
    check_out_start: Optional[time] = None
    check_out_end: Optional[time] = None
    workdays: FrozenSet[Weekday] = field(default_factory=frozenset)
    salary_currency: str = DEFAULT_SALARY_CURRENCY
    biometric_id: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    phone: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status != EmployeeStatus.INACTIVE


@dataclass(frozen=True)
class FlatRateProfile:
    """Membership in a flat-rate category (e.g. manufacturing staff)."""

    employee_id: int
    flat_salary: float
    currency: str = DEFAULT_SALARY_CURRENCY
    period: FlatRatePeriod = FlatRatePeriod.MONTHLY
