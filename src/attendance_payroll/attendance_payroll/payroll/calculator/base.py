from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PayrollInputs


class PayCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    One implementation per way of expressing base pay. The engine asks it
    for the effective hourly rate and the base salary; everything else
    (overtime, lateness, absence) is shared arithmetic.
    """

    # Flat-rate pay ignores overtime, lateness and absence.
    applies_time_adjustments: bool = True
    # Salaried employees lose pay for absent workdays.
    deducts_absence: bool = False

    def hourly_rate(self, inputs: PayrollInputs) -> float:
        explicit = inputs.employee.hourly_rate
        if explicit > 0:
            return explicit
        return self.derived_hourly_rate(inputs)

    @abstractmethod
    def derived_hourly_rate(self, inputs: PayrollInputs) -> float:
        raise NotImplementedError

    @abstractmethod
    def base_salary(self, inputs: PayrollInputs, *, regular_hours: float, hourly_rate: float) -> float:
        raise NotImplementedError

    @staticmethod
    def from_daily(amount: float, divisor: int, agreed_daily_hours: float) -> float:
        """Hourly rate from a salary spread over ``divisor`` days of ``agreed_daily_hours``."""

        if divisor <= 0 or agreed_daily_hours <= 0:
            return 0.0
        return (amount / divisor) / agreed_daily_hours
