from __future__ import annotations

from .base import PayCalculator
from ..model import PayrollInputs


class HourlyPayCalculator(PayCalculator):
    """Paid for regular hours actually worked; no absence deduction."""

    def derived_hourly_rate(self, inputs: PayrollInputs) -> float:
        return 0.0

    def base_salary(self, inputs: PayrollInputs, *, regular_hours: float, hourly_rate: float) -> float:
        return regular_hours * hourly_rate
