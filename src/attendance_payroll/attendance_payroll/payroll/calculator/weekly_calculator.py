from __future__ import annotations

from .base import PayCalculator
from ...core.constants import BY_7_DAYS_DIVISOR
from ..model import PayrollInputs


class WeeklyPayCalculator(PayCalculator):
    """Weekly salary, pro-rated over the number of days in the period."""

    deducts_absence = True

    def derived_hourly_rate(self, inputs: PayrollInputs) -> float:
        employee = inputs.employee
        divisor = BY_7_DAYS_DIVISOR if employee.calculate_by_30_days else len(inputs.workdays)
        return self.from_daily(employee.weekly_salary, divisor, employee.agreed_daily_hours)

    def base_salary(self, inputs: PayrollInputs, *, regular_hours: float, hourly_rate: float) -> float:
        days = (inputs.end_date - inputs.start_date).days + 1
        return inputs.employee.weekly_salary * days / BY_7_DAYS_DIVISOR
