from __future__ import annotations

from .base import PayCalculator
from ...common.datetime_utils import iter_days, month_bounds
from ...core.constants import BY_30_DAYS_DIVISOR
from ...core.enums import Weekday
from ..model import PayrollInputs


class MonthlyPayCalculator(PayCalculator):
    """Fixed monthly salary.

    The daily rate divides by 30, or by the number of workdays in the
    calendar month the period starts in.
    """

    deducts_absence = True

    def derived_hourly_rate(self, inputs: PayrollInputs) -> float:
        employee = inputs.employee
        if employee.calculate_by_30_days:
            divisor = BY_30_DAYS_DIVISOR
        else:
            first, last = month_bounds(inputs.start_date.year, inputs.start_date.month)
            divisor = sum(1 for day in iter_days(first, last) if Weekday.of(day) in inputs.workdays)
        return self.from_daily(employee.monthly_salary, divisor, employee.agreed_daily_hours)

    def base_salary(self, inputs: PayrollInputs, *, regular_hours: float, hourly_rate: float) -> float:
        return inputs.employee.monthly_salary
