from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PaymentType
from .calculator.base import PayCalculator
from .calculator.flat_rate_calculator import FlatRatePayCalculator
from .calculator.hourly_calculator import HourlyPayCalculator
from .calculator.monthly_calculator import MonthlyPayCalculator
from .calculator.weekly_calculator import WeeklyPayCalculator
from .model import PayrollInputs


@dataclass
class PayCalculatorFactory:
    """Factory Pattern: choose the calculator for an employee's pay profile."""

    def for_inputs(self, inputs: PayrollInputs) -> PayCalculator:
        payment_type = inputs.employee.payment_type
        if payment_type == PaymentType.MONTHLY:
            calculator: PayCalculator = MonthlyPayCalculator()
        elif payment_type == PaymentType.WEEKLY:
            calculator = WeeklyPayCalculator()
        else:
            calculator = HourlyPayCalculator()

        if inputs.flat_rate is not None:
            return FlatRatePayCalculator(calculator)
        return calculator
