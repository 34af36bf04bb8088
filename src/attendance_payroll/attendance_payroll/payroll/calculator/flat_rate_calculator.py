from __future__ import annotations

from .base import PayCalculator
from ..model import PayrollInputs


class FlatRatePayCalculator(PayCalculator):
    """Members of a flat-rate category get the category's flat salary.

    Hours are still reported, but they do not move the pay.
    """

    applies_time_adjustments = False
    deducts_absence = False

    def __init__(self, underlying: PayCalculator):
        self._underlying = underlying

    def hourly_rate(self, inputs: PayrollInputs) -> float:
        return self._underlying.hourly_rate(inputs)

    def derived_hourly_rate(self, inputs: PayrollInputs) -> float:
        return self._underlying.derived_hourly_rate(inputs)

    def base_salary(self, inputs: PayrollInputs, *, regular_hours: float, hourly_rate: float) -> float:
        return inputs.flat_rate.flat_salary if inputs.flat_rate else 0.0
