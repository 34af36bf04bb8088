"""Pure payroll arithmetic over a ``PayrollInputs`` snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence

from ..adjustments.model import LeaveRequest
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import hours_between, iter_days
from ..core.constants import DEFAULT_AGREED_DAILY_HOURS, DEFAULT_OVERTIME_MULTIPLIER
from ..core.enums import Weekday
from ..employees.model import Employee
from ..schedules.service import hours_on
from .calculator.base import PayCalculator
from .factory import PayCalculatorFactory
from .model import PayrollInputs, PayrollResult

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DayHours:
    worked: float
    regular: float
    overtime: float


def effective_check_in(employee: Employee, check_in: time) -> time:
    """Arrivals inside the check-in window count from the window start."""

    start, end = employee.check_in_start, employee.check_in_end
    if start and end and start < check_in <= end:
        return start
    return check_in


def day_hours(employee: Employee, record: AttendanceRecord, agreed_hours: float) -> Optional[DayHours]:
    """Worked/regular/overtime hours for one attendance row.

    A check-out at or before the (rounded) check-in means the shift crossed
    midnight. ``None`` when the row has no check-out.
    """

    if record.check_in is None or record.check_out is None:
        return None

    start = datetime.combine(record.work_date, effective_check_in(employee, record.check_in))
    end = datetime.combine(record.work_date, record.check_out)
    if end <= start:
        end += _ONE_DAY
    worked = max(0.0, hours_between(start, end))

    if employee.check_out_end:
        threshold = datetime.combine(record.work_date, employee.check_out_end)
        if threshold <= start:
            threshold += _ONE_DAY
        overtime = max(0.0, hours_between(threshold, end))
    else:
        overtime = max(0.0, worked - agreed_hours)

    return DayHours(worked=worked, regular=worked - overtime, overtime=overtime)


def late_minutes(employee: Employee, record: AttendanceRecord) -> float:
    if not employee.check_in_end or record.check_in is None or record.check_in <= employee.check_in_end:
        return 0.0
    arrived = datetime.combine(record.work_date, record.check_in)
    deadline = datetime.combine(record.work_date, employee.check_in_end)
    return (arrived - deadline).total_seconds() / 60


def _days_covered(leaves: Iterable[LeaveRequest], start: date, end: date) -> set[date]:
    days: set[date] = set()
    for leave in leaves:
        for day in iter_days(max(leave.start_date, start), min(leave.end_date, end)):
            days.add(day)
    return days


def absent_days(inputs: PayrollInputs) -> int:
    """Days that cost a salaried employee a day's pay.

    With fixed 30/7-day divisors only deductible leave counts. Otherwise every
    past workday with neither attendance nor approved leave is an absence,
    plus the workdays spent on deductible leave.
    """

    start, end = inputs.start_date, inputs.end_date
    deductible = [lv for lv in inputs.approved_leaves if lv.is_deductible]

    if inputs.employee.calculate_by_30_days:
        return len(_days_covered(deductible, start, end))

    workdays = inputs.workdays
    attended = {r.work_date for r in inputs.attendance}
    on_leave = _days_covered(inputs.approved_leaves, start, end)

    absences = sum(
        1
        for day in iter_days(start, min(end, inputs.today))
        if Weekday.of(day) in workdays and day not in attended and day not in on_leave
    )
    leave_days = sum(1 for day in _days_covered(deductible, start, end) if Weekday.of(day) in workdays)
    return absences + leave_days


def _sum_amounts(entries: Sequence, *, kind: str, salary_currency: str) -> tuple[float, set[str]]:
    currencies = {e.currency for e in entries}
    foreign = currencies - {salary_currency}
    if foreign:
        # No conversion: amounts are added as plain numbers.
        logger.warning(
            "Summing %s in %s together with %s without conversion",
            kind, sorted(foreign), salary_currency,
        )
    return sum(float(e.amount) for e in entries), currencies


def compute_payroll(inputs: PayrollInputs, *, calculator: Optional[PayCalculator] = None) -> PayrollResult:
    employee = inputs.employee
    calculator = calculator or PayCalculatorFactory().for_inputs(inputs)

    total_worked = total_regular = total_overtime = total_late = 0.0
    for record in inputs.attendance:
        total_late += late_minutes(employee, record)
        agreed = hours_on(inputs.schedule_history, record.work_date, fallback=employee.agreed_daily_hours)
        hours = day_hours(employee, record, agreed)
        if hours is None:
            continue
        total_worked += hours.worked
        total_regular += hours.regular
        total_overtime += hours.overtime

    hourly_rate = calculator.hourly_rate(inputs)

    overtime_pay = lateness = absence = 0.0
    days_absent = 0
    if calculator.applies_time_adjustments:
        multiplier = employee.overtime_rate if employee.overtime_rate > 0 else DEFAULT_OVERTIME_MULTIPLIER
        overtime_pay = total_overtime * hourly_rate * multiplier

        per_minute = employee.lateness_deduction_rate if employee.lateness_deduction_rate > 0 else hourly_rate / 60
        lateness = total_late * per_minute

        if calculator.deducts_absence:
            days_absent = absent_days(inputs)
            daily_rate = hourly_rate * (employee.agreed_daily_hours or DEFAULT_AGREED_DAILY_HOURS)
            absence = days_absent * daily_rate

    bonuses_total, bonus_currencies = _sum_amounts(
        inputs.bonuses, kind="bonuses", salary_currency=employee.salary_currency
    )
    manual_total, deduction_currencies = _sum_amounts(
        inputs.deductions, kind="deductions", salary_currency=employee.salary_currency
    )

    base = calculator.base_salary(inputs, regular_hours=total_regular, hourly_rate=hourly_rate)
    total_deductions = lateness + absence + manual_total
    net = base + overtime_pay + bonuses_total - total_deductions

    return PayrollResult(
        employee_id=employee.employee_id,
        start_date=inputs.start_date,
        end_date=inputs.end_date,
        base_salary=base,
        overtime_pay=overtime_pay,
        bonuses_total=bonuses_total,
        lateness_deductions=lateness,
        absence_deduction=absence,
        manual_deductions_total=manual_total,
        total_deductions=total_deductions,
        net_salary=net,
        total_worked_hours=total_worked,
        total_regular_hours=total_regular,
        total_overtime_hours=total_overtime,
        total_late_minutes=total_late,
        absent_days=days_absent,
        hourly_rate=hourly_rate,
        currencies=tuple(sorted(bonus_currencies | deduction_currencies)),
        outstanding_advances=tuple(inputs.outstanding_advances),
    )
