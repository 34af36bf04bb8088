from __future__ import annotations

import logging
from datetime import date, time

import pytest

from attendance_payroll.adjustments.model import Bonus, Deduction
from attendance_payroll.attendance.model import AttendanceRecord
from attendance_payroll.core.constants import DEFAULT_WORKDAYS
from attendance_payroll.core.enums import PaymentType
from attendance_payroll.employees.model import Employee, FlatRateProfile
from attendance_payroll.payroll.calculator.flat_rate_calculator import FlatRatePayCalculator
from attendance_payroll.payroll.calculator.hourly_calculator import HourlyPayCalculator
from attendance_payroll.payroll.calculator.monthly_calculator import MonthlyPayCalculator
from attendance_payroll.payroll.calculator.weekly_calculator import WeeklyPayCalculator
from attendance_payroll.payroll.engine import compute_payroll, day_hours, effective_check_in
from attendance_payroll.payroll.factory import PayCalculatorFactory
from attendance_payroll.payroll.model import PayrollInputs

TODAY = date(2024, 3, 14)


def _employee(**overrides) -> Employee:
    fields = dict(
        employee_id=1,
        employee_code="E001",
        name="Rami",
        hire_date=date(2023, 1, 1),
        payment_type=PaymentType.HOURLY,
        hourly_rate=1000.0,
    )
    fields.update(overrides)
    return Employee(**fields)


def _row(day: date, check_in: time, check_out=None) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=day.toordinal(), employee_id=1, work_date=day, check_in=check_in, check_out=check_out
    )


def _run(employee, rows=(), *, start=date(2024, 3, 1), end=date(2024, 3, 31), **extra):
    extra.setdefault("default_workdays", DEFAULT_WORKDAYS)
    return compute_payroll(
        PayrollInputs(employee=employee, start_date=start, end_date=end, today=TODAY, attendance=tuple(rows), **extra)
    )


def test_shift_past_midnight_counts_from_check_in_to_next_day():
    result = _run(_employee(), [_row(date(2024, 3, 10), time(22, 0), time(2, 0))])

    assert result.total_worked_hours == pytest.approx(4)
    assert result.total_overtime_hours == 0
    assert result.base_salary == pytest.approx(4000)
    assert result.net_salary == pytest.approx(4000)


def test_arrival_inside_window_counts_from_window_start():
    employee = _employee(hourly_rate=600.0, check_in_start=time(8, 0), check_in_end=time(8, 15))

    assert effective_check_in(employee, time(8, 10)) == time(8, 0)
    assert effective_check_in(employee, time(8, 15)) == time(8, 0)
    assert effective_check_in(employee, time(7, 55)) == time(7, 55)
    assert effective_check_in(employee, time(8, 30)) == time(8, 30)

    result = _run(employee, [_row(date(2024, 3, 10), time(8, 10), time(16, 0))])
    assert result.total_worked_hours == pytest.approx(8)
    assert result.total_late_minutes == 0


def test_arrival_after_window_is_late_and_deducted():
    employee = _employee(hourly_rate=600.0, check_in_start=time(8, 0), check_in_end=time(8, 15))

    result = _run(employee, [_row(date(2024, 3, 10), time(8, 30), time(16, 0))])

    assert result.total_late_minutes == pytest.approx(15)
    assert result.total_worked_hours == pytest.approx(7.5)
    assert result.lateness_deductions == pytest.approx(150)


def test_explicit_lateness_rate_is_per_minute():
    employee = _employee(check_in_end=time(8, 15), lateness_deduction_rate=20.0)

    result = _run(employee, [_row(date(2024, 3, 10), time(8, 30), time(16, 0))])

    assert result.lateness_deductions == pytest.approx(15 * 20)


def test_row_without_check_out_still_counts_lateness_but_no_hours():
    employee = _employee(check_in_end=time(8, 15))

    result = _run(employee, [_row(date(2024, 3, 10), time(9, 0))])

    assert result.total_late_minutes == pytest.approx(45)
    assert result.total_worked_hours == 0
    assert day_hours(employee, _row(date(2024, 3, 10), time(9, 0)), 8) is None


def test_overtime_counts_past_check_out_threshold():
    employee = _employee(check_out_end=time(17, 0))

    hours = day_hours(employee, _row(date(2024, 3, 10), time(8, 0), time(19, 0)), 8)

    assert (hours.worked, hours.regular, hours.overtime) == pytest.approx((11, 9, 2))


def test_threshold_before_check_in_belongs_to_next_day():
    employee = _employee(check_out_end=time(4, 0))

    hours = day_hours(employee, _row(date(2024, 3, 10), time(20, 0), time(6, 0)), 8)

    assert (hours.worked, hours.regular, hours.overtime) == pytest.approx((10, 8, 2))


@pytest.mark.parametrize(
    "overtime_rate, expected_pay",
    [
        (0.0, 2 * 1000 * 1.5),
        (2.0, 2 * 1000 * 2.0),
    ],
)
def test_overtime_multiplier_defaults_when_unset(overtime_rate, expected_pay):
    employee = _employee(overtime_rate=overtime_rate)

    result = _run(employee, [_row(date(2024, 3, 10), time(8, 0), time(18, 0))])

    assert result.total_overtime_hours == pytest.approx(2)
    assert result.overtime_pay == pytest.approx(expected_pay)
    assert result.base_salary == pytest.approx(8 * 1000)


def test_monthly_net_salary_by_30_days():
    employee = _employee(
        payment_type=PaymentType.MONTHLY,
        hourly_rate=0.0,
        monthly_salary=900_000.0,
        calculate_by_30_days=True,
    )
    days = [date(2024, 3, d) for d in (3, 4, 5, 6, 7, 10, 11, 12, 13, 14)]

    result = _run(
        employee,
        [_row(d, time(8, 0), time(17, 0)) for d in days],
        bonuses=(Bonus(1, 1, 5000.0, "SYP", date(2024, 3, 5)),),
        deductions=(Deduction(1, 1, 2000.0, "SYP", date(2024, 3, 6), "Damaged tool"),),
    )

    assert result.hourly_rate == pytest.approx(3750)
    assert result.base_salary == pytest.approx(900_000)
    assert result.total_overtime_hours == pytest.approx(10)
    assert result.overtime_pay == pytest.approx(56_250)
    assert result.absent_days == 0
    assert result.total_deductions == pytest.approx(2000)
    assert result.net_salary == pytest.approx(959_250)
    assert result.advances_total == 0


def test_explicit_hourly_rate_wins_over_salary_derivation():
    employee = _employee(payment_type=PaymentType.MONTHLY, hourly_rate=1000.0, monthly_salary=900_000.0)

    assert _run(employee).hourly_rate == 1000.0


@pytest.mark.parametrize(
    "by_7, expected_hourly",
    [
        (True, 70_000 / 7 / 8),
        (False, 70_000 / 5 / 8),
    ],
)
def test_weekly_salary_is_prorated_over_period(by_7, expected_hourly):
    employee = _employee(
        payment_type=PaymentType.WEEKLY, hourly_rate=0.0, weekly_salary=70_000.0, calculate_by_30_days=by_7
    )

    result = _run(employee, start=date(2024, 2, 1), end=date(2024, 2, 14))

    assert result.base_salary == pytest.approx(140_000)
    assert result.hourly_rate == pytest.approx(expected_hourly)


def test_flat_rate_ignores_time_but_keeps_hours_and_bonuses():
    employee = _employee(
        payment_type=PaymentType.MONTHLY,
        hourly_rate=0.0,
        monthly_salary=900_000.0,
        check_in_end=time(8, 15),
    )

    result = _run(
        employee,
        [_row(date(2024, 3, 10), time(9, 0), time(19, 0))],
        flat_rate=FlatRateProfile(employee_id=1, flat_salary=500_000.0),
        bonuses=(Bonus(1, 1, 1000.0, "SYP", date(2024, 3, 10)),),
    )

    assert result.base_salary == pytest.approx(500_000)
    assert result.total_overtime_hours == pytest.approx(2)
    assert result.total_late_minutes == pytest.approx(45)
    assert (result.overtime_pay, result.lateness_deductions, result.absence_deduction) == (0, 0, 0)
    assert result.absent_days == 0
    assert result.net_salary == pytest.approx(501_000)


def test_foreign_currency_amounts_are_summed_with_a_warning(caplog):
    caplog.set_level(logging.WARNING, logger="attendance_payroll.payroll.engine")

    result = _run(
        _employee(),
        bonuses=(
            Bonus(1, 1, 100.0, "SYP", date(2024, 3, 2)),
            Bonus(2, 1, 50.0, "USD", date(2024, 3, 3)),
        ),
    )

    assert result.bonuses_total == pytest.approx(150)
    assert result.currencies == ("SYP", "USD")
    assert any("USD" in r.getMessage() for r in caplog.records if r.levelno == logging.WARNING)


@pytest.mark.parametrize(
    "payment_type, expected",
    [
        (PaymentType.HOURLY, HourlyPayCalculator),
        (PaymentType.MONTHLY, MonthlyPayCalculator),
        (PaymentType.WEEKLY, WeeklyPayCalculator),
    ],
)
def test_factory_picks_calculator_by_payment_type(payment_type, expected):
    inputs = PayrollInputs(
        employee=_employee(payment_type=payment_type), start_date=TODAY, end_date=TODAY, today=TODAY
    )

    assert isinstance(PayCalculatorFactory().for_inputs(inputs), expected)


def test_factory_wraps_flat_rate_members():
    inputs = PayrollInputs(
        employee=_employee(),
        start_date=TODAY,
        end_date=TODAY,
        today=TODAY,
        flat_rate=FlatRateProfile(employee_id=1, flat_salary=1.0),
    )

    assert isinstance(PayCalculatorFactory().for_inputs(inputs), FlatRatePayCalculator)
