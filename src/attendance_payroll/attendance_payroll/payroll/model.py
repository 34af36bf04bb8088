from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, Optional, Sequence

from ..adjustments.model import Bonus, Deduction, LeaveRequest, SalaryAdvance
from ..attendance.model import AttendanceRecord
from ..core.enums import Weekday
from ..employees.model import Employee, FlatRateProfile
from ..schedules.model import WorkScheduleEntry


@dataclass(frozen=True)
class PayrollInputs:
    """Everything the engine reads, captured before computing.

    Building this snapshot is the only I/O a payroll run does; the
    computation itself is a pure function of it.
    """

    employee: Employee
    start_date: date
    end_date: date
    today: date
    attendance: Sequence[AttendanceRecord] = ()
    schedule_history: Sequence[WorkScheduleEntry] = ()
    approved_leaves: Sequence[LeaveRequest] = ()
    bonuses: Sequence[Bonus] = ()
    deductions: Sequence[Deduction] = ()
    outstanding_advances: Sequence[SalaryAdvance] = ()
    default_workdays: FrozenSet[Weekday] = field(default_factory=frozenset)
    flat_rate: Optional[FlatRateProfile] = None

    @property
    def workdays(self) -> FrozenSet[Weekday]:
        return self.employee.workdays or self.default_workdays


@dataclass(frozen=True)
class PayrollResult:
    employee_id: int
    start_date: date
    end_date: date
    base_salary: float
    overtime_pay: float
    bonuses_total: float
    lateness_deductions: float
    absence_deduction: float
    manual_deductions_total: float
    total_deductions: float
    net_salary: float
    total_worked_hours: float
    total_regular_hours: float
    total_overtime_hours: float
    total_late_minutes: float
    absent_days: int
    hourly_rate: float
    currencies: tuple[str, ...] = ()
    outstanding_advances: Sequence[SalaryAdvance] = ()
    # Advances are only deducted when salary is delivered.
    advances_total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "base_salary": self.base_salary,
            "overtime_pay": self.overtime_pay,
            "bonuses_total": self.bonuses_total,
            "lateness_deductions": self.lateness_deductions,
            "absence_deduction": self.absence_deduction,
            "manual_deductions_total": self.manual_deductions_total,
            "advances_total": self.advances_total,
            "total_deductions": self.total_deductions,
            "net_salary": self.net_salary,
            "total_worked_hours": self.total_worked_hours,
            "total_regular_hours": self.total_regular_hours,
            "total_overtime_hours": self.total_overtime_hours,
            "total_late_minutes": self.total_late_minutes,
            "absent_days": self.absent_days,
            "hourly_rate": self.hourly_rate,
            "currencies": list(self.currencies),
            "outstanding_advances": [
                {
                    "advance_id": a.advance_id,
                    "amount": a.amount,
                    "currency": a.currency,
                    "advance_date": a.advance_date.isoformat(),
                    "reason": a.reason,
                }
                for a in self.outstanding_advances
            ],
        }
