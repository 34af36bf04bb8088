from __future__ import annotations

from datetime import date
from enum import Enum, IntEnum


class PaymentType(str, Enum):
    """How an employee's base salary is expressed."""

    HOURLY = "hourly"
    MONTHLY = "monthly"
    WEEKLY = "weekly"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"


class Weekday(IntEnum):
    """Day of week as stored in workday sets (Sunday first)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        # date.weekday() is Monday=0
        return cls((day.weekday() + 1) % 7)


class PunchSource(str, Enum):
    """Channel a punch batch arrived through."""

    PUSH = "push"
    PULL = "pull"
    FILE_IMPORT = "file_import"
    MANUAL = "manual"
    UNMATCHED_RESOLUTION = "unmatched_resolution"


class RequestStatus(str, Enum):
    """Approval workflow status for leave requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AdvanceStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    PAID = "Paid"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    EMERGENCY = "Emergency"
    UNPAID = "Unpaid"


class FlatRatePeriod(str, Enum):
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
