from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: the consolidated attendance of one employee on one date.

    ``check_out`` may be earlier than ``check_in`` on the same date, which
    means the shift ran past midnight.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: time
    check_out: Optional[time] = None
    source: Optional[str] = None
    is_synced_to_cloud: bool = False
    is_paid: bool = False

    @property
    def punch_times(self) -> FrozenSet[time]:
        times = {self.check_in}
        if self.check_out is not None:
            times.add(self.check_out)
        return frozenset(times)


@dataclass(frozen=True)
class Punch:
    """One normalized check event."""

    external_id: str
    work_date: date
    punch_time: time


@dataclass(frozen=True)
class UnmatchedPunch:
    """Punches for a biometric id that no employee owns yet."""

    unmatched_id: int
    biometric_id: str
    work_date: date
    punches: FrozenSet[time] = field(default_factory=frozenset)

    @property
    def sorted_punches(self) -> list[time]:
        return sorted(self.punches)


@dataclass(frozen=True)
class BlockedIdentifier:
    biometric_id: str
    reason: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class IngestResult:
    consolidated: int
    unmatched: int
    skipped: int
