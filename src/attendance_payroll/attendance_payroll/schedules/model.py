from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class WorkScheduleEntry:
    """One effective-dated value of an employee's agreed daily hours."""

    entry_id: int
    employee_id: int
    hours: float
    effective_start_date: date
