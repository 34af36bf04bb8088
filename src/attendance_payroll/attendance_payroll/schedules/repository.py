from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import WorkScheduleEntry


class ScheduleHistoryRepository(Protocol):
    """Append-only store: there is intentionally no update or delete."""

    def append(self, *, employee_id: int, hours: float, effective_start_date: date) -> int:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[WorkScheduleEntry]:
        """All entries for the employee, oldest first."""

        raise NotImplementedError
