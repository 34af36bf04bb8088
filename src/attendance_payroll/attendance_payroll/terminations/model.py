from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TerminationRecord:
    """A termination and the final settlement computed for it.

    ``settlement`` is the payroll result as it stood on the termination date
    and is never recomputed.
    """

    termination_id: int
    employee_id: int
    termination_date: date
    reason: str
    settlement: Dict[str, Any]
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "termination_id": self.termination_id,
            "employee_id": self.employee_id,
            "termination_date": self.termination_date.isoformat(),
            "reason": self.reason,
            "notes": self.notes,
            "settlement": self.settlement,
        }
