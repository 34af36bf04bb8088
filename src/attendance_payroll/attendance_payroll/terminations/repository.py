from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Protocol, Sequence

from .model import TerminationRecord


class TerminationRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        termination_date: date,
        reason: str,
        notes: Optional[str],
        settlement: Dict[str, Any],
    ) -> int:
        raise NotImplementedError

    def get(self, termination_id: int) -> Optional[TerminationRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[TerminationRecord]:
        raise NotImplementedError
