from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord, BlockedIdentifier, UnmatchedPunch


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(
        self,
        employee_id: int,
        work_date: date,
        *,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        """``for_update`` locks the row until the enclosing transaction ends."""

        raise NotImplementedError

    def insert(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: time,
        check_out: Optional[time],
        source: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_punches(self, *, attendance_id: int, check_in: time, check_out: Optional[time]) -> bool:
        """Rewrite check-in/out and clear the synced-to-cloud flag."""

        raise NotImplementedError

    def list_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def mark_paid(self, *, employee_id: int, start_date: date, end_date: date) -> int:
        raise NotImplementedError

    def list_unsynced(self, *, limit: int = 500) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def mark_synced(self, attendance_ids: Sequence[int]) -> int:
        raise NotImplementedError


class UnmatchedPunchRepository(Protocol):
    def get(self, unmatched_id: int, *, for_update: bool = False) -> Optional[UnmatchedPunch]:
        raise NotImplementedError

    def add_punches(self, *, biometric_id: str, work_date: date, punches: Iterable[time]) -> int:
        """Union ``punches`` into the (biometric_id, work_date) bucket, creating it if needed."""

        raise NotImplementedError

    def delete(self, unmatched_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[UnmatchedPunch]:
        raise NotImplementedError


class BlocklistRepository(Protocol):
    def blocked_ids(self) -> frozenset[str]:
        raise NotImplementedError

    def add(self, *, biometric_id: str, reason: Optional[str] = None) -> bool:
        """Insert unless already blocked; returns whether a row was added."""

        raise NotImplementedError

    def remove(self, biometric_id: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[BlockedIdentifier]:
        raise NotImplementedError
