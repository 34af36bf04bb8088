from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import INGEST_RETRY_ATTEMPTS
from ..core.enums import PunchSource
from ..core.exceptions import ConflictError, NotFoundError, TransactionError, ValidationError
from ..core.transactions import TransactionManager
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord, BlockedIdentifier, IngestResult, Punch, UnmatchedPunch
from .punches import merge_punch_times, normalize_punch
from .repository import AttendanceRepository, BlocklistRepository, UnmatchedPunchRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Consolidates raw punch batches into one attendance row per employee and day.

    Batches may arrive concurrently, repeatedly and out of order from push
    devices, pull-sync, file imports or manual entry. Every write goes through
    ``merge_punch_times`` so the stored rows converge regardless.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        unmatched: UnmatchedPunchRepository,
        blocklist: BlocklistRepository,
        employees: EmployeeRepository,
        tx: TransactionManager,
        *,
        retry_attempts: int = INGEST_RETRY_ATTEMPTS,
    ):
        self._attendance = attendance
        self._unmatched = unmatched
        self._blocklist = blocklist
        self._employees = employees
        self._tx = tx
        self._retry_attempts = max(1, int(retry_attempts))

    def ingest(self, batch: Iterable[Mapping[str, Any]], *, source: PunchSource = PunchSource.PUSH) -> IngestResult:
        punches: list[Punch] = []
        skipped = 0
        for index, raw in enumerate(batch):
            try:
                punches.append(normalize_punch(raw))
            except ValidationError as e:
                logger.warning("Skipping punch #%d: %s", index, e)
                skipped += 1

        logger.info("Processing %d punch(es) from %s (%d malformed)", len(punches), source.value, skipped)

        for attempt in range(1, self._retry_attempts + 1):
            try:
                with self._tx.transaction():
                    result = self._consolidate(punches, source=source)
                break
            except TransactionError:
                if attempt == self._retry_attempts:
                    raise
                logger.warning("Consolidation attempt %d/%d failed, retrying", attempt, self._retry_attempts)

        return IngestResult(
            consolidated=result.consolidated,
            unmatched=result.unmatched,
            skipped=skipped + result.skipped,
        )

    def _consolidate(self, punches: Sequence[Punch], *, source: PunchSource) -> IngestResult:
        # Read inside the transaction so a concurrent termination's block is honoured.
        blocked = self._blocklist.blocked_ids()
        id_map = self._employees.biometric_id_map()

        daily: dict[tuple[int, date], set[time]] = {}
        unmatched: dict[tuple[str, date], set[time]] = {}
        blocked_count = 0

        for punch in punches:
            if punch.external_id in blocked:
                logger.info("Dropping punch for blocked biometric id %s", punch.external_id)
                blocked_count += 1
                continue

            employee_id = id_map.get(punch.external_id)
            if employee_id is None:
                unmatched.setdefault((punch.external_id, punch.work_date), set()).add(punch.punch_time)
            else:
                daily.setdefault((employee_id, punch.work_date), set()).add(punch.punch_time)

        for (employee_id, work_date), times in daily.items():
            self._merge_into_day(employee_id, work_date, times, source=source.value)

        for (biometric_id, work_date), times in unmatched.items():
            logger.warning("Unmatched biometric id %s on %s, stored for resolution", biometric_id, work_date)
            self._unmatched.add_punches(biometric_id=biometric_id, work_date=work_date, punches=times)

        return IngestResult(consolidated=len(daily), unmatched=len(unmatched), skipped=blocked_count)

    def _merge_into_day(self, employee_id: int, work_date: date, times: Iterable[time], *, source: str) -> None:
        existing = self._attendance.get_for_employee_and_date(employee_id, work_date, for_update=True)
        merged = merge_punch_times(existing.punch_times if existing else (), times)
        if merged is None:
            return

        if existing is None:
            self._attendance.insert(
                employee_id=employee_id,
                work_date=work_date,
                check_in=merged.check_in,
                check_out=merged.check_out,
                source=source,
            )
        elif (merged.check_in, merged.check_out) != (existing.check_in, existing.check_out):
            self._attendance.update_punches(
                attendance_id=existing.attendance_id,
                check_in=merged.check_in,
                check_out=merged.check_out,
            )

    def resolve_unmatched(self, unmatched_id: int, employee_id: int) -> AttendanceRecord:
        """Assign an unmatched bucket's biometric id to an employee and replay its punches."""

        with self._tx.transaction():
            bucket = self._unmatched.get(int(unmatched_id), for_update=True)
            if not bucket:
                raise ConflictError(f"Unmatched record {unmatched_id} no longer exists (already resolved?)")

            employee = self._employees.get_by_id(int(employee_id))
            if not employee:
                raise NotFoundError(f"Employee {employee_id} not found")

            holder = self._employees.get_by_biometric_id(bucket.biometric_id)
            if holder and holder.employee_id != employee.employee_id:
                raise ConflictError(
                    f"Biometric id {bucket.biometric_id} already belongs to employee {holder.employee_id}"
                )

            self._employees.set_biometric_id(employee.employee_id, bucket.biometric_id)
            self._merge_into_day(
                employee.employee_id,
                bucket.work_date,
                bucket.punches,
                source=PunchSource.UNMATCHED_RESOLUTION.value,
            )
            if not self._unmatched.delete(bucket.unmatched_id):
                raise ConflictError(f"Unmatched record {unmatched_id} was resolved concurrently")

            record = self._attendance.get_for_employee_and_date(employee.employee_id, bucket.work_date)

        logger.info(
            "Resolved unmatched record %s: biometric id %s -> employee %s",
            unmatched_id, bucket.biometric_id, employee.employee_id,
        )
        return record

    def list_unmatched(self) -> Sequence[UnmatchedPunch]:
        return self._unmatched.list_all()

    def block(self, biometric_id: str, *, reason: Optional[str] = None) -> bool:
        biometric_id = require_non_empty(biometric_id, "Biometric id")
        added = self._blocklist.add(biometric_id=biometric_id, reason=reason)
        if added:
            logger.info("Blocked biometric id %s (%s)", biometric_id, reason or "no reason")
        return added

    def unblock(self, biometric_id: str) -> None:
        if not self._blocklist.remove(biometric_id):
            raise NotFoundError(f"Biometric id {biometric_id} is not blocked")

    def list_blocked(self) -> Sequence[BlockedIdentifier]:
        return self._blocklist.list_all()

    def list_unsynced(self, *, limit: int = 500) -> Sequence[AttendanceRecord]:
        return self._attendance.list_unsynced(limit=limit)

    def mark_synced(self, attendance_ids: Sequence[int]) -> int:
        return self._attendance.mark_synced(attendance_ids)

    def get_day(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), work_date)
