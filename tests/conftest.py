from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from attendance_payroll.adjustments.model import Bonus, Deduction, LeaveRequest, SalaryAdvance
from attendance_payroll.adjustments.service import AdjustmentService
from attendance_payroll.attendance.model import AttendanceRecord, BlockedIdentifier, UnmatchedPunch
from attendance_payroll.attendance.service import AttendanceService
from attendance_payroll.core.enums import AdvanceStatus, EmployeeStatus, PaymentType, RequestStatus
from attendance_payroll.employees.model import Employee, FlatRateProfile
from attendance_payroll.employees.service import EmployeeService
from attendance_payroll.payments.model import PaymentRecord
from attendance_payroll.payments.service import SalaryDeliveryService
from attendance_payroll.payroll.service import PayrollService
from attendance_payroll.schedules.model import WorkScheduleEntry
from attendance_payroll.schedules.service import ScheduleHistoryService
from attendance_payroll.settings.service import SettingsService
from attendance_payroll.terminations.model import TerminationRecord
from attendance_payroll.terminations.service import TerminationService


class InMemoryEmployees:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, Employee] = {}
        self._flat: dict[int, FlatRateProfile] = {}

    def get_by_id(self, employee_id):
        return self._rows.get(int(employee_id))

    def get_by_biometric_id(self, biometric_id):
        for e in self._rows.values():
            if e.biometric_id and e.biometric_id.strip() == str(biometric_id).strip():
                return e
        return None

    def biometric_id_map(self):
        return {e.biometric_id.strip(): e.employee_id for e in self._rows.values() if e.biometric_id}

    def list_all(self):
        return sorted(self._rows.values(), key=lambda e: e.employee_id)

    def create(self, employee):
        eid = self._next_id
        self._next_id += 1
        self._rows[eid] = replace(employee, employee_id=eid)
        return eid

    def update(self, employee):
        if employee.employee_id not in self._rows:
            return False
        self._rows[employee.employee_id] = employee
        return True

    def set_biometric_id(self, employee_id, biometric_id):
        return self.update(replace(self._rows[int(employee_id)], biometric_id=biometric_id))

    def set_status(self, employee_id, status):
        return self.update(replace(self._rows[int(employee_id)], status=status))

    def delete(self, employee_id):
        return self._rows.pop(int(employee_id), None) is not None

    def get_flat_rate_profile(self, employee_id):
        return self._flat.get(int(employee_id))

    def put_flat_rate_profile(self, profile: FlatRateProfile):
        self._flat[profile.employee_id] = profile


class InMemorySchedules:
    def __init__(self):
        self._next_id = 1
        self._entries: list[WorkScheduleEntry] = []

    def append(self, *, employee_id, hours, effective_start_date):
        entry = WorkScheduleEntry(
            entry_id=self._next_id,
            employee_id=int(employee_id),
            hours=float(hours),
            effective_start_date=effective_start_date,
        )
        self._next_id += 1
        self._entries.append(entry)
        return entry.entry_id

    def list_for_employee(self, employee_id):
        items = [e for e in self._entries if e.employee_id == int(employee_id)]
        return sorted(items, key=lambda e: (e.effective_start_date, e.entry_id))


class InMemoryAttendance:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[tuple[int, date], AttendanceRecord] = {}
        self.writes = 0

    def get_for_employee_and_date(self, employee_id, work_date, *, for_update=False):
        return self._rows.get((int(employee_id), work_date))

    def insert(self, *, employee_id, work_date, check_in, check_out, source=None):
        key = (int(employee_id), work_date)
        assert key not in self._rows, "duplicate (employee_id, work_date)"
        rec = AttendanceRecord(
            attendance_id=self._next_id,
            employee_id=int(employee_id),
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            source=source,
        )
        self._next_id += 1
        self._rows[key] = rec
        self.writes += 1
        return rec.attendance_id

    def update_punches(self, *, attendance_id, check_in, check_out):
        for key, rec in self._rows.items():
            if rec.attendance_id == attendance_id:
                self._rows[key] = replace(rec, check_in=check_in, check_out=check_out, is_synced_to_cloud=False)
                self.writes += 1
                return True
        return False

    def list_range(self, *, employee_id, start_date, end_date):
        items = [
            r for (eid, d), r in self._rows.items() if eid == int(employee_id) and start_date <= d <= end_date
        ]
        return sorted(items, key=lambda r: r.work_date)

    def mark_paid(self, *, employee_id, start_date, end_date):
        count = 0
        for key, rec in self._rows.items():
            if rec.employee_id == int(employee_id) and start_date <= rec.work_date <= end_date and not rec.is_paid:
                self._rows[key] = replace(rec, is_paid=True)
                count += 1
        return count

    def list_unsynced(self, *, limit=500):
        items = [r for r in self._rows.values() if not r.is_synced_to_cloud]
        return sorted(items, key=lambda r: r.attendance_id)[:limit]

    def mark_synced(self, attendance_ids):
        ids = {int(i) for i in attendance_ids}
        count = 0
        for key, rec in self._rows.items():
            if rec.attendance_id in ids:
                self._rows[key] = replace(rec, is_synced_to_cloud=True)
                count += 1
        return count

    # test helpers
    def all(self) -> list[AttendanceRecord]:
        return sorted(self._rows.values(), key=lambda r: (r.employee_id, r.work_date))

    def put(self, employee_id: int, work_date: date, check_in: time, check_out: Optional[time] = None) -> None:
        self.insert(employee_id=employee_id, work_date=work_date, check_in=check_in, check_out=check_out, source="manual")


class InMemoryUnmatched:
    def __init__(self):
        self._next_id = 1
        self._buckets: dict[tuple[str, date], UnmatchedPunch] = {}

    def get(self, unmatched_id, *, for_update=False):
        for bucket in self._buckets.values():
            if bucket.unmatched_id == int(unmatched_id):
                return bucket
        return None

    def add_punches(self, *, biometric_id, work_date, punches):
        key = (biometric_id, work_date)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = UnmatchedPunch(unmatched_id=self._next_id, biometric_id=biometric_id, work_date=work_date)
            self._next_id += 1
        self._buckets[key] = replace(bucket, punches=bucket.punches | frozenset(punches))
        return bucket.unmatched_id

    def delete(self, unmatched_id):
        for key, bucket in list(self._buckets.items()):
            if bucket.unmatched_id == int(unmatched_id):
                del self._buckets[key]
                return True
        return False

    def list_all(self):
        return sorted(self._buckets.values(), key=lambda b: (b.work_date, b.biometric_id))


class InMemoryBlocklist:
    def __init__(self):
        self._rows: dict[str, BlockedIdentifier] = {}

    def blocked_ids(self):
        return frozenset(self._rows)

    def add(self, *, biometric_id, reason=None):
        if biometric_id in self._rows:
            return False
        self._rows[biometric_id] = BlockedIdentifier(
            biometric_id=biometric_id, reason=reason, created_at=datetime(2024, 1, 1, 0, 0)
        )
        return True

    def remove(self, biometric_id):
        return self._rows.pop(biometric_id, None) is not None

    def list_all(self):
        return sorted(self._rows.values(), key=lambda b: b.biometric_id)


class InMemoryLeaves:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, LeaveRequest] = {}

    def create(self, *, employee_id, leave_type, start_date, end_date, deduct_from_salary=False, reason=None):
        rid = self._next_id
        self._next_id += 1
        self._rows[rid] = LeaveRequest(
            request_id=rid,
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            status=RequestStatus.PENDING,
            deduct_from_salary=deduct_from_salary,
            reason=reason,
        )
        return rid

    def get(self, request_id):
        return self._rows.get(int(request_id))

    def decide(self, *, request_id, status, status_reason=None):
        req = self._rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self._rows[req.request_id] = replace(req, status=status, status_reason=status_reason)
        return True

    def list_approved_overlapping(self, *, employee_id, start_date, end_date):
        return [
            r
            for r in self._rows.values()
            if r.employee_id == int(employee_id)
            and r.status == RequestStatus.APPROVED
            and r.start_date <= end_date
            and r.end_date >= start_date
        ]


class InMemoryAdvances:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, SalaryAdvance] = {}

    def create(self, *, employee_id, amount, currency, advance_date, reason=None):
        aid = self._next_id
        self._next_id += 1
        self._rows[aid] = SalaryAdvance(
            advance_id=aid,
            employee_id=int(employee_id),
            amount=float(amount),
            currency=currency,
            advance_date=advance_date,
            status=AdvanceStatus.PENDING,
            reason=reason,
        )
        return aid

    def get(self, advance_id):
        return self._rows.get(int(advance_id))

    def set_status(self, *, advance_id, status, status_reason=None):
        adv = self._rows.get(int(advance_id))
        if not adv:
            return False
        self._rows[adv.advance_id] = replace(adv, status=status, status_reason=status_reason or adv.status_reason)
        return True

    def list_by_status(self, *, employee_id, status):
        return [a for a in self._rows.values() if a.employee_id == int(employee_id) and a.status == status]


class InMemoryLedger:
    def __init__(self, entry_type):
        self._entry_type = entry_type
        self._next_id = 1
        self._rows: list[Any] = []

    def create(self, *, employee_id, amount, currency, entry_date, reason=None):
        eid = self._next_id
        self._next_id += 1
        self._rows.append(self._entry_type(eid, int(employee_id), float(amount), currency, entry_date, reason))
        return eid

    def list_range(self, *, employee_id, start_date, end_date):
        return [r for r in self._rows if r.employee_id == int(employee_id) and start_date <= r.entry_date <= end_date]


class InMemoryPayments:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, PaymentRecord] = {}

    def create(self, **fields):
        pid = self._next_id
        self._next_id += 1
        self._rows[pid] = PaymentRecord(payment_id=pid, **fields)
        return pid

    def get(self, payment_id):
        return self._rows.get(int(payment_id))

    def list_for_employee(self, employee_id):
        return [p for p in self._rows.values() if p.employee_id == int(employee_id)]


class InMemoryTerminations:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, TerminationRecord] = {}

    def create(self, *, employee_id, termination_date, reason, notes, settlement):
        tid = self._next_id
        self._next_id += 1
        self._rows[tid] = TerminationRecord(
            termination_id=tid,
            employee_id=int(employee_id),
            termination_date=termination_date,
            reason=reason,
            notes=notes,
            settlement=settlement,
        )
        return tid

    def get(self, termination_id):
        return self._rows.get(int(termination_id))

    def list_all(self):
        return list(self._rows.values())


class InMemorySettings:
    def __init__(self):
        self._values: dict[str, Any] = {}

    def get(self, key):
        return copy.deepcopy(self._values.get(key))

    def put(self, key, value):
        self._values[key] = copy.deepcopy(value)


class InMemoryStore:
    """All fake tables plus a transaction that restores them on failure."""

    def __init__(self):
        self.employees = InMemoryEmployees()
        self.schedules = InMemorySchedules()
        self.attendance = InMemoryAttendance()
        self.unmatched = InMemoryUnmatched()
        self.blocklist = InMemoryBlocklist()
        self.leaves = InMemoryLeaves()
        self.advances = InMemoryAdvances()
        self.bonuses = InMemoryLedger(Bonus)
        self.deductions = InMemoryLedger(Deduction)
        self.payments = InMemoryPayments()
        self.terminations = InMemoryTerminations()
        self.settings = InMemorySettings()
        self._depth = 0
        self.commits = 0
        self.rollbacks = 0

    def _tables(self):
        return [v for k, v in vars(self).items() if not k.startswith("_") and hasattr(v, "__dict__")]

    @contextmanager
    def transaction(self):
        if self._depth:
            yield
            return

        snapshot = [(t, copy.deepcopy(t.__dict__)) for t in self._tables()]
        self._depth += 1
        try:
            yield
            self.commits += 1
        except Exception:
            for table, state in snapshot:
                table.__dict__.clear()
                table.__dict__.update(state)
            self.rollbacks += 1
            raise
        finally:
            self._depth -= 1


@pytest.fixture
def fixed_today() -> date:
    # A Thursday
    return date(2024, 3, 14)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def add_employee(store):
    """Insert an employee straight into the fake directory (no schedule history)."""

    def _add(**overrides) -> Employee:
        fields = dict(
            employee_id=0,
            employee_code=f"E{store.employees._next_id:03d}",
            name="Test Employee",
            hire_date=date(2023, 1, 1),
            payment_type=PaymentType.MONTHLY,
            status=EmployeeStatus.ACTIVE,
        )
        fields.update(overrides)
        eid = store.employees.create(Employee(**fields))
        return store.employees.get_by_id(eid)

    return _add


@pytest.fixture
def services(store, fixed_today) -> SimpleNamespace:
    def clock():
        return fixed_today

    settings = SettingsService(store.settings)
    schedules = ScheduleHistoryService(store.schedules, store.employees)
    payroll = PayrollService(
        store.employees,
        store.attendance,
        store.schedules,
        store.leaves,
        store.advances,
        store.bonuses,
        store.deductions,
        settings,
        clock=clock,
    )
    return SimpleNamespace(
        settings=settings,
        schedules=schedules,
        employees=EmployeeService(store.employees, schedules, store, clock=clock),
        attendance=AttendanceService(store.attendance, store.unmatched, store.blocklist, store.employees, store),
        adjustments=AdjustmentService(store.leaves, store.advances, store.bonuses, store.deductions, store.employees),
        payroll=payroll,
        delivery=SalaryDeliveryService(
            store.payments, store.employees, store.attendance, store.advances, payroll, store, clock=clock
        ),
        terminations=TerminationService(store.terminations, store.employees, store.blocklist, payroll, store),
    )


def punches(external_id: str, day: str, *times: str) -> list[dict]:
    return [{"external_id": external_id, "date": day, "time": t} for t in times]


@pytest.fixture
def make_punches():
    return punches


def approve_leave(services, **kwargs) -> int:
    rid = services.adjustments.submit_leave(**kwargs)
    services.adjustments.approve_leave(rid)
    return rid


@pytest.fixture
def approved_leave(services):
    def _approve(**kwargs) -> int:
        return approve_leave(services, **kwargs)

    return _approve


