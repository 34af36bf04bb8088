from __future__ import annotations

from datetime import date, time

import pytest

from attendance_payroll.core.enums import PunchSource
from attendance_payroll.core.exceptions import ConflictError, NotFoundError


def _bucket_id(services, biometric_id):
    (bucket,) = [b for b in services.attendance.list_unmatched() if b.biometric_id == biometric_id]
    return bucket.unmatched_id


def test_resolving_bucket_creates_row_and_assigns_id(store, services, add_employee, make_punches):
    emp = add_employee()
    services.attendance.ingest(make_punches("999", "2024-03-11", "17:30", "08:00"))

    record = services.attendance.resolve_unmatched(_bucket_id(services, "999"), emp.employee_id)

    assert (record.employee_id, record.work_date) == (emp.employee_id, date(2024, 3, 11))
    assert (record.check_in, record.check_out) == (time(8, 0), time(17, 30))
    assert record.source == PunchSource.UNMATCHED_RESOLUTION.value
    assert services.attendance.list_unmatched() == []
    assert store.employees.get_by_id(emp.employee_id).biometric_id == "999"


def test_later_punches_for_resolved_id_go_straight_to_employee(store, services, add_employee, make_punches):
    emp = add_employee()
    services.attendance.ingest(make_punches("999", "2024-03-11", "08:00"))
    services.attendance.resolve_unmatched(_bucket_id(services, "999"), emp.employee_id)

    result = services.attendance.ingest(make_punches("999", "2024-03-12", "08:10", "16:00"))

    assert (result.consolidated, result.unmatched) == (1, 0)
    rec = store.attendance.get_for_employee_and_date(emp.employee_id, date(2024, 3, 12))
    assert (rec.check_in, rec.check_out) == (time(8, 10), time(16, 0))


def test_resolution_merges_with_existing_row(store, services, add_employee, make_punches):
    emp = add_employee()
    store.attendance.put(emp.employee_id, date(2024, 3, 11), time(7, 50))
    services.attendance.ingest(make_punches("999", "2024-03-11", "08:00", "17:30"))

    record = services.attendance.resolve_unmatched(_bucket_id(services, "999"), emp.employee_id)

    assert (record.check_in, record.check_out) == (time(7, 50), time(17, 30))


def test_resolving_twice_is_a_conflict(services, add_employee, make_punches):
    emp = add_employee()
    services.attendance.ingest(make_punches("999", "2024-03-11", "08:00"))
    bucket_id = _bucket_id(services, "999")
    services.attendance.resolve_unmatched(bucket_id, emp.employee_id)

    with pytest.raises(ConflictError):
        services.attendance.resolve_unmatched(bucket_id, emp.employee_id)


def test_id_owned_by_another_employee_is_a_conflict_and_nothing_changes(store, services, add_employee, make_punches):
    target = add_employee()
    services.attendance.ingest(make_punches("999", "2024-03-11", "08:00"))
    bucket_id = _bucket_id(services, "999")
    add_employee(biometric_id="999")

    with pytest.raises(ConflictError) as exc:
        services.attendance.resolve_unmatched(bucket_id, target.employee_id)

    assert "999" in str(exc.value)
    assert store.employees.get_by_id(target.employee_id).biometric_id is None
    assert store.attendance.all() == []
    assert [b.unmatched_id for b in services.attendance.list_unmatched()] == [bucket_id]


def test_unknown_employee_is_not_found_and_bucket_survives(store, services, make_punches):
    services.attendance.ingest(make_punches("999", "2024-03-11", "08:00"))
    bucket_id = _bucket_id(services, "999")

    with pytest.raises(NotFoundError) as exc:
        services.attendance.resolve_unmatched(bucket_id, 4242)

    assert "4242" in str(exc.value)
    assert len(services.attendance.list_unmatched()) == 1


def test_blocklist_management(services):
    assert services.attendance.block("555", reason="Terminated") is True
    assert services.attendance.block("555") is False
    assert [b.biometric_id for b in services.attendance.list_blocked()] == ["555"]

    services.attendance.unblock("555")

    assert services.attendance.list_blocked() == []
    with pytest.raises(NotFoundError):
        services.attendance.unblock("555")
