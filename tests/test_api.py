from __future__ import annotations

from datetime import date, time
from types import SimpleNamespace

import pytest

from attendance_payroll.core.enums import PaymentType
from attendance_payroll.main import create_app


@pytest.fixture
def client(monkeypatch, services):
    monkeypatch.setenv("APP_ENV", "testing")
    container = SimpleNamespace(
        attendance_service=services.attendance,
        payroll_service=services.payroll,
        delivery_service=services.delivery,
        termination_service=services.terminations,
    )
    app = create_app(container=container)
    return app.test_client()


def test_ingest_then_resolve_over_http(client, add_employee):
    emp = add_employee()

    res = client.post(
        "/api/punches",
        json={"source": "pull", "punches": [{"external_id": "31", "date": "2024-03-11", "time": "08:00"}]},
    )
    assert res.status_code == 200
    assert res.get_json()["data"] == {"consolidated": 0, "unmatched": 1, "skipped": 0}

    (bucket,) = client.get("/api/unmatched").get_json()["data"]
    assert bucket["punches"] == ["08:00:00"]

    res = client.post(f"/api/unmatched/{bucket['unmatched_id']}/resolve", json={"employee_id": emp.employee_id})
    assert res.status_code == 200
    assert res.get_json()["data"]["check_in"] == "08:00:00"

    res = client.post(f"/api/unmatched/{bucket['unmatched_id']}/resolve", json={"employee_id": emp.employee_id})
    assert res.status_code == 409


@pytest.mark.parametrize("body", [{"punches": "nope"}, {"source": "fax", "punches": []}, "text"])
def test_bad_punch_body_is_400(client, body):
    res = client.post("/api/punches", json=body)

    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_blocklist_endpoints(client):
    assert client.post("/api/blocked", json={"biometric_id": "90", "reason": "Lost badge"}).status_code == 201
    assert client.post("/api/blocked", json={"biometric_id": "90"}).status_code == 409
    assert [b["biometric_id"] for b in client.get("/api/blocked").get_json()["data"]] == ["90"]
    assert client.delete("/api/blocked/90").status_code == 200
    assert client.delete("/api/blocked/90").status_code == 404


def test_payroll_endpoint(client, store, add_employee):
    emp = add_employee(payment_type=PaymentType.HOURLY, hourly_rate=1000.0)
    store.attendance.put(emp.employee_id, date(2024, 3, 10), time(22, 0), time(2, 0))

    res = client.get(f"/api/payroll/{emp.employee_id}?start=2024-03-01&end=2024-03-31")

    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["net_salary"] == pytest.approx(4000)
    assert data["advances_total"] == 0


@pytest.mark.parametrize(
    "query, status",
    [
        ("?start=2024-03-01", 400),
        ("?start=2024-03-31&end=2024-03-01", 400),
        ("?start=01/03/2024&end=2024-03-31", 400),
    ],
)
def test_payroll_endpoint_validation(client, add_employee, query, status):
    emp = add_employee()

    assert client.get(f"/api/payroll/{emp.employee_id}{query}").status_code == status


def test_payroll_for_unknown_employee_is_404(client):
    res = client.get("/api/payroll/4242?start=2024-03-01&end=2024-03-31")

    assert res.status_code == 404
    assert "4242" in res.get_json()["message"]


def test_deliver_salary_endpoint(client, services, add_employee):
    emp = add_employee(payment_type=PaymentType.WEEKLY, weekly_salary=70_000.0)
    advance_id = services.adjustments.request_advance(
        employee_id=emp.employee_id, amount=10_000, advance_date=date(2024, 3, 2)
    )
    services.adjustments.approve_advance(advance_id)

    res = client.post(
        f"/api/payroll/{emp.employee_id}/deliver",
        json={"year": 2024, "month": 3, "week_number": 1, "advance_ids": [advance_id]},
    )

    assert res.status_code == 201
    assert res.get_json()["data"]["net_amount"] == pytest.approx(60_000)
    assert res.get_json()["data"]["payment_date"] == "2024-03-14"


def test_deliver_salary_rejects_bad_week(client, add_employee):
    emp = add_employee()

    res = client.post(f"/api/payroll/{emp.employee_id}/deliver", json={"year": 2024, "month": 3, "week_number": 9})

    assert res.status_code == 400


def test_terminate_endpoint(client, add_employee):
    emp = add_employee(biometric_id="55")

    res = client.post(
        f"/api/employees/{emp.employee_id}/terminate",
        json={"termination_date": "2024-03-14", "reason": "Resignation"},
    )
    assert res.status_code == 201
    assert res.get_json()["data"]["settlement"]["end_date"] == "2024-03-14"

    again = client.post(
        f"/api/employees/{emp.employee_id}/terminate",
        json={"termination_date": "2024-03-14", "reason": "Resignation"},
    )
    assert again.status_code == 409


def test_unexpected_failure_is_500(client, services, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(services.attendance, "list_blocked", broken)

    res = client.get("/api/blocked")

    assert res.status_code == 500
    assert res.get_json()["success"] is False
