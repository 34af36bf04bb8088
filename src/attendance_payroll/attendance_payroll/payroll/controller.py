from __future__ import annotations

from flask import Flask, request

from ..common.request_args import require_date_arg, require_int_arg, require_int_list
from ..common.responses import domain_error, ok, unexpected_error
from ..core.exceptions import DomainError
from ..container import Container
from ..payments.model import PayPeriod


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/<int:employee_id>", methods=["GET"], endpoint="api_compute_payroll")
    def api_compute_payroll(employee_id: int):
        try:
            start = require_date_arg(request.args, "start")
            end = require_date_arg(request.args, "end")
            result = container.payroll_service.compute(employee_id, start, end)
            return ok(result.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("computing payroll")

    @app.route("/api/payroll/<int:employee_id>/deliver", methods=["POST"], endpoint="api_deliver_salary")
    def api_deliver_salary(employee_id: int):
        try:
            data = request.get_json(silent=True) or {}
            period = PayPeriod(
                year=require_int_arg(data, "year"),
                month=require_int_arg(data, "month"),
                week_number=require_int_arg(data, "week_number") if data.get("week_number") is not None else None,
            )
            payment = container.delivery_service.deliver_salary(
                employee_id,
                period,
                require_int_list(data, "advance_ids"),
            )
            return ok(payment.to_dict(), 201)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("delivering salary")
