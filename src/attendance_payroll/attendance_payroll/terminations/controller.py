from __future__ import annotations

from flask import Flask, request

from ..common.request_args import require_date_arg
from ..common.responses import domain_error, ok, unexpected_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/<int:employee_id>/terminate", methods=["POST"], endpoint="api_terminate_employee")
    def api_terminate_employee(employee_id: int):
        try:
            data = request.get_json(silent=True) or {}
            record = container.termination_service.terminate(
                employee_id,
                require_date_arg(data, "termination_date"),
                str(data.get("reason") or ""),
                notes=data.get("notes"),
            )
            return ok(record.to_dict(), 201)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("terminating an employee")
