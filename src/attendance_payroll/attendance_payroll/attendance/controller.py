from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.request_args import require_int_arg
from ..common.responses import domain_error, fail, ok, unexpected_error
from ..core.enums import PunchSource
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .model import AttendanceRecord, BlockedIdentifier, UnmatchedPunch


def _record_json(rec: Optional[AttendanceRecord]) -> Optional[dict]:
    if rec is None:
        return None
    return {
        "attendance_id": rec.attendance_id,
        "employee_id": rec.employee_id,
        "work_date": rec.work_date.isoformat(),
        "check_in": rec.check_in.strftime("%H:%M:%S"),
        "check_out": rec.check_out.strftime("%H:%M:%S") if rec.check_out else None,
        "source": rec.source,
        "is_synced_to_cloud": rec.is_synced_to_cloud,
    }


def _unmatched_json(u: UnmatchedPunch) -> dict:
    return {
        "unmatched_id": u.unmatched_id,
        "biometric_id": u.biometric_id,
        "work_date": u.work_date.isoformat(),
        "punches": [t.strftime("%H:%M:%S") for t in u.sorted_punches],
    }


def _blocked_json(b: BlockedIdentifier) -> dict:
    return {
        "biometric_id": b.biometric_id,
        "reason": b.reason,
        "created_at": b.created_at.isoformat() if b.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/punches", methods=["POST"], endpoint="api_ingest_punches")
    def api_ingest_punches():
        """Accept a punch batch: a JSON list, or {"source": ..., "punches": [...]}."""

        try:
            data = request.get_json(silent=True)
            source = PunchSource.PUSH
            if isinstance(data, dict):
                try:
                    source = PunchSource(data.get("source") or PunchSource.PUSH.value)
                except ValueError:
                    raise ValidationError(f"Unknown punch source {data.get('source')!r}")
                data = data.get("punches")
            if not isinstance(data, list):
                raise ValidationError("Body must be a JSON list of punches")

            result = container.attendance_service.ingest(data, source=source)
            return ok(
                {"consolidated": result.consolidated, "unmatched": result.unmatched, "skipped": result.skipped}
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("ingesting punches")

    @app.route("/api/unmatched", methods=["GET"], endpoint="api_list_unmatched")
    def api_list_unmatched():
        try:
            return ok([_unmatched_json(u) for u in container.attendance_service.list_unmatched()])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("listing unmatched punches")

    @app.route("/api/unmatched/<int:unmatched_id>/resolve", methods=["POST"], endpoint="api_resolve_unmatched")
    def api_resolve_unmatched(unmatched_id: int):
        try:
            data = request.get_json(silent=True) or {}
            employee_id = require_int_arg(data, "employee_id")
            record = container.attendance_service.resolve_unmatched(unmatched_id, employee_id)
            return ok(_record_json(record))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("resolving unmatched punches")

    @app.route("/api/blocked", methods=["GET"], endpoint="api_list_blocked")
    def api_list_blocked():
        try:
            return ok([_blocked_json(b) for b in container.attendance_service.list_blocked()])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("listing blocked ids")

    @app.route("/api/blocked", methods=["POST"], endpoint="api_block_id")
    def api_block_id():
        try:
            data = request.get_json(silent=True) or {}
            biometric_id = str(data.get("biometric_id") or "")
            added = container.attendance_service.block(biometric_id, reason=data.get("reason"))
            if not added:
                return fail(f"Biometric id {biometric_id.strip()} is already blocked", 409)
            return ok({"biometric_id": biometric_id.strip()}, 201)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("blocking an id")

    @app.route("/api/blocked/<biometric_id>", methods=["DELETE"], endpoint="api_unblock_id")
    def api_unblock_id(biometric_id: str):
        try:
            container.attendance_service.unblock(biometric_id)
            return ok()
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("unblocking an id")
