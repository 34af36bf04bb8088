from __future__ import annotations

import logging
from typing import Any

from flask import jsonify

from ..core.exceptions import ConflictError, DomainError, NotFoundError, TransactionError, ValidationError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (TransactionError, 500),
)


def ok(payload: Any = None, status: int = 200):
    body = {"success": True}
    if payload is not None:
        body["data"] = payload
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def domain_error(e: DomainError):
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            return fail(str(e), status)
    return fail(str(e), 400)


def unexpected_error(action: str):
    logger.exception("Unexpected failure while %s", action)
    return fail(f"Internal error while {action}", 500)
