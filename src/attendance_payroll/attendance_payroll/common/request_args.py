from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_date_arg(args: Mapping[str, Any], name: str) -> date:
    value = (args.get(name) or "").strip()
    if not value:
        raise ValidationError(f"Missing '{name}' (YYYY-MM-DD)")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"'{name}' must be a date in YYYY-MM-DD format, got {value!r}")


def require_int_arg(args: Mapping[str, Any], name: str) -> int:
    value = args.get(name)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be an integer, got {value!r}")


def require_int_list(args: Mapping[str, Any], name: str) -> list[int]:
    values = args.get(name) or []
    if not isinstance(values, list):
        raise ValidationError(f"'{name}' must be a list of integers")
    try:
        return [int(v) for v in values]
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a list of integers, got {values!r}")
