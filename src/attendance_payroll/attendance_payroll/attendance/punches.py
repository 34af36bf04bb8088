"""Raw punch normalization and the daily merge rule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..core.exceptions import ValidationError
from .model import Punch

# Devices and importers disagree on field names.
_ID_KEYS = ("external_id", "biometric_id", "user_id", "UserID", "fingerprint_id")
_DATE_KEYS = ("date", "Date")
_TIME_KEYS = ("time", "Time")


def _first(raw: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and str(value).strip() != "":
            return value
    return None


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value).strip())


def _as_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return parse_clock_time(str(value))


def normalize_punch(raw: Mapping[str, Any]) -> Punch:
    """Turn one raw transport record into a ``Punch``.

    Accepts either separate date/time fields or a single
    ``timestamp="YYYY-MM-DD HH:MM[:SS]"``. Every punch is kept to minute
    precision so the same event converges whichever format it arrived in.
    """

    if not isinstance(raw, Mapping):
        raise ValidationError(f"Punch must be a mapping, got {type(raw).__name__}")

    external_id = _first(raw, _ID_KEYS)
    if external_id is None:
        raise ValidationError("Punch has no external id")

    try:
        timestamp = raw.get("timestamp")
        if isinstance(timestamp, str) and timestamp.strip():
            date_part, _, time_part = timestamp.strip().partition(" ")
            work_date = _as_date(date_part)
            punch_time = parse_clock_time(time_part) if time_part else time(0, 0)
        else:
            date_value = _first(raw, _DATE_KEYS)
            time_value = _first(raw, _TIME_KEYS)
            if date_value is None or time_value is None:
                raise ValidationError(f"Punch for id {external_id} is missing its date or time")
            work_date = _as_date(date_value)
            punch_time = _as_time(time_value)
    except ValueError as e:
        raise ValidationError(f"Punch for id {external_id} has an invalid date/time: {e}") from e

    punch_time = punch_time.replace(second=0, microsecond=0)

    return Punch(external_id=str(external_id).strip(), work_date=work_date, punch_time=punch_time)


@dataclass(frozen=True)
class MergedDay:
    check_in: time
    check_out: Optional[time]


def merge_punch_times(*groups: Iterable[time]) -> Optional[MergedDay]:
    """Union the given punch times into one day's check-in/check-out.

    Earliest time is the check-in; the latest is the check-out when more than
    one distinct time exists. The result depends only on the set of times, so
    replaying or reordering punches converges to the same row.
    """

    times = sorted({t for group in groups for t in group})
    if not times:
        return None
    return MergedDay(check_in=times[0], check_out=times[-1] if len(times) > 1 else None)
