"""Point-in-time lookups over append-only, effective-dated settings.

Any setting that changes over time is kept as a list of (start date, value)
entries that are never edited. The value in force on a date is the one from the
latest entry starting on or before that date.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, Optional, TypeVar

E = TypeVar("E")
V = TypeVar("V")


def effective_entry(entries: Iterable[E], on: date, *, start_of: Callable[[E], date]) -> Optional[E]:
    """Latest entry with start <= ``on``; later entries win ties (append order)."""

    best: Optional[E] = None
    for entry in entries:
        start = start_of(entry)
        if start > on:
            continue
        if best is None or start >= start_of(best):
            best = entry
    return best


def effective_value(
    entries: Iterable[E],
    on: date,
    *,
    start_of: Callable[[E], date],
    value_of: Callable[[E], V],
    fallback: V,
) -> V:
    entry = effective_entry(entries, on, start_of=start_of)
    return fallback if entry is None else value_of(entry)
