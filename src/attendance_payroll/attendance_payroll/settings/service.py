from __future__ import annotations

import logging
from typing import FrozenSet, Iterable

from ..core.constants import DEFAULT_WORKDAYS
from ..core.enums import Weekday
from ..core.exceptions import ValidationError
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

WORKDAYS_KEY = "workdays"


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def default_workdays(self) -> FrozenSet[Weekday]:
        """Workdays applied to employees whose profile defines none."""

        stored = self._settings.get(WORKDAYS_KEY)
        if not stored:
            return DEFAULT_WORKDAYS
        try:
            return frozenset(Weekday(int(d)) for d in stored)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed workdays setting %r", stored)
            return DEFAULT_WORKDAYS

    def set_default_workdays(self, days: Iterable[int]) -> FrozenSet[Weekday]:
        try:
            workdays = frozenset(Weekday(int(d)) for d in days)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Workdays must be weekday numbers 0 (Sunday) to 6: {e}") from e
        if not workdays:
            raise ValidationError("At least one workday is required")
        self._settings.put(WORKDAYS_KEY, sorted(int(d) for d in workdays))
        logger.info("Default workdays set to %s", [d.name.title() for d in sorted(workdays)])
        return workdays
