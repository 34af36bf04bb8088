"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import Weekday

# Sunday..Thursday, used when neither the employee nor the settings store define workdays.
DEFAULT_WORKDAYS = frozenset(
    {Weekday.SUNDAY, Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY}
)
DEFAULT_AGREED_DAILY_HOURS = 8.0
DEFAULT_OVERTIME_MULTIPLIER = 1.5
DEFAULT_SALARY_CURRENCY = "SYP"

BY_30_DAYS_DIVISOR = 30
BY_7_DAYS_DIVISOR = 7

INGEST_RETRY_ATTEMPTS = 3
