"""Weekday numbering shared by every schedule lookup.

Two conventions meet here: the calendar numbering used by callers (Sunday=0)
and the clinic schedule numbering (Monday=0). Every conversion goes through
``to_canonical`` / ``from_canonical``.
"""

from datetime import date, datetime

DAYS_IN_WEEK = 7
DAY_NAMES = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')


def to_canonical(native_weekday: int) -> int:
    """Sunday=0 calendar weekday -> Monday=0 schedule weekday."""
    return (native_weekday % DAYS_IN_WEEK + 6) % DAYS_IN_WEEK


def from_canonical(canonical_weekday: int) -> int:
    return (canonical_weekday % DAYS_IN_WEEK + 1) % DAYS_IN_WEEK


def native_weekday(value: date | datetime) -> int:
    return value.isoweekday() % DAYS_IN_WEEK


def canonical_weekday(value: date | datetime) -> int:
    return to_canonical(native_weekday(value))


def day_name(canonical: int) -> str:
    return DAY_NAMES[canonical % DAYS_IN_WEEK]
