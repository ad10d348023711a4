"""
Calendar date helpers shared by the holiday rule evaluator.

Pure functions on top of datetime.date; no state.
"""

from datetime import date, timedelta
from enum import IntEnum


class Weekday(IntEnum):
    """Weekday numbering identical to date.weekday() (Monday=0 ... Sunday=6)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


def is_leap_year(year: int) -> bool:
    """True if February 29th exists in the given (Gregorian) year."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def last_day_of_month(year: int, month: int) -> int:
    """
    Last day-of-month number for a given month.

    Computed as the first day of the following month minus one day,
    rolling into January of the next year for December.

    Raises:
        ValueError: If month is not in 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")

    if month == 12:
        first_next = date(year + 1, 1, 1)
    else:
        first_next = date(year, month + 1, 1)
    return (first_next - timedelta(days=1)).day
