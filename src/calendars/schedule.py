"""
Settlement / rebalance schedules on top of a business day calendar.

Generates periodic dates (daily, weekly anchor, month end) and snaps any
date that is not a business day to the previous business day, so e.g. a
Friday schedule uses Thursday in the week of Good Friday.
"""

import logging
from datetime import date
from typing import List, Union

import pandas as pd

from .business_calendar import Calendar
from .date_utils import last_day_of_month

logger = logging.getLogger(__name__)


WEEKLY_FREQUENCIES = ("W-MON", "W-TUE", "W-WED", "W-THU", "W-FRI", "W-SAT", "W-SUN")
SUPPORTED_FREQUENCIES = ("D", "M") + WEEKLY_FREQUENCIES

DateLike = Union[str, date, pd.Timestamp]


def build_schedule(
    calendar: Calendar,
    start: DateLike,
    end: DateLike,
    freq: str = "W-FRI",
) -> pd.DatetimeIndex:
    """
    Business-day schedule between start and end (inclusive).

    Args:
        calendar: Calendar used to decide business days
        start: First date of the window
        end: Last date of the window
        freq: "D" (every business day), "W-MON".."W-SUN" (weekly anchor)
            or "M" (month end)

    Returns:
        Sorted, unique DatetimeIndex of schedule dates

    Raises:
        ValueError: Unknown frequency or start after end
    """
    start = pd.Timestamp(start).date()
    end = pd.Timestamp(end).date()

    if start > end:
        raise ValueError(f"start ({start}) must be <= end ({end})")

    if freq == "D":
        return calendar.business_days(start, end)

    if freq in WEEKLY_FREQUENCIES:
        weekly = pd.date_range(start=pd.Timestamp(start), end=pd.Timestamp(end), freq=freq)
        candidates = [ts.date() for ts in weekly]
    elif freq == "M":
        candidates = _month_ends(start, end)
    else:
        raise ValueError(
            f"Unknown schedule frequency: {freq}. Supported: {list(SUPPORTED_FREQUENCIES)}"
        )

    schedule = set()
    for anchor in candidates:
        day = anchor
        if not calendar.is_business_day(day):
            day = calendar.prev_business_day(day)
            logger.debug(f"[Schedule] {anchor} is not a business day, using {day}")
        if day >= start:
            schedule.add(day)

    if not schedule:
        logger.warning(f"[Schedule] No {freq} dates between {start} and {end}")

    return pd.DatetimeIndex(sorted(pd.Timestamp(d) for d in schedule))


def _month_ends(start: date, end: date) -> List[date]:
    """Calendar month-end dates within [start, end]."""
    result = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        month_end = date(year, month, last_day_of_month(year, month))
        if start <= month_end <= end:
            result.append(month_end)
        if month == 12:
            year, month = year + 1, 1
        else:
            month += 1
    return result
