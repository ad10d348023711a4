"""
Holiday rule data model.

A calendar is described by a list of rules. Each rule is a small frozen
value; the builder (src.calendars.builder) turns a rule list into concrete
dates for a range of years.

Rule kinds:
- WeekDay: a weekday that is always a non-business (weekend) day
- YearlyDay: fixed month/day every year
- MovableYearlyDay: fixed month/day, moved past Sat/Sun and already taken holidays
- SingularDay: one explicit date
- EasterOffset: Easter Sunday plus a signed number of days
- MonthWeekday: nth (or last) weekday of a month

`first` / `last` are inclusive year bounds; None means unbounded.
`name` is descriptive only and never affects evaluation.
"""

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .date_utils import Weekday


class NthWeekday(Enum):
    """Occurrence of a weekday within a month."""

    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4
    LAST = -1


@dataclass(frozen=True)
class WeekDay:
    """Weekday that is never a business day (e.g. Saturday, Sunday)."""

    weekday: Weekday
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "weekday", Weekday(self.weekday))


@dataclass(frozen=True)
class YearlyDay:
    """Holiday on the same month/day every year."""

    month: int
    day: int
    first: Optional[int] = None
    last: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class MovableYearlyDay:
    """
    Yearly holiday moved forward when it falls on a weekend.

    Saturday and Sunday are always treated as weekend here, regardless of
    the weekend days configured for the calendar. If the moved date is
    already a holiday, the date keeps moving forward one day at a time
    until a free date is found, so the result depends on rule order.
    """

    month: int
    day: int
    first: Optional[int] = None
    last: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class SingularDay:
    """Holiday occurring exactly once."""

    date: datetime.date
    name: Optional[str] = None


@dataclass(frozen=True)
class EasterOffset:
    """Holiday defined relative to Easter Sunday (e.g. -2 for Good Friday)."""

    offset: int
    name: Optional[str] = None


@dataclass(frozen=True)
class MonthWeekday:
    """Holiday on the nth (or last) given weekday of a month, e.g. first Monday in May."""

    month: int
    weekday: Weekday
    nth: NthWeekday
    first: Optional[int] = None
    last: Optional[int] = None
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "weekday", Weekday(self.weekday))
        object.__setattr__(self, "nth", NthWeekday(self.nth))


HolidayRule = Union[
    WeekDay,
    YearlyDay,
    MovableYearlyDay,
    SingularDay,
    EasterOffset,
    MonthWeekday,
]


def describe_rule(rule: HolidayRule) -> str:
    """Short human-readable label for logs and CLI output."""
    label = type(rule).__name__
    if rule.name:
        return f"{rule.name} ({label})"
    return label
