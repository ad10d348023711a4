"""
Predefined settlement calendars.

Rule lists for a few common settlement markets. Rule order is part of
the definition: movable holidays skip over dates taken by earlier rules
(UK Christmas / Boxing Day relies on this).

Only the regular rules are encoded; one-off royal / jubilee bank holidays
and moved early-May holidays (1995, 2020) are not included. Easter-based
rules have no year bounds, so TARGET Good Friday / Easter Monday also
appear before 2000. US fixed-date holidays are listed as observed single
dates for 1950-2099 only.
"""

import logging
from datetime import date, timedelta
from functools import lru_cache
from typing import Dict, List

from .builder import build_calendar
from .business_calendar import DEFAULT_MAX_SEARCH_DAYS, Calendar
from .date_utils import Weekday
from .holiday_rules import (
    EasterOffset,
    HolidayRule,
    MonthWeekday,
    MovableYearlyDay,
    NthWeekday,
    SingularDay,
    WeekDay,
    YearlyDay,
)

logger = logging.getLogger(__name__)


SAT_SUN = [
    WeekDay(Weekday.SATURDAY),
    WeekDay(Weekday.SUNDAY),
]


# TARGET2 (Euro settlement)
TARGET_RULES: List[HolidayRule] = SAT_SUN + [
    YearlyDay(1, 1, name="New Year's Day"),
    EasterOffset(-2, name="Good Friday"),
    EasterOffset(1, name="Easter Monday"),
    YearlyDay(5, 1, first=2000, name="Labour Day"),
    YearlyDay(12, 25, name="Christmas Day"),
    YearlyDay(12, 26, first=2000, name="Christmas Holiday"),
    SingularDay(date(1998, 12, 31), name="New Year's Eve"),
    SingularDay(date(1999, 12, 31), name="New Year's Eve"),
    SingularDay(date(2001, 12, 31), name="New Year's Eve"),
]

# England & Wales settlement
UK_RULES: List[HolidayRule] = SAT_SUN + [
    MovableYearlyDay(1, 1, name="New Year's Day"),
    EasterOffset(-2, name="Good Friday"),
    EasterOffset(1, name="Easter Monday"),
    MonthWeekday(5, Weekday.MONDAY, NthWeekday.FIRST, first=1978, name="Early May Bank Holiday"),
    MonthWeekday(5, Weekday.MONDAY, NthWeekday.LAST, first=1971, name="Spring Bank Holiday"),
    MonthWeekday(8, Weekday.MONDAY, NthWeekday.LAST, first=1971, name="Summer Bank Holiday"),
    # Christmas first: a weekend Boxing Day moves past the substitute Christmas day
    MovableYearlyDay(12, 25, name="Christmas Day"),
    MovableYearlyDay(12, 26, name="Boxing Day"),
]

# Years for which the observed US fixed-date holidays are listed
US_OBSERVANCE_FIRST_YEAR = 1950
US_OBSERVANCE_LAST_YEAR = 2099


def _observed_fixed_days(
    month: int,
    day: int,
    name: str,
    first: int = US_OBSERVANCE_FIRST_YEAR,
    last: int = US_OBSERVANCE_LAST_YEAR,
    observe_saturday: bool = True,
) -> List[HolidayRule]:
    """
    Observed dates of a fixed US holiday as single-day rules.

    Saturday is observed on the preceding Friday, Sunday on the following
    Monday. MovableYearlyDay only shifts forward, so the observed dates are
    listed explicitly. With observe_saturday=False a Saturday holiday is not
    observed at all (New Year's Day: the Friday closes the previous year).
    """
    rules: List[HolidayRule] = []
    for year in range(first, last + 1):
        observed = date(year, month, day)
        if observed.weekday() == Weekday.SATURDAY:
            if not observe_saturday:
                continue
            observed -= timedelta(days=1)
        elif observed.weekday() == Weekday.SUNDAY:
            observed += timedelta(days=1)
        rules.append(SingularDay(observed, name=name))
    return rules


# US settlement (NYSE observance of fixed-date holidays)
US_RULES: List[HolidayRule] = (
    SAT_SUN
    + _observed_fixed_days(1, 1, "New Year's Day", observe_saturday=False)
    + [
        MonthWeekday(1, Weekday.MONDAY, NthWeekday.THIRD, first=1998, name="Martin Luther King Jr. Day"),
        MonthWeekday(2, Weekday.MONDAY, NthWeekday.THIRD, name="Presidents' Day"),
        EasterOffset(-2, name="Good Friday"),
        MonthWeekday(5, Weekday.MONDAY, NthWeekday.LAST, name="Memorial Day"),
    ]
    + _observed_fixed_days(6, 19, "Juneteenth", first=2022)
    + _observed_fixed_days(7, 4, "Independence Day")
    + [
        MonthWeekday(9, Weekday.MONDAY, NthWeekday.FIRST, name="Labor Day"),
        MonthWeekday(11, Weekday.THURSDAY, NthWeekday.FOURTH, name="Thanksgiving"),
    ]
    + _observed_fixed_days(12, 25, "Christmas Day")
)

MARKET_RULES: Dict[str, List[HolidayRule]] = {
    "target": TARGET_RULES,
    "uk": UK_RULES,
    "us": US_RULES,
}


def available_markets() -> List[str]:
    """Names of the predefined market calendars."""
    return sorted(MARKET_RULES)


def market_rules(market: str) -> List[HolidayRule]:
    """
    Rule list for a predefined market.

    Returns a copy so callers can extend it without affecting the
    shared definition.

    Raises:
        ValueError: If the market is unknown
    """
    key = market.lower()
    if key not in MARKET_RULES:
        raise ValueError(
            f"Unknown market calendar: {market}. Available: {available_markets()}"
        )
    return list(MARKET_RULES[key])


@lru_cache(maxsize=32)
def get_market_calendar(
    market: str,
    start: int,
    end: int,
    max_search_days: int = DEFAULT_MAX_SEARCH_DAYS,
) -> Calendar:
    """
    Build (once) the calendar of a predefined market for years start..end.

    Calendars are immutable, so the cached instance is shared between callers.
    """
    rules = market_rules(market)
    logger.info(f"[Markets] Building '{market}' calendar for {start}-{end}")
    return build_calendar(rules, start, end, max_search_days=max_search_days)
