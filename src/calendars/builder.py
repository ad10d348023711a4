"""
Calendar Builder

Evaluates a list of holiday rules over an inclusive range of years and
freezes the result into a Calendar.

Rules are applied in the order given. This matters for MovableYearlyDay:
a movable holiday skips forward over dates that earlier rules already
occupied, so swapping two colliding rules changes which one gets moved.
Callers that depend on a particular outcome must keep their rule order
stable (see src.calendars.markets for examples, e.g. Christmas before
Boxing Day).

Any rule that would produce an invalid calendar date (Feb 30, Feb 29 in
a non-leap year, ...) fails the whole build with ValueError instead of
silently dropping the year.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional, Set, Tuple

from .business_calendar import DEFAULT_MAX_SEARCH_DAYS, Calendar
from .date_utils import Weekday, last_day_of_month
from .easter import easter_sunday
from .holiday_rules import (
    EasterOffset,
    HolidayRule,
    MonthWeekday,
    MovableYearlyDay,
    NthWeekday,
    SingularDay,
    WeekDay,
    YearlyDay,
    describe_rule,
)

logger = logging.getLogger(__name__)


EasterProvider = Callable[[int], date]

# Day-of-month where the search for the nth weekday starts
NTH_WEEKDAY_ANCHORS = {
    NthWeekday.FIRST: 1,
    NthWeekday.SECOND: 8,
    NthWeekday.THIRD: 15,
    NthWeekday.FOURTH: 22,
}

ONE_DAY = timedelta(days=1)


class CalendarBuilder:
    """
    Mutable accumulator used only while a calendar is being built.

    Example:
        >>> builder = CalendarBuilder(2019, 2020)
        >>> builder.add_rules([WeekDay(Weekday.SATURDAY), WeekDay(Weekday.SUNDAY)])
        >>> builder.add_rule(EasterOffset(-2, name="Good Friday"))
        >>> cal = builder.build()
    """

    def __init__(
        self,
        start: int,
        end: int,
        easter_provider: EasterProvider = easter_sunday,
        max_search_days: int = DEFAULT_MAX_SEARCH_DAYS,
    ):
        """
        Args:
            start: First year to compute holidays for (inclusive)
            end: Last year to compute holidays for (inclusive)
            easter_provider: Callable returning Easter Sunday for a year
            max_search_days: Traversal bound handed to the resulting Calendar
        """
        if start > end:
            raise ValueError(f"start year ({start}) must be <= end year ({end})")

        self.start = start
        self.end = end
        self.easter_provider = easter_provider
        self.max_search_days = max_search_days

        self._holidays: Set[date] = set()
        self._weekdays: List[Weekday] = []

        self._handlers = {
            WeekDay: self._add_weekday,
            SingularDay: self._add_singular_day,
            YearlyDay: self._add_yearly_day,
            MovableYearlyDay: self._add_movable_yearly_day,
            EasterOffset: self._add_easter_offset,
            MonthWeekday: self._add_month_weekday,
        }

    def add_rule(self, rule: HolidayRule) -> "CalendarBuilder":
        """Evaluate one rule into the holiday set / weekend list."""
        handler = self._handlers.get(type(rule))
        if handler is None:
            raise TypeError(f"Unsupported holiday rule type: {type(rule).__name__}")

        before = len(self._holidays)
        handler(rule)
        logger.debug(
            f"[CalendarBuilder] {describe_rule(rule)}: "
            f"+{len(self._holidays) - before} holidays"
        )
        return self

    def add_rules(self, rules: Iterable[HolidayRule]) -> "CalendarBuilder":
        for rule in rules:
            self.add_rule(rule)
        return self

    def build(self) -> Calendar:
        """Freeze the accumulated state into an immutable Calendar."""
        calendar = Calendar(
            holidays=self._holidays,
            weekdays=self._weekdays,
            start_year=self.start,
            end_year=self.end,
            max_search_days=self.max_search_days,
        )
        logger.info(
            f"[CalendarBuilder] Built calendar {self.start}-{self.end}: "
            f"{len(calendar.holidays)} holidays, "
            f"weekend={[w.name for w in calendar.weekdays]}"
        )
        return calendar

    # ------------------------------------------------------------------
    # Rule handlers
    # ------------------------------------------------------------------

    def _add_weekday(self, rule: WeekDay) -> None:
        self._weekdays.append(rule.weekday)

    def _add_singular_day(self, rule: SingularDay) -> None:
        if self.start <= rule.date.year <= self.end:
            self._holidays.add(rule.date)

    def _add_yearly_day(self, rule: YearlyDay) -> None:
        for year in self._years(rule.first, rule.last):
            self._holidays.add(self._make_date(rule, year, rule.month, rule.day))

    def _add_movable_yearly_day(self, rule: MovableYearlyDay) -> None:
        for year in self._years(rule.first, rule.last):
            day = self._make_date(rule, year, rule.month, rule.day)

            # Fixed Sat/Sun, independent of the calendar's own weekend days
            if day.weekday() == Weekday.SATURDAY:
                day += 2 * ONE_DAY
            elif day.weekday() == Weekday.SUNDAY:
                day += ONE_DAY

            while day in self._holidays:
                day += ONE_DAY
            self._holidays.add(day)

    def _add_easter_offset(self, rule: EasterOffset) -> None:
        offset = timedelta(days=rule.offset)
        for year in range(self.start, self.end + 1):
            self._holidays.add(self.easter_provider(year) + offset)

    def _add_month_weekday(self, rule: MonthWeekday) -> None:
        for year in self._years(rule.first, rule.last):
            if rule.nth == NthWeekday.LAST:
                try:
                    anchor = last_day_of_month(year, rule.month)
                except ValueError as e:
                    raise ValueError(
                        f"Invalid date for rule {describe_rule(rule)} in {year}: {e}"
                    ) from e
                step = -ONE_DAY
            else:
                anchor = NTH_WEEKDAY_ANCHORS[rule.nth]
                step = ONE_DAY

            day = self._make_date(rule, year, rule.month, anchor)
            while day.weekday() != rule.weekday:
                day += step
            self._holidays.add(day)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _years(self, first: Optional[int], last: Optional[int]) -> range:
        first, last = clamp_year_range(self.start, self.end, first, last)
        return range(first, last + 1)

    @staticmethod
    def _make_date(rule: HolidayRule, year: int, month: int, day: int) -> date:
        try:
            return date(year, month, day)
        except ValueError as e:
            raise ValueError(
                f"Invalid date for rule {describe_rule(rule)}: "
                f"{year:04d}-{month:02d}-{day:02d} ({e})"
            ) from e


def clamp_year_range(
    start: int,
    end: int,
    first: Optional[int],
    last: Optional[int],
) -> Tuple[int, int]:
    """
    Intersect a rule's optional [first, last] bounds with [start, end].

    The result may be empty (first > last), in which case the rule
    contributes nothing.
    """
    first = start if first is None else max(start, first)
    last = end if last is None else min(end, last)
    return first, last


def build_calendar(
    rules: Iterable[HolidayRule],
    start: int,
    end: int,
    easter_provider: EasterProvider = easter_sunday,
    max_search_days: int = DEFAULT_MAX_SEARCH_DAYS,
) -> Calendar:
    """
    Compute all holidays and weekend days for the years start..end (inclusive).

    Args:
        rules: Holiday rules, applied in order
        start: First year (inclusive)
        end: Last year (inclusive)
        easter_provider: Easter Sunday source for EasterOffset rules
        max_search_days: Traversal safety bound of the resulting Calendar

    Returns:
        Immutable Calendar

    Raises:
        ValueError: start > end, a rule produces an invalid date, or the
            Easter provider cannot handle a year in range
        TypeError: A rule is not one of the known rule types
    """
    builder = CalendarBuilder(
        start,
        end,
        easter_provider=easter_provider,
        max_search_days=max_search_days,
    )
    return builder.add_rules(rules).build()
