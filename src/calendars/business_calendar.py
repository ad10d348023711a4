"""
Immutable business day calendar.

A Calendar wraps a precomputed holiday set and the list of weekend
weekdays. It is produced by src.calendars.builder.build_calendar and never
changes afterwards, so one instance can be shared freely between callers
and threads.

Holiday coverage is only meaningful for the years the calendar was built
for (start_year..end_year); queries outside that range are allowed but
will only see weekends.
"""

import bisect
import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .date_utils import Weekday

logger = logging.getLogger(__name__)


# Ten years; any sane calendar has a business day well within this
DEFAULT_MAX_SEARCH_DAYS = 3660

ONE_DAY = timedelta(days=1)


def as_date(day: date) -> date:
    """
    Calendar date of a date-like value.

    datetime and pd.Timestamp are date subclasses but never compare equal
    to the plain dates stored in the holiday set, so they are truncated.
    """
    if isinstance(day, datetime):
        return day.date()
    return day


class BusinessDayConvention(str, Enum):
    """Business day adjustment conventions for settlement dates."""

    UNADJUSTED = "UNADJUSTED"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    PRECEDING = "PRECEDING"
    MODIFIED_PRECEDING = "MODIFIED_PRECEDING"


class Calendar:
    """Read-only holiday calendar with business day predicates and traversal."""

    __slots__ = (
        "_holidays",
        "_sorted_holidays",
        "_weekdays",
        "_weekend",
        "_start_year",
        "_end_year",
        "_max_search_days",
    )

    def __init__(
        self,
        holidays: Iterable[date],
        weekdays: Iterable[int],
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
        max_search_days: int = DEFAULT_MAX_SEARCH_DAYS,
    ):
        """
        Args:
            holidays: Holiday dates (duplicates are collapsed)
            weekdays: Weekend weekdays, Monday=0 ... Sunday=6
            start_year: First year the holidays were computed for
            end_year: Last year the holidays were computed for
            max_search_days: Upper bound on days scanned by next/prev_business_day
        """
        if max_search_days <= 0:
            raise ValueError(f"max_search_days must be > 0, got {max_search_days}")

        self._holidays = frozenset(as_date(d) for d in holidays)
        self._sorted_holidays = tuple(sorted(self._holidays))
        self._weekdays = tuple(Weekday(w) for w in weekdays)
        self._weekend = frozenset(self._weekdays)
        self._start_year = start_year
        self._end_year = end_year
        self._max_search_days = max_search_days

    @property
    def holidays(self) -> Tuple[date, ...]:
        """All holidays in ascending order."""
        return self._sorted_holidays

    @property
    def weekdays(self) -> Tuple[Weekday, ...]:
        """Weekend weekdays in the order they were configured."""
        return self._weekdays

    @property
    def start_year(self) -> Optional[int]:
        return self._start_year

    @property
    def end_year(self) -> Optional[int]:
        return self._end_year

    @property
    def max_search_days(self) -> int:
        return self._max_search_days

    @property
    def weekmask(self) -> str:
        """numpy/pandas style weekmask, Monday first, '1' = working day."""
        return "".join("0" if w in self._weekend else "1" for w in range(7))

    def __contains__(self, day: date) -> bool:
        return as_date(day) in self._holidays

    def __repr__(self) -> str:
        return (
            f"Calendar(years={self._start_year}..{self._end_year}, "
            f"holidays={len(self._holidays)}, "
            f"weekend={[w.name for w in self._weekdays]})"
        )

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_weekend(self, day: date) -> bool:
        """True if the date falls on one of the calendar's weekend days."""
        return day.weekday() in self._weekend

    def is_holiday(self, day: date) -> bool:
        """True if the date is a holiday of this calendar."""
        return as_date(day) in self._holidays

    def is_business_day(self, day: date) -> bool:
        """True if the date is neither a weekend day nor a holiday."""
        return not self.is_weekend(day) and not self.is_holiday(day)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def next_business_day(self, day: date) -> date:
        """First business day strictly after the given date."""
        return self._scan(day, ONE_DAY)

    def prev_business_day(self, day: date) -> date:
        """Last business day strictly before the given date."""
        return self._scan(day, -ONE_DAY)

    def _scan(self, day: date, step: timedelta) -> date:
        self._check_has_working_weekday()

        current = as_date(day)
        for _ in range(self._max_search_days):
            try:
                current = current + step
            except OverflowError as e:
                raise ValueError(
                    f"[Calendar] No business day "
                    f"{'after' if step > timedelta(0) else 'before'} {day} "
                    f"within the supported date range"
                ) from e
            if self.is_business_day(current):
                return current

        raise RuntimeError(
            f"[Calendar] No business day found within {self._max_search_days} days "
            f"{'after' if step > timedelta(0) else 'before'} {day}"
        )

    def _check_has_working_weekday(self) -> None:
        if len(self._weekend) >= 7:
            raise ValueError(
                "[Calendar] Weekend covers all seven weekdays; no business day exists"
            )

    def add_business_days(self, day: date, n: int) -> date:
        """
        Move n business days forward (n > 0) or backward (n < 0).

        n == 0 returns the date unchanged, even if it is not a business day.
        """
        current = as_date(day)
        if n > 0:
            for _ in range(n):
                current = self.next_business_day(current)
        elif n < 0:
            for _ in range(-n):
                current = self.prev_business_day(current)
        return current

    def adjust(self, day: date, convention: BusinessDayConvention) -> date:
        """
        Adjust a date to a business day according to a convention.

        Modified conventions fall back to the opposite direction when the
        adjusted date would leave the month of the original date.
        """
        convention = BusinessDayConvention(convention)
        day = as_date(day)

        if convention == BusinessDayConvention.UNADJUSTED or self.is_business_day(day):
            return day

        if convention == BusinessDayConvention.FOLLOWING:
            return self.next_business_day(day)

        if convention == BusinessDayConvention.PRECEDING:
            return self.prev_business_day(day)

        if convention == BusinessDayConvention.MODIFIED_FOLLOWING:
            adjusted = self.next_business_day(day)
            if adjusted.month != day.month:
                adjusted = self.prev_business_day(day)
            return adjusted

        # MODIFIED_PRECEDING
        adjusted = self.prev_business_day(day)
        if adjusted.month != day.month:
            adjusted = self.next_business_day(day)
        return adjusted

    # ------------------------------------------------------------------
    # Range queries
    # ------------------------------------------------------------------

    def holidays_between(self, start: date, end: date) -> List[date]:
        """Holidays in [start, end], ascending."""
        lo = bisect.bisect_left(self._sorted_holidays, as_date(start))
        hi = bisect.bisect_right(self._sorted_holidays, as_date(end))
        return list(self._sorted_holidays[lo:hi])

    def count_business_days(self, start: date, end: date) -> int:
        """
        Number of business days in [start, end).

        Negative when end is before start, matching numpy.busday_count.
        """
        self._check_has_working_weekday()
        return int(np.busday_count(
            as_date(start), as_date(end), busdaycal=self._busdaycalendar()
        ))

    def business_day_mask(self, days: Iterable[date]) -> np.ndarray:
        """Boolean array, True where the corresponding date is a business day."""
        self._check_has_working_weekday()
        values = np.array([as_date(d) for d in days], dtype="datetime64[D]")
        return np.is_busday(values, busdaycal=self._busdaycalendar())

    def business_days(self, start: date, end: date) -> pd.DatetimeIndex:
        """All business days in [start, end] as a DatetimeIndex."""
        self._check_has_working_weekday()
        return pd.bdate_range(
            start=start,
            end=end,
            freq="C",
            weekmask=self.weekmask,
            holidays=list(self._sorted_holidays),
        )

    def to_offset(self) -> pd.offsets.CustomBusinessDay:
        """pandas offset stepping in business days of this calendar."""
        self._check_has_working_weekday()
        return pd.offsets.CustomBusinessDay(
            weekmask=self.weekmask,
            holidays=list(self._sorted_holidays),
        )

    def _busdaycalendar(self) -> np.busdaycalendar:
        return np.busdaycalendar(
            weekmask=self.weekmask,
            holidays=np.array(self._sorted_holidays, dtype="datetime64[D]"),
        )
