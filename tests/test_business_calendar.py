"""
Tests for Calendar queries and traversal.

Includes the invariants every calendar must satisfy:
- is_business_day == not weekend and not holiday
- next/prev business day are strictly after/before, are business days,
  and skip no business day in between
"""

import pytest
import sys
from pathlib import Path
from datetime import date, datetime, timedelta

import numpy as np
import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.calendars.builder import build_calendar
from src.calendars.business_calendar import BusinessDayConvention, Calendar
from src.calendars.date_utils import Weekday
from src.calendars.holiday_rules import EasterOffset, WeekDay, YearlyDay


@pytest.fixture
def target_like():
    """Sat/Sun weekend, Good Friday, Easter Monday, Christmas, Boxing Day."""
    rules = [
        WeekDay(Weekday.SATURDAY),
        WeekDay(Weekday.SUNDAY),
        YearlyDay(1, 1),
        EasterOffset(-2),
        EasterOffset(1),
        YearlyDay(5, 1),
        YearlyDay(12, 25),
        YearlyDay(12, 26),
    ]
    return build_calendar(rules, 2023, 2025)


def _days(start, end):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


class TestInvariants:
    """Properties checked day by day over the build range."""

    def test_business_day_definition(self, target_like):
        for day in _days(date(2023, 1, 1), date(2025, 12, 31)):
            expected = not target_like.is_weekend(day) and not target_like.is_holiday(day)
            assert target_like.is_business_day(day) == expected

    def test_next_business_day(self, target_like):
        for day in _days(date(2024, 1, 1), date(2024, 12, 31)):
            nxt = target_like.next_business_day(day)
            assert nxt > day
            assert target_like.is_business_day(nxt)
            for between in _days(day + timedelta(days=1), nxt - timedelta(days=1)):
                assert not target_like.is_business_day(between)

    def test_prev_business_day(self, target_like):
        for day in _days(date(2024, 1, 1), date(2024, 12, 31)):
            prev = target_like.prev_business_day(day)
            assert prev < day
            assert target_like.is_business_day(prev)
            for between in _days(prev + timedelta(days=1), day - timedelta(days=1)):
                assert not target_like.is_business_day(between)


class TestTraversal:

    def test_next_skips_easter_weekend(self, target_like):
        """Thursday before Good Friday 2024 -> Tuesday after Easter Monday."""
        assert target_like.next_business_day(date(2024, 3, 28)) == date(2024, 4, 2)

    def test_prev_skips_easter_weekend(self, target_like):
        assert target_like.prev_business_day(date(2024, 4, 2)) == date(2024, 3, 28)

    def test_next_from_business_day_is_strictly_after(self, target_like):
        assert target_like.next_business_day(date(2024, 3, 26)) == date(2024, 3, 27)

    def test_add_business_days(self, target_like):
        assert target_like.add_business_days(date(2024, 3, 27), 2) == date(2024, 4, 2)
        assert target_like.add_business_days(date(2024, 4, 2), -1) == date(2024, 3, 28)
        assert target_like.add_business_days(date(2024, 3, 30), 0) == date(2024, 3, 30)

    def test_no_weekend_calendar(self):
        cal = Calendar(holidays=[date(2024, 3, 30)], weekdays=[])
        assert cal.next_business_day(date(2024, 3, 29)) == date(2024, 3, 31)

    def test_all_seven_weekend_days_raises(self):
        cal = Calendar(holidays=[], weekdays=range(7))
        with pytest.raises(ValueError, match="all seven weekdays"):
            cal.next_business_day(date(2024, 1, 1))
        with pytest.raises(ValueError, match="all seven weekdays"):
            cal.prev_business_day(date(2024, 1, 1))

    def test_search_bound_raises(self):
        """A holiday block longer than max_search_days is reported, not looped over."""
        block = [date(2024, 1, 1) + timedelta(days=i) for i in range(30)]
        cal = Calendar(holidays=block, weekdays=[], max_search_days=10)
        with pytest.raises(RuntimeError, match="No business day found within 10 days"):
            cal.next_business_day(date(2023, 12, 31))
        assert cal.next_business_day(date(2024, 1, 25)) == date(2024, 1, 31)

    def test_next_past_date_max_raises(self):
        cal = Calendar(holidays=[], weekdays=[])
        with pytest.raises(ValueError, match="supported date range"):
            cal.next_business_day(date.max)

    def test_prev_before_date_min_raises(self):
        cal = Calendar(holidays=[], weekdays=[])
        with pytest.raises(ValueError, match="supported date range"):
            cal.prev_business_day(date.min)

    def test_holidays_up_to_date_max_raise_value_error(self):
        """Trailing holidays run the scan off the end before the search bound."""
        cal = Calendar(holidays=[date.max - timedelta(days=1), date.max], weekdays=[])
        with pytest.raises(ValueError, match="supported date range"):
            cal.next_business_day(date.max - timedelta(days=2))

    def test_invalid_search_bound(self):
        with pytest.raises(ValueError, match="max_search_days"):
            Calendar(holidays=[], weekdays=[], max_search_days=0)


class TestPredicates:

    def test_weekend_duplicates_harmless(self):
        cal = Calendar(holidays=[], weekdays=[Weekday.SUNDAY, Weekday.SUNDAY])
        assert cal.is_weekend(date(2024, 3, 31))
        assert not cal.is_weekend(date(2024, 3, 30))
        assert cal.weekdays == (Weekday.SUNDAY, Weekday.SUNDAY)

    def test_queries_outside_build_range(self, target_like):
        """Outside the build range only weekends are known."""
        assert target_like.is_business_day(date(2030, 12, 25))
        assert not target_like.is_business_day(date(2030, 12, 28))

    def test_contains(self, target_like):
        assert date(2024, 12, 25) in target_like
        assert date(2024, 12, 24) not in target_like

    def test_holidays_sorted_and_unique(self):
        cal = Calendar(
            holidays=[date(2024, 12, 25), date(2024, 1, 1), date(2024, 12, 25)],
            weekdays=[],
        )
        assert cal.holidays == (date(2024, 1, 1), date(2024, 12, 25))

    def test_weekmask(self, target_like):
        assert target_like.weekmask == "1111100"
        fri_sat = Calendar(holidays=[], weekdays=[Weekday.FRIDAY, Weekday.SATURDAY])
        assert fri_sat.weekmask == "1111001"


class TestAdjust:
    """Business day conventions."""

    def test_business_day_unchanged(self, target_like):
        for convention in BusinessDayConvention:
            assert target_like.adjust(date(2024, 3, 28), convention) == date(2024, 3, 28)

    def test_unadjusted(self, target_like):
        assert target_like.adjust(date(2024, 3, 29), "UNADJUSTED") == date(2024, 3, 29)

    def test_following_and_preceding(self, target_like):
        good_friday = date(2024, 3, 29)
        assert target_like.adjust(good_friday, BusinessDayConvention.FOLLOWING) == date(2024, 4, 2)
        assert target_like.adjust(good_friday, BusinessDayConvention.PRECEDING) == date(2024, 3, 28)

    def test_modified_following_stays_in_month(self, target_like):
        saturday = date(2024, 3, 30)
        assert target_like.adjust(saturday, BusinessDayConvention.MODIFIED_FOLLOWING) == date(2024, 3, 28)

    def test_modified_preceding_stays_in_month(self, target_like):
        saturday = date(2024, 6, 1)
        assert target_like.adjust(saturday, BusinessDayConvention.MODIFIED_PRECEDING) == date(2024, 6, 3)


class TestRangeQueries:

    def test_holidays_between(self, target_like):
        assert target_like.holidays_between(date(2024, 3, 1), date(2024, 5, 1)) == [
            date(2024, 3, 29),
            date(2024, 4, 1),
            date(2024, 5, 1),
        ]
        assert target_like.holidays_between(date(2024, 6, 1), date(2024, 6, 30)) == []

    def test_count_business_days(self, target_like):
        assert target_like.count_business_days(date(2024, 3, 25), date(2024, 4, 2)) == 4
        assert target_like.count_business_days(date(2024, 3, 25), date(2024, 3, 25)) == 0
        assert target_like.count_business_days(date(2024, 4, 2), date(2024, 3, 25)) == -4

    def test_business_day_mask(self, target_like):
        mask = target_like.business_day_mask(
            [date(2024, 3, 28), date(2024, 3, 29), date(2024, 3, 30), date(2024, 4, 2)]
        )
        assert isinstance(mask, np.ndarray)
        assert mask.tolist() == [True, False, False, True]

    def test_business_days_index(self, target_like):
        days = target_like.business_days(date(2024, 3, 25), date(2024, 4, 2))
        assert isinstance(days, pd.DatetimeIndex)
        assert [d.date() for d in days] == [
            date(2024, 3, 25),
            date(2024, 3, 26),
            date(2024, 3, 27),
            date(2024, 3, 28),
            date(2024, 4, 2),
        ]

    def test_pandas_offset(self, target_like):
        offset = target_like.to_offset()
        assert pd.Timestamp("2024-03-28") + offset == pd.Timestamp("2024-04-02")

    def test_numpy_and_pandas_agree_with_predicates(self, target_like):
        start, end = date(2024, 1, 1), date(2024, 12, 31)
        expected = [d for d in _days(start, end) if target_like.is_business_day(d)]
        assert [d.date() for d in target_like.business_days(start, end)] == expected
        assert target_like.count_business_days(start, end + timedelta(days=1)) == len(expected)


class TestDateLikeInputs:
    """datetime and pd.Timestamp are treated as their calendar date."""

    @pytest.fixture
    def good_friday_only(self):
        rules = [WeekDay(Weekday.SATURDAY), WeekDay(Weekday.SUNDAY), EasterOffset(-2)]
        return build_calendar(rules, 2024, 2024)

    def test_holiday_predicates(self, good_friday_only):
        for value in (
            datetime(2024, 3, 29),
            datetime(2024, 3, 29, 15, 30),
            pd.Timestamp("2024-03-29"),
        ):
            assert good_friday_only.is_holiday(value)
            assert value in good_friday_only
            assert not good_friday_only.is_business_day(value)

    def test_traversal_returns_plain_dates(self, good_friday_only):
        nxt = good_friday_only.next_business_day(datetime(2024, 3, 28, 9, 0))
        assert nxt == date(2024, 4, 1)
        assert type(nxt) is date

        prev = good_friday_only.prev_business_day(pd.Timestamp("2024-04-01"))
        assert prev == date(2024, 3, 28)
        assert type(prev) is date

        assert good_friday_only.add_business_days(pd.Timestamp("2024-03-27"), 2) == date(2024, 4, 1)

    def test_adjust(self, good_friday_only):
        adjusted = good_friday_only.adjust(pd.Timestamp("2024-03-29"), BusinessDayConvention.FOLLOWING)
        assert adjusted == date(2024, 4, 1)
        unadjusted = good_friday_only.adjust(datetime(2024, 3, 29, 12, 0), "UNADJUSTED")
        assert unadjusted == date(2024, 3, 29)

    def test_range_queries(self, good_friday_only):
        start, end = pd.Timestamp("2024-03-25"), pd.Timestamp("2024-04-02")
        assert good_friday_only.holidays_between(start, end) == [date(2024, 3, 29)]
        assert good_friday_only.count_business_days(start, end) == 5
        mask = good_friday_only.business_day_mask(
            [datetime(2024, 3, 28, 23, 59), pd.Timestamp("2024-03-29")]
        )
        assert mask.tolist() == [True, False]

    def test_calendar_built_from_timestamps(self):
        cal = Calendar(holidays=[pd.Timestamp("2024-12-25")], weekdays=[])
        assert cal.holidays == (date(2024, 12, 25),)
        assert cal.is_holiday(date(2024, 12, 25))
