"""
Settlement calendars package.

Holiday rules are evaluated once over a range of years into an immutable
Calendar answering business day questions (is it a business day, what is
the next / previous one) for settlement and scheduling.
"""

from .date_utils import Weekday, is_leap_year, last_day_of_month
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
)
from .business_calendar import BusinessDayConvention, Calendar
from .builder import CalendarBuilder, build_calendar
from .markets import available_markets, get_market_calendar, market_rules
from .schedule import build_schedule

__all__ = [
    'Weekday',
    'NthWeekday',
    'HolidayRule',
    'WeekDay',
    'YearlyDay',
    'MovableYearlyDay',
    'SingularDay',
    'EasterOffset',
    'MonthWeekday',
    'Calendar',
    'BusinessDayConvention',
    'CalendarBuilder',
    'build_calendar',
    'easter_sunday',
    'is_leap_year',
    'last_day_of_month',
    'available_markets',
    'market_rules',
    'get_market_calendar',
    'build_schedule',
]

__version__ = '0.1.0'
