"""
Command-line entry point for settlement calendar queries.

Examples:
    python run_calendar.py --market uk --check 2021-12-28
    python run_calendar.py --market target --next 2024-03-28
    python run_calendar.py --market us --holidays 2024
    python run_calendar.py --count 2024-01-01 2024-02-01
    python run_calendar.py --schedule 2024-03-01 2024-04-30 --freq W-FRI
"""

import sys
import argparse
import logging
from datetime import date
from typing import List, Optional

from src.calendars.business_calendar import Calendar
from src.calendars.markets import available_markets, get_market_calendar, market_rules
from src.calendars.holiday_rules import describe_rule
from src.calendars.schedule import SUPPORTED_FREQUENCIES, build_schedule
from src.config.calendar_settings import CONFIG_PATH, LOG_LEVELS, load_calendar_settings

logger = logging.getLogger(__name__)


def parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query settlement calendars")
    parser.add_argument(
        "--config",
        type=str,
        default=str(CONFIG_PATH),
        help=f"Path to calendar settings YAML. Default: {CONFIG_PATH}"
    )
    parser.add_argument(
        "--market",
        type=str,
        default=None,
        help=f"Market calendar ({', '.join(available_markets())}). Default: from config"
    )
    parser.add_argument("--start-year", type=int, default=None, help="First year of the calendar")
    parser.add_argument("--end-year", type=int, default=None, help="Last year of the calendar")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level. Default: from config"
    )

    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("--check", type=parse_date, metavar="DATE", help="Is DATE a business day?")
    actions.add_argument("--next", type=parse_date, metavar="DATE", help="Next business day after DATE")
    actions.add_argument("--prev", type=parse_date, metavar="DATE", help="Previous business day before DATE")
    actions.add_argument("--holidays", type=int, metavar="YEAR", help="List holidays of YEAR")
    actions.add_argument("--rules", action="store_true", help="List the market's holiday rules")
    actions.add_argument(
        "--count",
        type=parse_date,
        nargs=2,
        metavar=("START", "END"),
        help="Number of business days in [START, END)"
    )
    actions.add_argument(
        "--schedule",
        type=parse_date,
        nargs=2,
        metavar=("START", "END"),
        help="Business-day schedule between START and END"
    )
    parser.add_argument(
        "--freq",
        type=str,
        choices=SUPPORTED_FREQUENCIES,
        default="W-FRI",
        help="Schedule frequency for --schedule. Default: W-FRI"
    )
    return parser


def run_action(args: argparse.Namespace, calendar: Calendar, market: str) -> None:
    """Execute the selected action and print its result."""
    if args.check is not None:
        day = args.check
        if calendar.is_business_day(day):
            status = "business day"
        elif calendar.is_holiday(day):
            status = "holiday"
        else:
            status = "weekend"
        print(f"{day} ({day:%a}): {status}")

    elif args.next is not None:
        print(calendar.next_business_day(args.next).isoformat())

    elif args.prev is not None:
        print(calendar.prev_business_day(args.prev).isoformat())

    elif args.holidays is not None:
        year = args.holidays
        for day in calendar.holidays_between(date(year, 1, 1), date(year, 12, 31)):
            print(f"{day} ({day:%a})")

    elif args.rules:
        for rule in market_rules(market):
            print(describe_rule(rule))

    elif args.count is not None:
        start, end = args.count
        print(calendar.count_business_days(start, end))

    elif args.schedule is not None:
        start, end = args.schedule
        for ts in build_schedule(calendar, start, end, freq=args.freq):
            print(ts.date().isoformat())


def main(argv: Optional[List[str]] = None) -> int:
    """Run a calendar query. Returns a process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_calendar_settings(
            args.config,
            market=args.market,
            start_year=args.start_year,
            end_year=args.end_year,
            log_level=args.log_level,
        )
    except ValueError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Invalid calendar settings: {e}")
        return 1

    logging.basicConfig(
        level=getattr(logging, settings["log_level"]),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger.info(
        f"Market: {settings['market']} "
        f"({settings['start_year']}-{settings['end_year']})"
    )

    try:
        calendar = get_market_calendar(
            settings["market"],
            settings["start_year"],
            settings["end_year"],
            settings["max_search_days"],
        )
        run_action(args, calendar, settings["market"])
    except (ValueError, RuntimeError) as e:
        logger.error(f"Calendar query failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
