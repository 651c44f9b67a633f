"""Command-line argument parsing for calrule.

This module handles argument parser setup and the conversion of
command-line strings into recurrence types, weekday masks and datetimes.
"""

import argparse
import logging
from datetime import datetime

from dateutil import parser as date_parser

from calrule import __version__
from calrule.rrule.models import RecurrenceType, Weekday

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]

TYPE_NAMES = {
    "none": RecurrenceType.NONE,
    "daily": RecurrenceType.DAILY,
    "weekly": RecurrenceType.WEEKLY,
    "monthly-by-date": RecurrenceType.MONTHLY_MDAY,
    "monthly-mday": RecurrenceType.MONTHLY_MDAY,
    "monthly-by-day": RecurrenceType.MONTHLY_WDAY,
    "monthly-wday": RecurrenceType.MONTHLY_WDAY,
    "yearly": RecurrenceType.YEARLY,
}

WEEKDAY_NAMES = {
    "su": Weekday.SUNDAY,
    "mo": Weekday.MONDAY,
    "tu": Weekday.TUESDAY,
    "we": Weekday.WEDNESDAY,
    "th": Weekday.THURSDAY,
    "fr": Weekday.FRIDAY,
    "sa": Weekday.SATURDAY,
    "workdays": Weekday.WORKDAYS,
    "all": Weekday.ALLDAYS,
}

DAY_NAMES = {"sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"}


def parse_recurrence_type(value: str) -> int:
    """Parse a recurrence type name or integer code.

    Unknown integer codes are passed through so that rule validation
    reports them.

    Raises:
        argparse.ArgumentTypeError: If the value is neither a known name nor an integer
    """
    text = value.strip().lower()
    if text in TYPE_NAMES:
        return int(TYPE_NAMES[text])
    try:
        return int(text)
    except ValueError as err:
        raise argparse.ArgumentTypeError(
            f"Invalid recurrence type: {value}. Use one of {', '.join(TYPE_NAMES)} or a type code"
        ) from err


def parse_weekdays(value: str) -> int:
    """Parse a comma separated weekday list (``mo,we,fr``, ``workdays``) into a mask.

    Full weekday names and a plain integer mask are accepted as well.

    Raises:
        argparse.ArgumentTypeError: If a weekday is not recognized
    """
    text = value.strip().lower()
    if text.isdigit():
        return int(text)

    mask = 0
    for part in filter(None, (item.strip() for item in text.split(","))):
        if part in DAY_NAMES:
            part = part[:2]
        if part not in WEEKDAY_NAMES:
            raise argparse.ArgumentTypeError(f"Invalid weekday: {part}")
        mask |= int(WEEKDAY_NAMES[part])
    return mask


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime; values without offset stay naive.

    Raises:
        argparse.ArgumentTypeError: If the value is not an ISO-8601 date/datetime
    """
    try:
        return date_parser.isoparse(value.strip())
    except ValueError as err:
        raise argparse.ArgumentTypeError(
            f"Invalid date/time: {value}. Use ISO-8601, eg. 2021-06-01 or 2021-06-01T09:00"
        ) from err


def parse_datetime_list(value: str) -> list[datetime]:
    """Parse a comma separated list of ISO-8601 dates/datetimes."""
    return [parse_datetime(part) for part in value.split(",") if part.strip()]


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Returns:
        Configured ArgumentParser

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["--start", "2021-06-01T09:00", "--type", "daily"])
    """
    parser = argparse.ArgumentParser(
        prog="calrule",
        description="calrule - list the occurrences of a recurring calendar event",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --start 2021-06-01T09:00 --type daily --enddate 2021-06-05
  %(prog)s --start 2021-06-07T10:00 --tz Europe/Berlin --type weekly --weekdays mo,we,fr
  %(prog)s --start 2021-01-29 --type monthly-by-day --limit 6
  %(prog)s --start 2021-06-01T09:00 --type weekly --interval 2 --display-tz America/New_York
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show version information"
    )

    # Rule arguments
    rule_group = parser.add_argument_group("rule", "Recurrence rule options")

    rule_group.add_argument(
        "--start",
        type=parse_datetime,
        required=True,
        help="Start of the series (ISO-8601); without offset it is local to --tz",
    )

    rule_group.add_argument(
        "--tz",
        default=None,
        help="Timezone of the event (default: configured user timezone)",
    )

    rule_group.add_argument(
        "--type",
        dest="recur_type",
        type=parse_recurrence_type,
        default=int(RecurrenceType.NONE),
        help=f"Recurrence type: {', '.join(TYPE_NAMES)} or its code (default: none)",
    )

    rule_group.add_argument(
        "--interval", type=int, default=1, help="Every Nth day/week/month/year (default: 1)"
    )

    rule_group.add_argument(
        "--weekdays",
        type=parse_weekdays,
        default=0,
        help="Weekdays, eg. mo,we,fr or workdays (default: weekday of the start)",
    )

    rule_group.add_argument(
        "--enddate", type=parse_datetime, default=None, help="Last day of the series (ISO-8601)"
    )

    rule_group.add_argument(
        "--exceptions",
        type=parse_datetime_list,
        default=[],
        help="Comma separated dates to exclude (ISO-8601)",
    )

    # Output arguments
    output_group = parser.add_argument_group("output", "Output options")

    output_group.add_argument(
        "--display-tz",
        default=None,
        help="Timezone occurrences are shown in (default: configured user timezone)",
    )

    output_group.add_argument(
        "--limit", type=int, default=None, help="Show at most this many occurrences"
    )

    # Logging arguments
    logging_group = parser.add_argument_group("logging", "Logging configuration options")

    logging_group.add_argument(
        "--log-level", choices=LOG_LEVELS, help="Set both console and file log levels"
    )

    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    logging_group.add_argument(
        "--quiet", "-q", action="store_true", help="Only show errors on console"
    )

    logging_group.add_argument("--log-dir", help="Write log files to this directory")

    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )

    return parser


__all__ = [
    "create_parser",
    "parse_datetime",
    "parse_datetime_list",
    "parse_recurrence_type",
    "parse_weekdays",
]
