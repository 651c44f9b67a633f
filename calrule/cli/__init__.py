"""CLI module for calrule.

Builds a recurrence rule from command-line arguments and prints its
description followed by the occurrences of the series.
"""

import logging
import sys
from datetime import datetime, tzinfo
from typing import Optional

from ..config import get_settings
from ..rrule import RecurrenceError, RecurrenceRule, build_rule, describe
from ..timezone import TimezoneContext, TimezoneError, get_timezone
from ..utils.logging import VERBOSE, apply_command_line_overrides, setup_logging
from .parser import create_parser

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"


def format_header(rule: RecurrenceRule, tz_name: str, context: TimezoneContext) -> str:
    """Format the first output line: start, its timezone and the rule description."""
    start = rule.start
    header = f"{start:%A}, {start.strftime(DATETIME_FORMAT)} ({tz_name})"
    description = describe(rule, context=context)
    return f"{header} {description}" if description else header


def format_occurrence(number: int, occurrence: datetime, display_tz: tzinfo) -> str:
    local = occurrence.astimezone(display_tz)
    return f"{number}: {local:%A}, {local.strftime(DATETIME_FORMAT)} {local.tzname()}"


def main_entry(argv: Optional[list[str]] = None) -> int:
    """Main entry point with argument parsing.

    Args:
        argv: Arguments without the program name, sys.argv by default

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.limit is not None and args.limit < 0:
        parser.error("--limit must not be negative")

    settings = apply_command_line_overrides(get_settings(), args)
    setup_logging(settings)

    try:
        context = TimezoneContext.from_settings(settings)
        tz_name = args.tz or settings.user_timezone
        series_tz = get_timezone(tz_name)
        display_tz = get_timezone(args.display_tz) if args.display_tz else context.user_timezone

        start = args.start
        if start.tzinfo is None:
            start = start.replace(tzinfo=series_tz)
        else:
            start = start.astimezone(series_tz)

        rule = build_rule(
            start,
            args.recur_type,
            args.interval,
            args.enddate,
            args.weekdays,
            args.exceptions,
        )
    except (RecurrenceError, TimezoneError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_header(rule, tz_name, context))
    occurrences = rule.occurrences(args.limit)
    for number, occurrence in enumerate(occurrences, start=1):
        print(format_occurrence(number, occurrence, display_tz))

    logger.log(VERBOSE, "Listed %d occurrences of %r", len(occurrences), rule)
    return 0


__all__ = [
    "create_parser",
    "format_header",
    "format_occurrence",
    "main_entry",
]
