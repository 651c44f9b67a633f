"""Calendar arithmetic helpers shared by rule construction and stepping."""

import calendar
from datetime import date, datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

from .models import Weekday


def days_in_month(year: int, month: int) -> int:
    """Get the number of days of a month, honouring leap years.

    Args:
        year: Calendar year
        month: Month number (1-12)

    Returns:
        Day count of the month (28-31)
    """
    return calendar.monthrange(year, month)[1]


def date_key(dt: datetime) -> int:
    """Reduce a date to its YYYYMMDD integer key, ignoring time of day."""
    return dt.year * 10000 + dt.month * 100 + dt.day


def weekday_bit(dt: datetime) -> Weekday:
    """Get the weekday mask bit of a date (Sunday=1 ... Saturday=64)."""
    # datetime.weekday() counts from Monday=0, the mask from Sunday
    return Weekday(1 << ((dt.weekday() + 1) % 7))


def is_last_day_of_month(dt: datetime) -> bool:
    """Check whether the date is the final day of its month."""
    return dt.day == days_in_month(dt.year, dt.month)


def set_date(dt: datetime, year: int, month: int, day: int) -> datetime:
    """Move a datetime to another calendar date, keeping time of day and zone.

    Out-of-range components roll over the way calendar arithmetic does:
    month 13 is January of the next year, day 0 is the last day of the
    previous month and day 31 of a 30-day month is the 1st of the next one.

    Args:
        dt: Datetime providing time of day and tzinfo
        year: Target year
        month: Target month, may be outside 1-12
        day: Target day, may be outside the month's range

    Returns:
        Datetime on the rolled-over date
    """
    target: date = date(year, 1, 1) + relativedelta(months=month - 1)
    target += timedelta(days=day - 1)
    return dt.replace(year=target.year, month=target.month, day=target.day)


def add_years(dt: datetime, years: int) -> datetime:
    """Add whole years; 29 February rolls to 1 March in non-leap years."""
    return set_date(dt, dt.year + years, dt.month, dt.day)


def normalize_wall_time(dt: datetime) -> datetime:
    """Resolve a wall time skipped by a DST transition to the one it denotes.

    Calendar steps keep the time of day, so they can produce a local time
    that never happens (02:30 on a spring-forward night in Berlin). Going
    through UTC moves it past the gap, 02:30 CET becoming 03:30 CEST.
    Existing wall times come back unchanged.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).astimezone(dt.tzinfo)
