"""
Timezone package for calrule.

Resolves IANA timezone names with zoneinfo and carries the user/server
timezones callers work in as an explicit ``TimezoneContext``.

Example usage:
    >>> from calrule.timezone import TimezoneContext, convert_to_timezone
    >>> from datetime import datetime
    >>>
    >>> context = TimezoneContext.create(user_timezone="Europe/Berlin")
    >>> berlin = convert_to_timezone(datetime(2021, 6, 1, 9, 0), "Europe/Berlin")
"""

from .service import (
    TimezoneContext,
    TimezoneError,
    TimezoneService,
    convert_to_timezone,
    ensure_timezone_aware,
    get_timezone,
    get_timezone_service,
)

__all__ = [
    "TimezoneContext",
    "TimezoneError",
    "TimezoneService",
    "convert_to_timezone",
    "ensure_timezone_aware",
    "get_timezone",
    "get_timezone_service",
]
