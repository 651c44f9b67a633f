"""calrule - timezone-correct recurrence rules for calendar events."""

__version__ = "1.0.0"
__author__ = "calrule developers"
__description__ = "Recurrence rule engine producing the occurrence dates of repeating calendar events"

from .rrule import (  # noqa: E402
    RecurrenceCursor,
    RecurrenceError,
    RecurrenceRule,
    RecurrenceType,
    Weekday,
    build_rule,
    describe,
    from_event,
    to_event_fields,
)
from .timezone import TimezoneContext, TimezoneError  # noqa: E402

# Package metadata
__all__ = [
    "RecurrenceCursor",
    "RecurrenceError",
    "RecurrenceRule",
    "RecurrenceType",
    "TimezoneContext",
    "TimezoneError",
    "Weekday",
    "__author__",
    "__description__",
    "__version__",
    "build_rule",
    "describe",
    "from_event",
    "to_event_fields",
]
