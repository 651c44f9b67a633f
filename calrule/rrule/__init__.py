"""Recurrence rule engine: rules, cursors, descriptions and event adapters."""

from .adapters import from_event, to_event_fields
from .calendar_math import date_key, days_in_month
from .cursor import RecurrenceCursor
from .describe import describe
from .exceptions import (
    InvalidInterval,
    InvalidRecurrenceType,
    InvalidWeekdayMask,
    NaiveStartError,
    RecurrenceError,
    UnreachableState,
)
from .models import EventRecurrenceRecord, RecurrenceFields, RecurrenceType, Weekday
from .rule import DEFAULT_SERIES_YEARS, RecurrenceRule, build_rule

__all__ = [
    "DEFAULT_SERIES_YEARS",
    "EventRecurrenceRecord",
    "InvalidInterval",
    "InvalidRecurrenceType",
    "InvalidWeekdayMask",
    "NaiveStartError",
    "RecurrenceCursor",
    "RecurrenceError",
    "RecurrenceFields",
    "RecurrenceRule",
    "RecurrenceType",
    "UnreachableState",
    "Weekday",
    "build_rule",
    "date_key",
    "days_in_month",
    "describe",
    "from_event",
    "to_event_fields",
]
