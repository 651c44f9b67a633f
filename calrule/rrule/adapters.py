"""Conversion between calendar event records and recurrence rules."""

import logging
from collections.abc import Mapping
from typing import Any, Union

from ..timezone import TimezoneContext, convert_to_timezone, ensure_timezone_aware, get_timezone
from .calendar_math import set_date
from .models import EventRecurrenceRecord, RecurrenceFields
from .rule import RecurrenceRule

logger = logging.getLogger(__name__)

EventRecord = Union[EventRecurrenceRecord, Mapping[str, Any]]


def from_event(
    record: EventRecord, context: TimezoneContext, usertime: bool = True
) -> RecurrenceRule:
    """Build the recurrence rule of a calendar event record.

    Naive timestamps of the record are interpreted in the context's user
    timezone (``usertime=True``) or server timezone. The start is then
    moved into the event's own timezone (``tzid``), which becomes the
    timezone all of the rule's comparisons happen in.

    Args:
        record: Event record, as model or as mapping with the ``recur_*`` keys
        context: Timezones of the calling application
        usertime: Whether naive timestamps are user time rather than server time

    Returns:
        Recurrence rule of the event

    Raises:
        pydantic.ValidationError: If the record is malformed
        TimezoneError: If the event's timezone is unknown
        RecurrenceError: If the recurrence fields do not form a valid rule
    """
    if not isinstance(record, EventRecurrenceRecord):
        record = EventRecurrenceRecord.model_validate(dict(record))

    timestamp_tz = context.timestamp_timezone(usertime)
    start = ensure_timezone_aware(record.start, timestamp_tz)
    if record.tzid:
        start = convert_to_timezone(start, get_timezone(record.tzid))

    end_date = None
    if record.recur_enddate is not None:
        end_date = ensure_timezone_aware(record.recur_enddate, timestamp_tz)
    exceptions = [
        ensure_timezone_aware(exception, timestamp_tz) for exception in record.recur_exception
    ]

    logger.debug(
        "Reading recurrence of event starting %s (tzid=%s, type=%s)",
        start.isoformat(),
        record.tzid,
        record.recur_type,
    )
    return RecurrenceRule(
        start,
        record.recur_type,
        record.recur_interval,
        end_date,
        record.recur_data or 0,
        exceptions,
    )


def to_event_fields(rule: RecurrenceRule) -> RecurrenceFields:
    """Project a rule back onto the recurrence fields of an event record.

    Exception dates come back as timestamps at the series start's time of
    day, the end date only when the rule was given one explicitly.

    Args:
        rule: Rule to project

    Returns:
        Fields to merge into the caller's event record (``.model_dump()`` for a dict)
    """
    exceptions = []
    for key in sorted(rule.exceptions):
        year, rest = divmod(key, 10000)
        month, day = divmod(rest, 100)
        exceptions.append(int(set_date(rule.start, year, month, day).timestamp()))

    return RecurrenceFields(
        recur_type=int(rule.type),
        recur_interval=rule.interval,
        recur_enddate=int(rule.end_date.timestamp()) if rule.end_date is not None else None,
        recur_data=rule.weekday_mask,
        recur_exception=exceptions,
    )
