"""Data models for recurrence rules and the event records they are read from."""

from datetime import datetime
from enum import IntEnum, IntFlag
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecurrenceType(IntEnum):
    """Recurrence types, valued with the codes persisted in event records."""

    NONE = 0
    DAILY = 1
    WEEKLY = 2
    MONTHLY_MDAY = 3
    MONTHLY_WDAY = 4
    YEARLY = 5

    @property
    def label(self) -> str:
        """Display label for the type."""
        return _TYPE_LABELS[self]

    @property
    def uses_weekdays(self) -> bool:
        """Whether the weekday mask drives stepping for this type."""
        return self in (RecurrenceType.WEEKLY, RecurrenceType.MONTHLY_WDAY)


_TYPE_LABELS = {
    RecurrenceType.NONE: "None",
    RecurrenceType.DAILY: "Daily",
    RecurrenceType.WEEKLY: "Weekly",
    RecurrenceType.MONTHLY_MDAY: "Monthly (by date)",
    RecurrenceType.MONTHLY_WDAY: "Monthly (by day)",
    RecurrenceType.YEARLY: "Yearly",
}


class Weekday(IntFlag):
    """Weekday bits as stored in the weekday mask (Sunday is the lowest bit)."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 4
    WEDNESDAY = 8
    THURSDAY = 16
    FRIDAY = 32
    SATURDAY = 64
    WORKDAYS = 62
    ALLDAYS = 127


# Display order of the weekdays, Monday first
WEEKDAY_LABELS = (
    (Weekday.MONDAY, "Monday"),
    (Weekday.TUESDAY, "Tuesday"),
    (Weekday.WEDNESDAY, "Wednesday"),
    (Weekday.THURSDAY, "Thursday"),
    (Weekday.FRIDAY, "Friday"),
    (Weekday.SATURDAY, "Saturday"),
    (Weekday.SUNDAY, "Sunday"),
)


class EventRecurrenceRecord(BaseModel):
    """Recurrence-relevant fields of a calendar application's event record.

    Timestamps are accepted as datetimes, ISO-8601 strings or epoch seconds.
    The type code and interval are kept as plain integers so that invalid
    values reach rule validation instead of failing here.
    """

    start: datetime = Field(..., description="Start of the series")
    tzid: Optional[str] = Field(default=None, description="Timezone the event is declared in")
    recur_type: int = Field(default=RecurrenceType.NONE, description="Recurrence type code")
    recur_interval: int = Field(default=1, description="Recurrence interval")
    recur_enddate: Optional[datetime] = Field(default=None, description="End of the series")
    recur_data: Optional[int] = Field(default=0, description="Weekday bitmask, null for none")
    recur_exception: List[datetime] = Field(
        default_factory=list, description="Excluded occurrence dates"
    )

    model_config = ConfigDict(extra="ignore")


class RecurrenceFields(BaseModel):
    """Recurrence fields to merge back into a calendar application's event record."""

    recur_type: int = Field(..., description="Recurrence type code")
    recur_interval: int = Field(..., description="Recurrence interval")
    recur_enddate: Optional[int] = Field(
        default=None, description="End of the series as epoch seconds"
    )
    recur_data: int = Field(default=0, description="Weekday bitmask")
    recur_exception: List[int] = Field(
        default_factory=list, description="Excluded occurrence dates as epoch seconds"
    )
