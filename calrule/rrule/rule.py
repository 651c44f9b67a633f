"""Recurrence rule construction and validation."""

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Union

from ..timezone import convert_to_timezone
from .calendar_math import add_years, date_key, days_in_month, is_last_day_of_month, weekday_bit
from .exceptions import (
    InvalidInterval,
    InvalidRecurrenceType,
    InvalidWeekdayMask,
    NaiveStartError,
)
from .models import RecurrenceType, Weekday

if TYPE_CHECKING:
    from .cursor import RecurrenceCursor

logger = logging.getLogger(__name__)

# Series without an end date are capped this many years after their start
DEFAULT_SERIES_YEARS = 5


def _as_integer(value: Any) -> Optional[int]:
    """Read ints, digit strings and integral floats; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        return int(text) if text.lstrip("+").isdigit() else None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _coerce_type(type_code: Any) -> RecurrenceType:
    code = _as_integer(type_code)
    if code is None or code not in RecurrenceType._value2member_map_:
        raise InvalidRecurrenceType(type_code)
    return RecurrenceType(code)


def _coerce_interval(interval: Any) -> int:
    value = _as_integer(interval)
    if value is None or value < 1:
        raise InvalidInterval(interval)
    return value


def _coerce_mask(weekday_mask: Any) -> int:
    try:
        mask = int(weekday_mask or 0)
    except (TypeError, ValueError):
        raise InvalidWeekdayMask(weekday_mask) from None
    if mask < 0 or mask & ~int(Weekday.ALLDAYS):
        raise InvalidWeekdayMask(weekday_mask)
    return mask


class RecurrenceRule:
    """Immutable description of a repeating event series.

    All timestamps are compared in the timezone of ``start``: the end date
    and the exceptions are converted into it before being reduced to date
    keys. Derived values (the monthly ordinal / day of month, the default
    weekday mask and the end date key) are computed once here.

    A rule never iterates itself; call :meth:`cursor` (or iterate the rule)
    to walk its occurrences, as many times and as concurrently as needed.
    """

    __slots__ = (
        "_end_date",
        "_end_date_key",
        "_exceptions",
        "_interval",
        "_monthly_day_of_month",
        "_monthly_weekday_ordinal",
        "_start",
        "_type",
        "_weekday_mask",
    )

    def __init__(
        self,
        start: datetime,
        type: Union[RecurrenceType, int],  # noqa: A002
        interval: Union[int, str] = 1,
        end_date: Optional[datetime] = None,
        weekday_mask: int = 0,
        exceptions: Optional[Iterable[datetime]] = None,
    ) -> None:
        """Build a rule.

        Args:
            start: Timezone-aware start of the series, defines the series timezone
            type: Recurrence type or its integer code
            interval: Step multiplier, every Nth day/week/month/year
            end_date: Optional end of the series, None for an open series
            weekday_mask: Weekday bits for weekly and monthly-by-weekday rules
            exceptions: Dates to skip; their time of day is ignored

        Raises:
            InvalidRecurrenceType: If type is not one of the known codes
            InvalidInterval: If interval is not an integer >= 1
            InvalidWeekdayMask: If weekday_mask has bits outside Sunday..Saturday
            NaiveStartError: If start has no timezone
        """
        try:
            rtype = _coerce_type(type)
            rinterval = _coerce_interval(interval)
            if start.tzinfo is None or start.utcoffset() is None:
                raise NaiveStartError(f"Series start {start.isoformat()} has no timezone")
            mask = _coerce_mask(weekday_mask)
        except (InvalidRecurrenceType, InvalidInterval, InvalidWeekdayMask, NaiveStartError) as e:
            logger.warning(f"Rejected recurrence rule: {e.message}")
            raise

        self._start = start
        self._type = rtype
        self._interval = rinterval

        self._monthly_weekday_ordinal: Optional[int] = None
        self._monthly_day_of_month: Optional[int] = None
        day = start.day
        if rtype == RecurrenceType.MONTHLY_WDAY:
            # within the final seven days of the month means "last <weekday>"
            if day >= 21 and day > days_in_month(start.year, start.month) - 7:
                self._monthly_weekday_ordinal = -1
            else:
                self._monthly_weekday_ordinal = 1 + (day - 1) // 7
        elif rtype == RecurrenceType.MONTHLY_MDAY:
            self._monthly_day_of_month = day
            if day >= 28 and is_last_day_of_month(start):
                self._monthly_day_of_month = -1

        self._end_date = self._to_series_timezone(end_date) if end_date is not None else None
        if rtype == RecurrenceType.NONE:
            self._end_date_key = date_key(start)
        elif self._end_date is None:
            self._end_date_key = date_key(add_years(start, DEFAULT_SERIES_YEARS))
        else:
            self._end_date_key = date_key(self._end_date)

        if not mask and rtype.uses_weekdays:
            mask = int(weekday_bit(start))
        self._weekday_mask = mask

        self._exceptions = frozenset(
            date_key(self._to_series_timezone(exception)) for exception in exceptions or ()
        )

        logger.debug(
            "Built recurrence rule: start=%s type=%s interval=%d end_key=%d mask=%d exceptions=%d",
            start.isoformat(),
            rtype.name,
            rinterval,
            self._end_date_key,
            mask,
            len(self._exceptions),
        )

    def _to_series_timezone(self, dt: datetime) -> datetime:
        """Express a timestamp in the series timezone; naive ones are taken as local to it."""
        return convert_to_timezone(dt, self._start.tzinfo)

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_end_date_key") and hasattr(self, "_exceptions"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    @property
    def start(self) -> datetime:
        """Start of the series, in the series timezone."""
        return self._start

    @property
    def type(self) -> RecurrenceType:
        return self._type

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def end_date(self) -> Optional[datetime]:
        """Explicit end date in the series timezone, None for an open series."""
        return self._end_date

    @property
    def end_date_key(self) -> int:
        """Last valid date key; the 5-year cap for open series."""
        return self._end_date_key

    @property
    def weekday_mask(self) -> int:
        return self._weekday_mask

    @property
    def monthly_weekday_ordinal(self) -> Optional[int]:
        """1..5 or -1 for "last", only set for monthly-by-weekday rules."""
        return self._monthly_weekday_ordinal

    @property
    def monthly_day_of_month(self) -> Optional[int]:
        """Day of month or -1 for "last day", only set for monthly-by-date rules."""
        return self._monthly_day_of_month

    @property
    def exceptions(self) -> frozenset:
        """Excluded date keys."""
        return self._exceptions

    @property
    def timezone(self) -> Any:
        """Timezone all of the rule's dates are compared in."""
        return self._start.tzinfo

    def cursor(self) -> "RecurrenceCursor":
        """Get a new cursor positioned at the start of the series."""
        from .cursor import RecurrenceCursor  # noqa: PLC0415

        return RecurrenceCursor(self)

    def __iter__(self) -> Iterator[datetime]:
        return iter(self.cursor())

    def occurrences(self, limit: Optional[int] = None) -> list[datetime]:
        """List the occurrences of the series.

        Args:
            limit: Maximum number of occurrences to return, None for all

        Returns:
            Occurrence datetimes in increasing order
        """
        result = []
        for occurrence in self:
            if limit is not None and len(result) >= limit:
                break
            result.append(occurrence)
        return result

    def __str__(self) -> str:
        from .describe import describe  # noqa: PLC0415

        return describe(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(start={self._start.isoformat()!r}, type={self._type.name}, "
            f"interval={self._interval}, end_date_key={self._end_date_key}, "
            f"weekday_mask={self._weekday_mask}, exceptions={sorted(self._exceptions)!r})"
        )


def build_rule(
    start: datetime,
    type: Union[RecurrenceType, int],  # noqa: A002
    interval: Union[int, str] = 1,
    end_date: Optional[datetime] = None,
    weekday_mask: int = 0,
    exceptions: Optional[Iterable[datetime]] = None,
) -> RecurrenceRule:
    """Build a validated recurrence rule, see :class:`RecurrenceRule`."""
    return RecurrenceRule(start, type, interval, end_date, weekday_mask, exceptions)
