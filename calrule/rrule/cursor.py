"""Forward-only iteration over the occurrences of a recurrence rule."""

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .calendar_math import add_years, date_key, normalize_wall_time, set_date, weekday_bit
from .exceptions import UnreachableState
from .models import RecurrenceType, Weekday

if TYPE_CHECKING:
    from .rule import RecurrenceRule

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(weeks=1)


class RecurrenceCursor:
    """Position within the occurrences of a :class:`RecurrenceRule`.

    The cursor starts at the rule's start and only moves forward. Callers
    check :meth:`valid` before consuming :meth:`current`. Iterating the
    cursor does that for them, yielding each valid occurrence and stepping
    past it; iteration also skips a series start listed as an exception.

    A cursor never modifies its rule. It is not safe to advance one cursor
    from several threads; give each thread its own cursor instead.
    """

    def __init__(self, rule: "RecurrenceRule") -> None:
        self._rule = rule
        self._current = rule.start

    @property
    def rule(self) -> "RecurrenceRule":
        return self._rule

    def current(self) -> datetime:
        """Get the occurrence the cursor is positioned on."""
        return self._current

    def key(self) -> int:
        """Get the YYYYMMDD date key of the current position."""
        return date_key(self._current)

    def valid(self) -> bool:
        """Check whether the current position is still within the series."""
        return self.key() <= self._rule.end_date_key

    def reset(self) -> None:
        """Move the cursor back to the start of the series."""
        self._current = self._rule.start

    rewind = reset

    def step(self) -> None:
        """Advance to the next occurrence that is not an exception.

        Exceptions are never back-filled: when every remaining candidate is
        excluded the cursor simply ends up past the end of the series.
        """
        exceptions = self._rule.exceptions
        self.step_no_exception()
        while exceptions and self.key() in exceptions and self.valid():
            logger.debug("Skipping excepted occurrence %s", self._current.date().isoformat())
            self.step_no_exception()

    def step_no_exception(self) -> None:
        """Advance to the next date matching the pattern, ignoring exceptions."""
        rule = self._rule
        rtype = rule.type

        if rtype in (RecurrenceType.NONE, RecurrenceType.DAILY):
            # NONE moves one day as well, which ends its single-day series
            self._current += timedelta(days=rule.interval)
        elif rtype == RecurrenceType.WEEKLY:
            self._current = self._step_weekly(self._current)
        elif rtype == RecurrenceType.MONTHLY_WDAY:
            self._current = self._step_monthly_by_weekday(self._current)
        elif rtype == RecurrenceType.MONTHLY_MDAY:
            self._current = self._step_monthly_by_date(self._current)
        elif rtype == RecurrenceType.YEARLY:
            self._current = add_years(self._current, rule.interval)
        else:
            raise UnreachableState(f"Cannot step recurrence type {rtype!r}")
        self._current = normalize_wall_time(self._current)

    def _step_weekly(self, current: datetime) -> datetime:
        mask = self._rule.weekday_mask
        interval = self._rule.interval
        while True:
            # weeks start on Sunday, so leaving a Saturday enters the next week
            if interval > 1 and weekday_bit(current) == Weekday.SATURDAY:
                current += ONE_WEEK * (interval - 1)
            current += ONE_DAY
            if mask & weekday_bit(current):
                return current

    def _step_monthly_by_weekday(self, current: datetime) -> datetime:
        ordinal = self._rule.monthly_weekday_ordinal or 1
        mask = self._rule.weekday_mask
        if ordinal < 0:
            # last day of the target month, then search backwards
            current = set_date(current, current.year, current.month + self._rule.interval + 1, 0)
            direction = -ONE_DAY
        else:
            current = set_date(current, current.year, current.month + self._rule.interval, 1)
            if ordinal > 1:
                current += ONE_WEEK * (ordinal - 1)
            direction = ONE_DAY
        while not mask & weekday_bit(current):
            current += direction
        return current

    def _step_monthly_by_date(self, current: datetime) -> datetime:
        day_of_month = self._rule.monthly_day_of_month or current.day
        if day_of_month < 0:
            # day 0 of the month after the target is the target's last day
            return set_date(current, current.year, current.month + self._rule.interval + 1, 0)
        return set_date(current, current.year, current.month + self._rule.interval, day_of_month)

    def __iter__(self) -> "RecurrenceCursor":
        return self

    def __next__(self) -> datetime:
        # only the series start can still sit on an exception here
        if self.key() in self._rule.exceptions:
            self.step()
        if not self.valid():
            logger.debug("Recurrence series ended after %d", self._rule.end_date_key)
            raise StopIteration
        occurrence = self._current
        self.step()
        return occurrence

    def __repr__(self) -> str:
        return f"{type(self).__name__}(current={self._current.isoformat()!r}, valid={self.valid()})"
