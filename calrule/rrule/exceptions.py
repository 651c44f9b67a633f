"""Recurrence-specific exceptions for error handling."""


class RecurrenceError(Exception):
    """Base exception for recurrence rule errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRecurrenceType(RecurrenceError, ValueError):
    """Exception raised when a rule is built with an unknown recurrence type code."""

    def __init__(self, type_code: object) -> None:
        super().__init__(f"Recurrence type {type_code!r} is not valid")
        self.type_code = type_code


class InvalidInterval(RecurrenceError, ValueError):
    """Exception raised when the interval is not an integer >= 1."""

    def __init__(self, interval: object) -> None:
        super().__init__(f"Recurrence interval {interval!r} is not valid")
        self.interval = interval


class InvalidWeekdayMask(RecurrenceError, ValueError):
    """Exception raised when the weekday bitmask has bits outside Sunday..Saturday."""

    def __init__(self, mask: object) -> None:
        super().__init__(f"Weekday mask {mask!r} is not valid")
        self.mask = mask


class NaiveStartError(RecurrenceError, ValueError):
    """Exception raised when the series start carries no timezone."""


class UnreachableState(RecurrenceError, AssertionError):
    """Raised when the stepping algorithm meets a recurrence type it does not know.

    Rules are validated at construction, so this signals a programming error.
    """
