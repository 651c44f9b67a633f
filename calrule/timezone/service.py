"""Timezone resolution and conversion for recurrence rules.

Timezones are ``zoneinfo.ZoneInfo`` objects so that adding days to an aware
datetime keeps its local time of day across DST changes, which the stepping
algorithm relies on.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import TYPE_CHECKING, Any, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

if TYPE_CHECKING:
    from ..config.settings import CalRuleSettings

logger = logging.getLogger(__name__)

TimezoneLike = Union[str, tzinfo]


class TimezoneError(Exception):
    """Raised when timezone operations fail."""


class TimezoneService:
    """Resolves timezone names and moves datetimes between timezones.

    Resolved zones are cached per name.
    """

    def __init__(self) -> None:
        """Initialize timezone service."""
        self._zones: dict[str, tzinfo] = {}

    def get_timezone(self, tz: Optional[TimezoneLike]) -> tzinfo:
        """Resolve a timezone name (or pass through a tzinfo).

        Args:
            tz: IANA timezone name, tzinfo object, or None for UTC

        Returns:
            Timezone object

        Raises:
            TimezoneError: If the name is not a known timezone
        """
        if tz is None:
            return dt_timezone.utc
        if isinstance(tz, tzinfo):
            return tz
        if not isinstance(tz, str) or not tz.strip():
            raise TimezoneError(f"Invalid timezone name: {tz!r}")

        name = tz.strip()
        cached = self._zones.get(name)
        if cached is not None:
            return cached

        try:
            zone = ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise TimezoneError(f"Unknown timezone '{name}'") from e

        logger.debug(f"Resolved timezone: {name}")
        self._zones[name] = zone
        return zone

    def ensure_timezone_aware(self, dt: datetime, fallback_tz: Optional[TimezoneLike] = None) -> datetime:
        """Ensure datetime has timezone information.

        Naive datetimes are taken as wall-clock time in ``fallback_tz``
        (UTC by default); aware ones are returned unchanged.

        Raises:
            TimezoneError: If the fallback timezone cannot be resolved
            TypeError: If dt is not a datetime object
        """
        if not isinstance(dt, datetime):
            raise TypeError(f"Expected datetime object, got {type(dt)}")

        if dt.tzinfo is not None:
            return dt
        return dt.replace(tzinfo=self.get_timezone(fallback_tz))

    def convert_to_timezone(
        self, dt: datetime, tz: TimezoneLike, fallback_tz: Optional[TimezoneLike] = None
    ) -> datetime:
        """Convert a datetime to the given timezone.

        Args:
            dt: Datetime to convert; naive values are first placed in fallback_tz
            tz: Target timezone
            fallback_tz: Timezone of naive input, defaults to the target timezone

        Returns:
            Datetime expressed in the target timezone

        Raises:
            TimezoneError: If a timezone cannot be resolved
            TypeError: If dt is not a datetime object
        """
        target = self.get_timezone(tz)
        aware = self.ensure_timezone_aware(dt, fallback_tz if fallback_tz is not None else target)
        return aware.astimezone(target)


@dataclass(frozen=True)
class TimezoneContext:
    """Timezones a caller works in, carried explicitly into adapters and descriptions.

    Attributes:
        user_timezone: Timezone of the current user; naive "usertime"
            timestamps are in it and end dates are displayed in it
        server_timezone: Timezone naive "servertime" timestamps are in
        date_format: strftime format for dates shown to the user
    """

    user_timezone: tzinfo = dt_timezone.utc
    server_timezone: tzinfo = dt_timezone.utc
    date_format: str = "%Y-%m-%d"

    @classmethod
    def create(
        cls,
        user_timezone: Optional[TimezoneLike] = None,
        server_timezone: Optional[TimezoneLike] = None,
        date_format: str = "%Y-%m-%d",
    ) -> "TimezoneContext":
        """Build a context from timezone names or tzinfo objects.

        Raises:
            TimezoneError: If a timezone name is unknown
        """
        service = get_timezone_service()
        return cls(
            user_timezone=service.get_timezone(user_timezone),
            server_timezone=service.get_timezone(server_timezone),
            date_format=date_format,
        )

    @classmethod
    def from_settings(cls, settings: "CalRuleSettings") -> "TimezoneContext":
        """Build a context from application settings."""
        return cls.create(
            user_timezone=settings.user_timezone,
            server_timezone=settings.server_timezone,
            date_format=settings.date_format,
        )

    def timestamp_timezone(self, usertime: bool = True) -> tzinfo:
        """Timezone naive timestamps are interpreted in."""
        return self.user_timezone if usertime else self.server_timezone


# Global service instance (using module-level variable instead of global statement)
_timezone_service: Optional[TimezoneService] = None


def get_timezone_service() -> TimezoneService:
    """Get global timezone service instance.

    Returns:
        Singleton TimezoneService instance.
    """
    if globals()["_timezone_service"] is None:
        globals()["_timezone_service"] = TimezoneService()
    return globals()["_timezone_service"]


def get_timezone(tz: Optional[TimezoneLike]) -> Any:
    """Resolve a timezone name or tzinfo."""
    return get_timezone_service().get_timezone(tz)


def ensure_timezone_aware(dt: datetime, fallback_tz: Optional[TimezoneLike] = None) -> datetime:
    """Ensure datetime has timezone information."""
    return get_timezone_service().ensure_timezone_aware(dt, fallback_tz)


def convert_to_timezone(
    dt: datetime, tz: TimezoneLike, fallback_tz: Optional[TimezoneLike] = None
) -> datetime:
    """Convert a datetime to the given timezone."""
    return get_timezone_service().convert_to_timezone(dt, tz, fallback_tz)
