"""Shared fixtures for the calrule test suite."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from calrule.config.settings import reset_settings


@pytest.fixture(scope="session")
def berlin() -> ZoneInfo:
    """Europe/Berlin timezone, observes DST."""
    return ZoneInfo("Europe/Berlin")


@pytest.fixture(scope="session")
def new_york() -> ZoneInfo:
    """America/New_York timezone, observes DST."""
    return ZoneInfo("America/New_York")


@pytest.fixture
def utc_start() -> datetime:
    """Tuesday 2021-06-01 09:00 UTC."""
    return datetime(2021, 6, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clean_settings():
    """Clean up global settings state before and after tests."""
    reset_settings()
    yield
    reset_settings()


def keys_of(occurrences) -> list[int]:
    """Reduce occurrences to YYYYMMDD keys for compact assertions."""
    return [dt.year * 10000 + dt.month * 100 + dt.day for dt in occurrences]


@pytest.fixture
def as_keys():
    """Expose keys_of as a fixture so test modules need no conftest import."""
    return keys_of
