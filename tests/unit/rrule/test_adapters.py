"""Unit tests for converting between event records and recurrence rules."""

from datetime import datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from calrule.rrule import (
    EventRecurrenceRecord,
    InvalidRecurrenceType,
    RecurrenceFields,
    RecurrenceRule,
    RecurrenceType,
    Weekday,
    from_event,
    to_event_fields,
)
from calrule.timezone import TimezoneContext, TimezoneError, ensure_timezone_aware

# 2021-06-01 09:00 UTC
START_TS = 1622538000
DAY = 86400


@pytest.fixture
def context() -> TimezoneContext:
    """User in New York, server on UTC."""
    return TimezoneContext.create(user_timezone="America/New_York", server_timezone="UTC")


class TestFromEvent:
    """Test building rules from event records."""

    def test_from_event_when_naive_usertime_then_user_timezone_then_event_timezone(
        self, context
    ) -> None:
        record = {
            "start": datetime(2021, 6, 1, 9, 0),
            "tzid": "Europe/Berlin",
            "recur_type": RecurrenceType.WEEKLY,
            "recur_interval": 2,
            "recur_data": int(Weekday.MONDAY | Weekday.WEDNESDAY),
        }

        rule = from_event(record, context)

        # 09:00 New York is 15:00 Berlin
        assert rule.start == datetime(2021, 6, 1, 15, 0, tzinfo=ZoneInfo("Europe/Berlin"))
        assert rule.start.tzinfo == ZoneInfo("Europe/Berlin")
        assert rule.type is RecurrenceType.WEEKLY
        assert rule.interval == 2
        assert rule.weekday_mask == 10

    def test_from_event_when_servertime_then_server_timezone(self, context) -> None:
        record = {"start": datetime(2021, 6, 1, 9, 0), "tzid": "Europe/Berlin"}

        rule = from_event(record, context, usertime=False)

        assert rule.start.hour == 11

    def test_from_event_when_no_tzid_then_stays_in_timestamp_timezone(self, context) -> None:
        rule = from_event({"start": datetime(2021, 6, 1, 9, 0)}, context)

        assert rule.start.tzinfo == ZoneInfo("America/New_York")
        assert rule.start.hour == 9

    def test_from_event_when_epoch_seconds_then_parsed_as_utc(self, context) -> None:
        record = {
            "start": START_TS,
            "tzid": "UTC",
            "recur_type": RecurrenceType.DAILY,
            "recur_enddate": START_TS + 4 * DAY,
            "recur_exception": [START_TS + 2 * DAY],
        }

        rule = from_event(record, context)

        assert rule.start == datetime(2021, 6, 1, 9, 0, tzinfo=timezone.utc)
        assert rule.end_date_key == 20210605
        assert rule.exceptions == frozenset({20210603})

    def test_from_event_when_naive_end_then_reduced_after_conversion(self, context) -> None:
        # 22:00 New York on 06-05 is already 06-06 in Berlin
        record = {
            "start": datetime(2021, 6, 1, 9, 0),
            "tzid": "Europe/Berlin",
            "recur_type": RecurrenceType.DAILY,
            "recur_enddate": datetime(2021, 6, 5, 22, 0),
        }

        rule = from_event(record, context)

        assert rule.end_date_key == 20210606

    def test_from_event_when_model_given_then_used_directly(self, context) -> None:
        record = EventRecurrenceRecord(
            start=datetime(2021, 6, 1, 9, 0, tzinfo=timezone.utc), recur_type=5
        )

        rule = from_event(record, context)

        assert rule.type is RecurrenceType.YEARLY

    def test_from_event_when_extra_fields_then_ignored(self, context) -> None:
        record = {"start": START_TS, "title": "Standup", "owner": 7, "recur_type": 1}

        assert from_event(record, context).type is RecurrenceType.DAILY

    def test_from_event_when_start_missing_then_validation_error(self, context) -> None:
        with pytest.raises(ValidationError):
            from_event({"recur_type": 1}, context)

    def test_from_event_when_type_unknown_then_invalid_recurrence_type(self, context) -> None:
        with pytest.raises(InvalidRecurrenceType):
            from_event({"start": START_TS, "recur_type": 9}, context)

    def test_from_event_when_tzid_unknown_then_timezone_error(self, context) -> None:
        with pytest.raises(TimezoneError):
            from_event({"start": START_TS, "tzid": "Mars/Olympus_Mons"}, context)

    def test_from_event_when_naive_timestamps_then_localized_by_timezone_service(
        self, context
    ) -> None:
        start = datetime(2021, 6, 1, 9, 0)
        end = datetime(2021, 6, 5, 9, 0)
        record = {"start": start, "recur_type": 1, "recur_enddate": end}

        with patch(
            "calrule.rrule.adapters.ensure_timezone_aware", wraps=ensure_timezone_aware
        ) as mock_ensure:
            from_event(record, context, usertime=False)

        server_tz = context.server_timezone
        assert [call.args for call in mock_ensure.call_args_list] == [
            (start, server_tz),
            (end, server_tz),
        ]

    def test_from_event_when_recur_data_null_then_weekly_uses_start_weekday(self, context) -> None:
        record = {"start": START_TS, "tzid": "UTC", "recur_type": 2, "recur_data": None}

        rule = from_event(record, context)

        assert rule.weekday_mask == Weekday.TUESDAY


class TestToEventFields:
    """Test projecting rules back onto event fields."""

    def test_to_event_fields_when_full_rule_then_all_fields(self) -> None:
        start = datetime(2021, 6, 1, 9, 0, tzinfo=timezone.utc)
        rule = RecurrenceRule(
            start,
            RecurrenceType.DAILY,
            2,
            end_date=datetime(2021, 6, 30, 9, 0, tzinfo=timezone.utc),
            exceptions=[
                datetime(2021, 6, 5, 18, 0, tzinfo=timezone.utc),
                datetime(2021, 6, 3, 0, 0, tzinfo=timezone.utc),
            ],
        )

        fields = to_event_fields(rule)

        assert isinstance(fields, RecurrenceFields)
        assert fields.recur_type == 1
        assert fields.recur_interval == 2
        assert fields.recur_enddate == START_TS + 29 * DAY
        assert fields.recur_data == 0
        # exceptions come back sorted, at the start's time of day
        assert fields.recur_exception == [START_TS + 2 * DAY, START_TS + 4 * DAY]

    def test_to_event_fields_when_open_series_then_enddate_absent(self) -> None:
        rule = RecurrenceRule(datetime(2021, 6, 1, 9, 0, tzinfo=timezone.utc), RecurrenceType.WEEKLY)

        fields = to_event_fields(rule)

        assert fields.recur_enddate is None
        assert fields.recur_data == int(Weekday.TUESDAY)
        assert fields.model_dump()["recur_exception"] == []


class TestRoundTrip:
    """Test that records survive a rule round trip."""

    @pytest.mark.parametrize(
        "record",
        [
            {
                "start": START_TS,
                "tzid": "UTC",
                "recur_type": 1,
                "recur_interval": 1,
                "recur_enddate": START_TS + 4 * DAY,
                "recur_data": 0,
                "recur_exception": [START_TS + 2 * DAY],
            },
            {
                "start": START_TS,
                "tzid": "Europe/Berlin",
                "recur_type": 2,
                "recur_interval": 2,
                "recur_enddate": START_TS + 60 * DAY,
                "recur_data": int(Weekday.WORKDAYS),
                "recur_exception": [START_TS + 7 * DAY, START_TS + 14 * DAY],
            },
            {
                "start": START_TS,
                "tzid": "America/New_York",
                "recur_type": 4,
                "recur_interval": 1,
                "recur_enddate": None,
                "recur_data": int(Weekday.TUESDAY),
                "recur_exception": [],
            },
            {
                "start": START_TS,
                "tzid": "Australia/Sydney",
                "recur_type": 3,
                "recur_interval": 3,
                "recur_enddate": START_TS + 400 * DAY,
                "recur_data": 0,
                "recur_exception": [],
            },
        ],
        ids=["daily", "weekly", "monthly-by-day", "monthly-by-date"],
    )
    def test_to_event_fields_when_from_event_then_record_reproduced(self, context, record) -> None:
        fields = to_event_fields(from_event(record, context))

        expected = {key: value for key, value in record.items() if key.startswith("recur_")}
        assert fields.model_dump() == expected
