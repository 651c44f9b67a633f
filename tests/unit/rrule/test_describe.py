"""Unit tests for rule descriptions."""

from datetime import datetime, timezone

import pytest

from calrule.rrule import RecurrenceRule, RecurrenceType, Weekday, describe
from calrule.timezone import TimezoneContext


def utc(year: int, month: int, day: int, hour: int = 9, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class TestDescribe:
    """Test the description format of each recurrence type."""

    def test_describe_when_type_none_then_empty(self) -> None:
        assert describe(RecurrenceRule(utc(2021, 6, 1), RecurrenceType.NONE)) == ""

    @pytest.mark.parametrize(
        ("interval", "expected"), [(1, "Daily"), (3, "Daily (Interval: 3)")]
    )
    def test_describe_when_daily_then_interval_only_above_one(self, interval, expected) -> None:
        rule = RecurrenceRule(utc(2021, 6, 1), RecurrenceType.DAILY, interval)

        assert describe(rule) == expected

    def test_describe_when_weekly_with_end_then_all_parts_in_order(self) -> None:
        rule = RecurrenceRule(
            utc(2021, 6, 7),
            RecurrenceType.WEEKLY,
            2,
            end_date=utc(2021, 7, 2),
            weekday_mask=Weekday.WEDNESDAY | Weekday.MONDAY,
        )

        assert describe(rule) == (
            "Weekly (ends: Friday, 2021-07-02, days repeated: Monday, Wednesday, Interval: 2)"
        )

    @pytest.mark.parametrize(
        ("mask", "expected"),
        [
            (Weekday.ALLDAYS, "Weekly (days repeated: all)"),
            (Weekday.WORKDAYS, "Weekly (days repeated: workdays)"),
            (Weekday.SUNDAY | Weekday.SATURDAY, "Weekly (days repeated: Saturday, Sunday)"),
        ],
    )
    def test_describe_when_weekly_mask_then_days_named(self, mask, expected) -> None:
        rule = RecurrenceRule(utc(2021, 6, 7), RecurrenceType.WEEKLY, weekday_mask=mask)

        assert describe(rule) == expected

    @pytest.mark.parametrize(
        ("start", "expected"),
        [
            (utc(2021, 1, 31), "Monthly (last day)"),
            (utc(2021, 1, 15), "Monthly (15. day)"),
        ],
    )
    def test_describe_when_monthly_by_date_then_day_of_month(self, start, expected) -> None:
        assert describe(RecurrenceRule(start, RecurrenceType.MONTHLY_MDAY)) == expected

    @pytest.mark.parametrize(
        ("start", "expected"),
        [
            (utc(2021, 1, 29), "Monthly (last Friday)"),
            (utc(2021, 6, 8), "Monthly (2. Tuesday)"),
        ],
    )
    def test_describe_when_monthly_by_weekday_then_ordinal_and_weekday(
        self, start, expected
    ) -> None:
        assert describe(RecurrenceRule(start, RecurrenceType.MONTHLY_WDAY)) == expected

    def test_describe_when_monthly_by_weekday_workdays_then_singular(self) -> None:
        rule = RecurrenceRule(
            utc(2021, 6, 1), RecurrenceType.MONTHLY_WDAY, weekday_mask=Weekday.WORKDAYS
        )

        assert describe(rule) == "Monthly (1. workday)"

    def test_describe_when_yearly_then_label(self) -> None:
        assert describe(RecurrenceRule(utc(2021, 6, 1), RecurrenceType.YEARLY)) == "Yearly"

    def test_describe_when_translator_given_then_words_translated(self) -> None:
        words = {"Weekly": "Wöchentlich", "days repeated": "Wochentage", "Monday": "Montag"}
        rule = RecurrenceRule(utc(2021, 6, 7), RecurrenceType.WEEKLY)

        assert describe(rule, translate=lambda word: words.get(word, word)) == (
            "Wöchentlich (Wochentage: Montag)"
        )

    def test_describe_when_context_given_then_end_date_in_user_timezone(self, berlin) -> None:
        rule = RecurrenceRule(
            utc(2021, 6, 1), RecurrenceType.DAILY, end_date=utc(2021, 6, 30, 23, 30)
        )
        context = TimezoneContext(user_timezone=berlin, date_format="%d.%m.%Y")

        assert describe(rule) == "Daily (ends: Wednesday, 2021-06-30)"
        assert describe(rule, context=context) == "Daily (ends: Thursday, 01.07.2021)"

    def test_describe_when_called_then_does_not_iterate(self, monkeypatch) -> None:
        rule = RecurrenceRule(utc(2021, 6, 1), RecurrenceType.DAILY)
        monkeypatch.setattr(RecurrenceRule, "cursor", lambda self: pytest.fail("iterated"))

        assert describe(rule) == "Daily"
