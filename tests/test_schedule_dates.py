"""
Tests for the schedule date heading and the daily report prompt.
"""
from datetime import date, datetime

from farmhub.services.schedule_dates import (
    OTHER_DAY_WARNING,
    YESTERDAY_WARNING,
    describe_schedule_date,
    parse_schedule_date,
    report_prompt_due,
)

TODAY = date(2026, 10, 19)


def test_parse_schedule_date():
    assert parse_schedule_date('10/19/2026') == TODAY
    assert parse_schedule_date('2026-10-19') is None
    assert parse_schedule_date(None) is None


class TestDescribeScheduleDate:
    """Test describe_schedule_date."""

    def test_today(self):
        heading = describe_schedule_date('10/19/2026', TODAY)
        assert heading.title == "Today's Schedule 10/19/2026"
        assert heading.is_today
        assert not heading.outdated
        assert heading.message is None

    def test_yesterday(self):
        heading = describe_schedule_date('10/18/2026', TODAY)
        assert heading.title == "Yesterday's Schedule 10/18/2026"
        assert heading.outdated
        assert heading.message == YESTERDAY_WARNING

    def test_other_day(self):
        heading = describe_schedule_date('10/12/2026', TODAY)
        assert heading.title == '10/12/2026 Schedule'
        assert heading.message == OTHER_DAY_WARNING

    def test_missing_date(self):
        heading = describe_schedule_date(None, TODAY)
        assert heading.title == "Today's Schedule"
        assert not heading.outdated


class TestReportPromptDue:
    """Test report_prompt_due."""

    def test_opens_at_prompt_hour(self):
        assert report_prompt_due('10/19/2026', datetime(2026, 10, 19, 14, 0), False)
        assert not report_prompt_due('10/19/2026', datetime(2026, 10, 19, 13, 59), False)

    def test_closed_after_reporting(self):
        assert not report_prompt_due('10/19/2026', datetime(2026, 10, 19, 16, 0), True)

    def test_only_on_schedule_date(self):
        assert not report_prompt_due('10/18/2026', datetime(2026, 10, 19, 16, 0), False)

    def test_custom_hour(self):
        assert report_prompt_due('10/19/2026', datetime(2026, 10, 19, 9, 0), False, prompt_hour=9)
