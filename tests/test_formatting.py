"""
Unit tests for display formatting.
"""
from datetime import datetime, timezone

import pytest

from thriftfinder.client.formatting import format_message_date, format_price, group_hours

# 14:00 in Johannesburg
NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestFormatMessageDate:

    def test_today(self):
        assert format_message_date(datetime(2025, 3, 10, 13, 5, tzinfo=timezone.utc), NOW) == "Today, 3:05 PM"

    def test_yesterday(self):
        assert format_message_date(datetime(2025, 3, 9, 6, 30, tzinfo=timezone.utc), NOW) == "Yesterday, 8:30 AM"

    def test_older(self):
        assert format_message_date("2025-03-05T13:05:00Z", NOW) == "Mar 5, 2025, 3:05 PM"

    def test_uses_local_date(self):
        # 23:30 UTC on the 9th is already the 10th in Johannesburg
        assert format_message_date(datetime(2025, 3, 9, 23, 30, tzinfo=timezone.utc), NOW) == "Today, 1:30 AM"

    def test_naive_is_utc(self):
        assert format_message_date(datetime(2025, 3, 10, 10, 0), NOW) == "Today, 12:00 PM"

    def test_missing(self):
        assert format_message_date(None) == "N/A"


@pytest.mark.unit
class TestGroupHours:

    def test_working_week(self):
        open_day = {"open": True, "start": "09:00", "end": "17:00"}
        hours = {day: dict(open_day) for day in ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]}
        hours.update({"Saturday": {"open": False}, "Sunday": {"open": False}})
        assert group_hours(hours) == [
            {"days": "Mon–Fri", "hours": "09:00–17:00"},
            {"days": "Sat, Sun", "hours": "Closed"},
        ]

    def test_non_contiguous_groups(self):
        hours = {
            "Monday": {"open": True, "start": "09:00", "end": "17:00"},
            "Tuesday": {"open": True, "start": "10:00", "end": "14:00"},
            "Wednesday": {"open": True, "start": "09:00", "end": "17:00"},
        }
        assert group_hours(hours) == [
            {"days": "Mon, Wed", "hours": "09:00–17:00"},
            {"days": "Tue", "hours": "10:00–14:00"},
        ]

    def test_empty(self):
        assert group_hours(None) == []


@pytest.mark.unit
@pytest.mark.parametrize("price, expected", [
    ("120", "R120.00"),
    (45.5, "R45.50"),
    (None, "N/A"),
    ("abc", "N/A"),
])
def test_format_price(price, expected):
    assert format_price(price) == expected
