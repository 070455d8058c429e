"""Tests for opening-hours parsing and open/closed classification."""

from datetime import datetime

import pytest

from core.aggregator.opening_hours import (
    HoursState,
    hours_status,
    parse_hours_entry,
    parse_time_string,
)

# 2024-03-04 is a Monday.
MONDAY_NOON = datetime(2024, 3, 4, 12, 0)
MONDAY_NIGHT = datetime(2024, 3, 4, 21, 30)


class TestParseTimeString:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("9:00 AM", 9.0),
            ("9:30 PM", 21.5),
            ("12:00 PM", 12.0),
            ("12:15 AM", 0.25),
            ("17:45", 17.75),
            ("7 PM", 19.0),
        ],
    )
    def test_valid(self, text: str, expected: float) -> None:
        assert parse_time_string(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", None, "noon", "  "])
    def test_invalid_is_minus_one(self, text) -> None:
        assert parse_time_string(text) == -1


class TestParseHoursEntry:
    def test_range(self) -> None:
        entry = parse_hours_entry("Monday: 9:00 AM – 5:00 PM")
        assert entry.day == "Monday"
        assert entry.opens == "9:00 AM"
        assert entry.closes == "5:00 PM"

    def test_missing_range_is_closed(self) -> None:
        entry = parse_hours_entry("Sunday")
        assert entry.time_range == "Closed"
        assert entry.opens is None

    def test_text_range_kept(self) -> None:
        entry = parse_hours_entry("Tuesday: Open 24 hours")
        assert entry.time_range == "Open 24 hours"
        assert entry.opens is None


class TestHoursStatus:
    HOURS = [
        "Monday: 9:00 AM – 5:00 PM",
        "Tuesday: 9:00 AM – 5:00 PM",
        "Sunday: Closed",
    ]

    def test_open_today(self) -> None:
        statuses = hours_status(self.HOURS, now=MONDAY_NOON)
        assert [s.state for s in statuses] == [
            HoursState.OPEN,
            HoursState.NOT_TODAY,
            HoursState.NOT_TODAY,
        ]
        assert statuses[0].display == "Monday: 9:00 AM – 5:00 PM"

    def test_closed_today_after_hours(self) -> None:
        statuses = hours_status(self.HOURS, now=MONDAY_NIGHT)
        assert statuses[0].state is HoursState.CLOSED

    def test_unparseable_today_is_closed(self) -> None:
        statuses = hours_status(["Monday: whenever"], now=MONDAY_NOON)
        assert statuses[0].state is HoursState.CLOSED
        assert statuses[0].display == "Monday: whenever"

    def test_day_without_range_displays_closed(self) -> None:
        statuses = hours_status(["Monday"], now=MONDAY_NOON)
        assert statuses[0].display == "Monday: Closed"
        assert statuses[0].state is HoursState.CLOSED
