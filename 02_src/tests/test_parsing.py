"""Tests for dialogue input parsing."""

from datetime import time

import pytest

from notifier.dialogue import (
    parse_categories,
    parse_command,
    parse_events_interval,
    parse_notification_time,
)
from notifier.errors import UnknownCategory, ValidationError


class TestParseCategories:
    """Tests for parse_categories()."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("cinema", ["cinema"]),
            ("cinema, concert", ["cinema", "concert"]),
            ("  theatre ,art,   quest  ", ["theatre", "art", "quest"]),
            ("show,standup", ["show", "standup"]),
            ("concert,cinema", ["concert", "cinema"]),
        ],
    )
    def test_valid_lists_keep_order_and_trim(self, text, expected):
        """Test that vocabulary tokens are trimmed and kept in order."""
        assert parse_categories(text) == expected

    def test_duplicates_are_dropped(self):
        """Test that repeated tokens appear once, at first position."""
        assert parse_categories("art, cinema, art") == ["art", "cinema"]

    @pytest.mark.parametrize(
        "text, offending",
        [
            ("opera", "opera"),
            ("cinema, opera, ballet", "opera"),
            ("Cinema", "Cinema"),
            ("cinema,", ""),
            ("cinema concert", "cinema concert"),
        ],
    )
    def test_names_first_offending_token(self, text, offending):
        """Test that the first non-vocabulary token is reported."""
        with pytest.raises(UnknownCategory) as exc_info:
            parse_categories(text)
        assert exc_info.value.token == offending


class TestParseNotificationTime:
    """Tests for parse_notification_time()."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("00:00", time(0, 0)),
            ("19:00", time(19, 0)),
            ("23:59", time(23, 59)),
            ("9:05", time(9, 5)),
            (" 18:30 ", time(18, 30)),
        ],
    )
    def test_valid_times(self, text, expected):
        """Test that HH:MM parses with zero seconds."""
        parsed = parse_notification_time(text)
        assert parsed == expected
        assert parsed.second == 0

    def test_every_valid_hour_and_minute(self):
        """Test the full HH:MM range."""
        for hour in range(24):
            for minute in range(60):
                assert parse_notification_time(f"{hour:02d}:{minute:02d}") == time(
                    hour, minute
                )

    @pytest.mark.parametrize(
        "text",
        ["1900", "24:00", "12:60", "ab:cd", "12:", ":30", "12:30:15", "-1:30", ""],
    )
    def test_invalid_times(self, text):
        """Test that malformed or out-of-range input is rejected."""
        with pytest.raises(ValidationError):
            parse_notification_time(text)


class TestParseEventsInterval:
    """Tests for parse_events_interval()."""

    @pytest.mark.parametrize("text, expected", [("1", 1), ("3", 3), (" 30 ", 30)])
    def test_valid_intervals(self, text, expected):
        """Test positive integers."""
        assert parse_events_interval(text) == expected

    @pytest.mark.parametrize(
        "text", ["0", "-1", "three", "2.5", "", "+3", "9223372036854775808"]
    )
    def test_invalid_intervals(self, text):
        """Test that non-positive or non-numeric input is rejected."""
        with pytest.raises(ValidationError):
            parse_events_interval(text)


class TestParseCommand:
    """Tests for parse_command()."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("/start", ("start", "")),
            ("/edit city", ("edit", "city")),
            ("/edit   notification_time ", ("edit", "notification_time")),
            ("/cancel", ("cancel", "")),
            ("/help@AfishaBot", ("help", "")),
            ("/INFO", ("info", "")),
        ],
    )
    def test_commands(self, text, expected):
        """Test splitting commands from arguments."""
        assert parse_command(text) == expected

    @pytest.mark.parametrize("text", [None, "", "Moscow", "/", "19:00"])
    def test_plain_text(self, text):
        """Test that non-commands return None."""
        assert parse_command(text) is None
