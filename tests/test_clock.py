"""
Tests for wall-clock parsing and formatting.
"""

import logging

import pytest

from daytimeline.domain.clock import format_minute, format_range, parse_minute
from daytimeline.domain.exceptions import MalformedTimeError


class TestParseMinute:
    """Tests for parse_minute."""

    @pytest.mark.parametrize(
        "time_str, expected",
        [
            ("00:00", 0),
            ("09:00", 540),
            ("13:45", 825),
            ("23:59", 1439),
            ("9:05", 545),
            ("17:30:00", 1050),
        ],
    )
    def test_parses_hours_and_minutes(self, time_str, expected):
        assert parse_minute(time_str) == expected

    def test_missing_minutes_default_to_zero(self):
        """An hour on its own is a full hour."""
        assert parse_minute("9") == 540
        assert parse_minute("14:") == 840

    def test_unreadable_minutes_default_to_zero_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="daytimeline.domain.clock"):
            assert parse_minute("10:xx") == 600

        assert "Unreadable minutes" in caplog.text

    def test_unreadable_hour_raises(self):
        with pytest.raises(MalformedTimeError, match="Cannot read hour"):
            parse_minute("noon")

    def test_malformed_time_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_minute("")


class TestFormatMinute:
    """Tests for formatting minutes back to HH:MM."""

    def test_format_minute(self):
        assert format_minute(0) == "00:00"
        assert format_minute(545) == "09:05"
        assert format_minute(1439) == "23:59"

    def test_format_range(self):
        assert format_range(540, 1020) == "09:00 - 17:00"
