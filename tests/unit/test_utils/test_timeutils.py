"""Tests for date, time and id helpers."""

import re
from datetime import date

import pytest

from a2a_sandbox.utils import (
    add_hour,
    current_timestamp,
    from_minutes,
    generate_context_id,
    generate_id,
    generate_task_id,
    intervals_overlap,
    is_valid_date,
    normalize_time,
    resolve_date,
    to_minutes,
    today_string,
)


class TestMinutes:
    """Test HH:mm <-> minute conversion."""

    @pytest.mark.parametrize(
        "value,expected",
        [("00:00", 0), ("09:00", 540), ("9:30", 570), ("18:00", 1080), ("24:00", 1440)],
    )
    def test_to_minutes(self, value, expected):
        """Test valid times of day."""
        assert to_minutes(value) == expected

    @pytest.mark.parametrize("value", ["", "9", "09:60", "25:00", "24:30", "ab:cd", "9:5"])
    def test_to_minutes_invalid(self, value):
        """Test malformed times raise ValueError."""
        with pytest.raises(ValueError):
            to_minutes(value)

    def test_from_minutes_pads(self):
        """Test output is zero-padded."""
        assert from_minutes(570) == "09:30"
        assert from_minutes(0) == "00:00"

    def test_normalize_time(self):
        """Test single-digit hours are padded."""
        assert normalize_time("9:00") == "09:00"
        assert normalize_time("14:15") == "14:15"

    def test_add_hour(self):
        """Test one hour is added, wrapping at midnight."""
        assert add_hour("10:00") == "11:00"
        assert add_hour("9:30") == "10:30"
        assert add_hour("23:30") == "00:30"


class TestDates:
    """Test date helpers."""

    def test_is_valid_date(self):
        """Test calendar validation."""
        assert is_valid_date("2024-01-15")
        assert is_valid_date("2024-02-29")
        assert not is_valid_date("2023-02-29")
        assert not is_valid_date("2024-1-15")
        assert not is_valid_date("tomorrow")

    def test_today_string(self):
        """Test today's date in ISO format."""
        assert today_string() == date.today().isoformat()

    def test_resolve_date(self):
        """Test None and "today" resolve to today; others pass through."""
        today = date.today().isoformat()
        assert resolve_date(None) == today
        assert resolve_date("") == today
        assert resolve_date("today") == today
        assert resolve_date("2024-01-15") == "2024-01-15"

    def test_current_timestamp_is_utc_iso(self):
        """Test timestamps are ISO 8601 with a UTC offset."""
        assert current_timestamp().endswith("+00:00")


class TestIntervalsOverlap:
    """Test half-open interval overlap."""

    def test_overlapping(self):
        """Test ranges sharing time overlap."""
        assert intervals_overlap("10:00", "11:00", "10:00", "10:30")
        assert intervals_overlap("10:00", "11:00", "10:30", "12:00")
        assert intervals_overlap("09:00", "12:00", "10:00", "11:00")

    def test_touching_ranges_do_not_overlap(self):
        """Test back-to-back ranges are compatible."""
        assert not intervals_overlap("09:00", "09:30", "09:30", "10:00")
        assert not intervals_overlap("11:00", "12:00", "10:00", "11:00")


class TestIds:
    """Test identifier generation."""

    def test_prefixed_ids(self):
        """Test task and context ids carry their prefixes."""
        assert re.match(r"^task_[0-9a-f-]{36}$", generate_task_id())
        assert generate_context_id().startswith("ctx_")

    def test_unprefixed_id(self):
        """Test plain uuid4 strings."""
        assert len(generate_id()) == 36

    def test_ids_unique(self):
        """Test generated ids do not repeat."""
        assert len({generate_task_id() for _ in range(100)}) == 100
