"""
Tests for mc_bridge/utils/date.py.

Validates timestamp parsing, watermark comparison and date normalization.
"""

from datetime import date, timezone

from mc_bridge.utils.date import format_date, is_after, parse_date, parse_timestamp, utc_now_iso


class TestParseTimestamp:
    """Test suite for parse_timestamp."""

    def test_zulu_suffix(self):
        parsed = parse_timestamp("2026-03-01T10:00:00Z")
        assert parsed.tzinfo is not None
        assert parsed.utcoffset().total_seconds() == 0

    def test_naive_is_utc(self):
        assert parse_timestamp("2026-03-01T10:00:00").tzinfo == timezone.utc

    def test_invalid_values(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("yesterday") is None

    def test_now_round_trips(self):
        assert parse_timestamp(utc_now_iso()) is not None


class TestIsAfter:
    """Test suite for watermark comparison."""

    def test_strictly_later(self):
        assert is_after("2026-03-01T10:00:01+00:00", "2026-03-01T10:00:00+00:00")
        assert not is_after("2026-03-01T10:00:00+00:00", "2026-03-01T10:00:00+00:00")

    def test_compares_across_offsets(self):
        # 11:00+01:00 is 10:00 UTC.
        assert not is_after("2026-03-01T11:00:00+01:00", "2026-03-01T10:00:00Z")
        assert is_after("2026-03-01T10:30:00Z", "2026-03-01T11:00:00+01:00")

    def test_unparseable_inputs(self):
        assert not is_after("garbage", "2026-03-01T10:00:00Z")
        assert is_after("2026-03-01T10:00:00Z", None)


class TestDates:
    """Test suite for due-date normalization."""

    def test_parse_date_formats(self):
        assert parse_date("2026-05-01") == date(2026, 5, 1)
        assert parse_date("2026-05-01T17:30:00+00:00") == date(2026, 5, 1)
        assert parse_date("05/01/2026") is None
        assert parse_date(None) is None

    def test_format_date(self):
        assert format_date(date(2026, 5, 1)) == "2026-05-01"
        assert format_date(None) is None
