"""
Blog Backend — Local Time Helper Tests
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.localtime import LOCAL_TZ, format_timestamp, now_local, parse_timestamp, to_local


class TestFormatTimestamp:

    def test_naive_values_are_already_local(self):
        assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02 03:04:05"

    def test_aware_values_are_converted(self):
        utc = datetime(2024, 1, 1, 20, 0, 0, tzinfo=timezone.utc)

        assert format_timestamp(utc) == "2024-01-02 04:00:00"

    def test_microseconds_are_dropped(self):
        assert format_timestamp(datetime(2024, 1, 1, 0, 0, 0, 999999)) == "2024-01-01 00:00:00"

    def test_none_passes_through(self):
        assert format_timestamp(None) is None


class TestParseTimestamp:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-03-01 09:30:00", datetime(2024, 3, 1, 9, 30, 0)),
            ("2024-03-01", datetime(2024, 3, 1, 0, 0, 0)),
            ("2024-03-01T09:30:00", datetime(2024, 3, 1, 9, 30, 0)),
            ("2024-03-01T01:30:00Z", datetime(2024, 3, 1, 9, 30, 0)),
            ("2024-03-01T09:30:00+08:00", datetime(2024, 3, 1, 9, 30, 0)),
            ("2024-03-01T00:30:00-01:00", datetime(2024, 3, 1, 9, 30, 0)),
            ("  2024-03-01 09:30:00.250  ", datetime(2024, 3, 1, 9, 30, 0)),
        ],
    )
    def test_accepted_formats(self, raw, expected):
        assert parse_timestamp(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "yesterday", "2024-13-01", "01/02/2024"])
    def test_rejected_formats(self, raw):
        with pytest.raises(ValueError):
            parse_timestamp(raw)

    @pytest.mark.parametrize(
        "raw",
        ["0001-01-01T00:00:00+09:00", "9999-12-31T23:00:00Z"],
    )
    def test_offset_shift_past_calendar_edge_is_rejected(self, raw):
        with pytest.raises(ValueError, match="out of range"):
            parse_timestamp(raw)

    def test_aware_datetime_past_calendar_edge_is_rejected(self):
        edge = datetime(9999, 12, 31, 20, 0, tzinfo=timezone.utc)

        with pytest.raises(ValueError, match="out of range"):
            parse_timestamp(edge)

    def test_datetime_input_is_normalized(self):
        aware = datetime(2024, 3, 1, 1, 30, tzinfo=timezone.utc)

        assert parse_timestamp(aware) == datetime(2024, 3, 1, 9, 30)


class TestNowLocal:

    def test_is_naive_whole_seconds_in_local_offset(self):
        value = now_local()
        expected = datetime.now(LOCAL_TZ).replace(tzinfo=None)

        assert value.tzinfo is None
        assert value.microsecond == 0
        assert abs(expected - value) < timedelta(seconds=5)

    def test_to_local_keeps_naive_values(self):
        naive = datetime(2024, 1, 1, 12, 0)

        assert to_local(naive) is naive
