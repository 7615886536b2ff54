"""
Tests for lenient date parsing
"""

from datetime import date, datetime, timezone

import pytest

from chartforge.utils.dates import parse_date, to_epoch_ms, to_iso_date


class TestParseDate:
    """Test parse_date"""

    @pytest.mark.parametrize("value", [None, "", "   ", "banana", True])
    def test_unparseable_values_return_none(self, value):
        """Test that values that are not dates come back as None"""
        assert parse_date(value) is None

    def test_iso_string(self):
        """Test that ISO strings are parsed"""
        assert parse_date("2024-03-05") == datetime(2024, 3, 5)

    def test_aware_datetime_is_converted_to_naive_utc(self):
        """Test that timezone offsets are folded into UTC"""
        assert parse_date("2024-03-05T10:00:00+02:00") == datetime(2024, 3, 5, 8, 0)

    def test_numbers_are_epoch_milliseconds(self):
        """Test that numeric values are read as epoch milliseconds"""
        assert parse_date(86_400_000) == datetime(1970, 1, 2)

    def test_date_objects(self):
        """Test that date objects become midnight datetimes"""
        assert parse_date(date(2023, 12, 31)) == datetime(2023, 12, 31)


class TestIsoDate:
    """Test to_iso_date"""

    def test_datetime_string_is_truncated_to_day(self):
        """Test that the time component is dropped"""
        assert to_iso_date("2024-01-15 23:59:00") == "2024-01-15"

    def test_unparseable_returns_none(self):
        """Test that invalid input yields None"""
        assert to_iso_date("banana") is None


class TestEpochMs:
    """Test to_epoch_ms"""

    def test_naive_values_are_treated_as_utc(self):
        """Test that naive datetimes are interpreted as UTC"""
        assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000

    def test_matches_aware_timestamp(self):
        """Test consistency with an aware datetime"""
        moment = datetime(2024, 6, 1, 12, 30)
        expected = int(moment.replace(tzinfo=timezone.utc).timestamp() * 1000)

        assert to_epoch_ms(moment) == expected
