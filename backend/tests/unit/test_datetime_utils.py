"""
Unit tests for datetime utilities.
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from utils.datetime_utils import (
    GUATEMALA_TZ,
    age_from_birth_date_string,
    calculate_age,
    guatemala_now,
    parse_date_string,
    parse_datetime_string,
    strip_time_component,
)


class TestGuatemalaTime:
    def test_offset_is_minus_six(self):
        assert guatemala_now().utcoffset() == timedelta(hours=-6)
        assert GUATEMALA_TZ.utcoffset(None) == timedelta(hours=-6)


class TestParseDateString:
    """Test date parsing."""

    @pytest.mark.parametrize("value", [
        "2024-01-10",
        "2024/01/10",
        "2024-1-10",
        "2024-01-10T00:00:00.000Z",
        " 2024-01-10 ",
    ])
    def test_valid_formats(self, value):
        assert parse_date_string(value) == date(2024, 1, 10)

    @pytest.mark.parametrize("value", ["", "   ", "10.01.2024", "2024-13-01", "2024-02-30", "ayer"])
    def test_invalid_formats(self, value):
        with pytest.raises(ValueError):
            parse_date_string(value)

    def test_strip_time_component(self):
        assert strip_time_component("2000-06-15T08:30:00Z") == "2000-06-15"
        assert strip_time_component("2000-06-15") == "2000-06-15"


class TestParseDatetimeString:
    def test_zulu_suffix(self):
        parsed = parse_datetime_string("2024-03-01T10:15:00Z")
        assert parsed == datetime(2024, 3, 1, 10, 15, tzinfo=timezone.utc)

    def test_date_only(self):
        assert parse_datetime_string("2024-03-01") == datetime(2024, 3, 1)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_datetime_string("01/03/2024 10:15")


class TestAge:
    """Test age derivation from birth date."""

    def test_birthday_not_reached(self):
        assert calculate_age(date(2000, 6, 15), today=date(2024, 3, 1)) == 23

    def test_birthday_today(self):
        assert calculate_age(date(2000, 3, 1), today=date(2024, 3, 1)) == 24

    def test_birthday_passed(self):
        assert calculate_age(date(2000, 1, 31), today=date(2024, 3, 1)) == 24

    def test_same_month_day_before(self):
        assert calculate_age(date(2000, 3, 2), today=date(2024, 3, 1)) == 23

    def test_defaults_to_guatemala_today(self):
        with patch("utils.datetime_utils.guatemala_today", return_value=date(2024, 3, 1)):
            assert calculate_age(date(2000, 6, 15)) == 23

    def test_from_string_with_time_component(self):
        assert age_from_birth_date_string("2000-06-15T00:00:00.000Z", today=date(2024, 3, 1)) == 23

    @pytest.mark.parametrize("value", [None, "", "no sé", "2000-99-99"])
    def test_unparseable_is_zero(self, value):
        assert age_from_birth_date_string(value, today=date(2024, 3, 1)) == 0
