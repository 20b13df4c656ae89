# =============================================================================
# tests/test_views.py - View Count Parsing Tests
# =============================================================================

import logging

import pytest

from lib.views import ViewCountParseError, format_view_count, parse_view_count


class TestParseViewCount:
    """Tests for parse_view_count."""

    @pytest.mark.parametrize("value, expected", [
        ("2500", 2500),
        ("10K", 10_000),
        ("10k", 10_000),
        ("1.5M", 1_500_000),
        ("1.5m", 1_500_000),
        (" 10K ", 10_000),
        ("0", 0),
    ])
    def test_valid_strings(self, value, expected):
        """Test plain, K and M shorthand in either case."""
        assert parse_view_count(value) == expected

    def test_decimals_are_truncated(self):
        """Test that fractional views are dropped, not rounded."""
        assert parse_view_count("2500.7") == 2500
        assert parse_view_count("1.2345K") == 1234

    def test_integers_pass_through(self):
        """Test that integer input is returned unchanged."""
        assert parse_view_count(42) == 42

    @pytest.mark.parametrize("value", ["abc", "", "-5", "1.5B", "10KK", "1,000"])
    def test_malformed_strings_return_zero(self, value):
        """Test that malformed input is treated as zero views."""
        assert parse_view_count(value) == 0

    def test_malformed_input_logs_warning(self, caplog):
        """Test that a malformed value is logged, not silently dropped."""
        with caplog.at_level(logging.WARNING, logger="lib.views"):
            parse_view_count("lots")
        assert "lots" in caplog.text

    def test_negative_and_bool_rejected(self):
        """Test that negative ints and bools are not view counts."""
        assert parse_view_count(-1) == 0
        assert parse_view_count(True) == 0

    def test_strict_mode_raises(self):
        """Test that strict mode raises instead of returning zero."""
        with pytest.raises(ViewCountParseError) as exc_info:
            parse_view_count("abc", strict=True)
        assert exc_info.value.value == "abc"

    def test_strict_error_is_value_error(self):
        """Test that callers can catch the strict error as ValueError."""
        with pytest.raises(ValueError):
            parse_view_count(-10, strict=True)


class TestFormatViewCount:
    """Tests for format_view_count."""

    @pytest.mark.parametrize("views, expected", [
        (0, "0"),
        (999, "999"),
        (1000, "1K"),
        (10_000, "10K"),
        (1234, "1.2K"),
        (1250, "1.3K"),
        (1_500_000, "1.5M"),
        (1_000_000, "1M"),
        (2_000_000, "2M"),
    ])
    def test_format(self, views, expected):
        """Test shorthand formatting with one decimal place."""
        assert format_view_count(views) == expected

    def test_formatted_value_parses_back(self):
        """Test that whole thousands survive format then parse."""
        assert parse_view_count(format_view_count(25_000)) == 25_000

    @pytest.mark.parametrize("shorthand", ["10K", "1K", "250K", "1M", "3M"])
    def test_shorthand_survives_parse_then_format(self, shorthand):
        assert format_view_count(parse_view_count(shorthand)) == shorthand
