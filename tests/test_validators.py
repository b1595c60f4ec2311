"""Tests for core validation utilities."""

from datetime import timedelta
from decimal import Decimal

import pytest

from barstock.core.validators import (
    normalize_email,
    sanitize_html,
    validate_email,
    validate_no_future_date,
    validate_price,
    validate_product_name,
)
from barstock.utils.datetime import today_local


class TestValidatePrice:
    def test_quantizes_to_cents(self):
        assert validate_price("120") == Decimal("120.00")
        assert validate_price(99.5) == Decimal("99.50")

    def test_negative_fails(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            validate_price(Decimal("-10.00"))

    def test_exceeds_max_fails(self):
        with pytest.raises(ValueError, match="exceeds maximum"):
            validate_price(Decimal("10000000000.00"))

    def test_too_many_decimals_fails(self):
        with pytest.raises(ValueError, match="2 decimal places"):
            validate_price("1.005")

    @pytest.mark.parametrize("value", ["invalid", "NaN", "Infinity"])
    def test_invalid_format_fails(self, value):
        with pytest.raises(ValueError, match="Invalid currency format"):
            validate_price(value)


class TestValidateProductName:
    def test_drink_names_pass(self):
        assert validate_product_name("Tusker Lager 500ml") == "Tusker Lager 500ml"
        assert validate_product_name("Jack Daniel's (tot)") == "Jack Daniel's (tot)"

    def test_collapses_whitespace(self):
        assert validate_product_name("  Castle   Lite ") == "Castle Lite"

    def test_empty_fails(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_product_name("   ")

    def test_markup_fails(self):
        with pytest.raises(ValueError, match="unsupported characters"):
            validate_product_name("<b>Beer</b>")

    def test_too_long_fails(self):
        with pytest.raises(ValueError, match="cannot exceed"):
            validate_product_name("a" * 121)


class TestValidateNoFutureDate:
    def test_today_passes(self):
        assert validate_no_future_date(today_local()) == today_local()

    def test_tomorrow_fails(self):
        with pytest.raises(ValueError, match="cannot be in the future"):
            validate_no_future_date(today_local() + timedelta(days=1))


class TestSanitizeHtml:
    def test_strips_tags(self):
        assert sanitize_html("<script>alert(1)</script>Beer") == "alert(1)Beer"

    def test_keeps_ampersands_and_quotes_unescaped(self):
        """Text is stored as typed; escaping is left to whatever renders it."""
        assert sanitize_html("Beer & Cider") == "Beer & Cider"
        assert sanitize_html("Jack Daniel's \"Old No. 7\"") == "Jack Daniel's \"Old No. 7\""

    def test_empty_becomes_none(self):
        assert sanitize_html("") is None
        assert sanitize_html("<br>") is None


class TestEmail:
    def test_valid_email_is_lowercased(self):
        assert validate_email("  Owner@Bar.CO.KE ") == "owner@bar.co.ke"

    def test_invalid_email_fails(self):
        with pytest.raises(ValueError, match="Invalid email format"):
            validate_email("not-an-email")

    def test_normalize_never_rejects(self):
        assert normalize_email(" Odd Value ") == "odd value"
