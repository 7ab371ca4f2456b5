"""
Tests for amount, date and merchant-name normalization.
Validates locale-formatted amount parsing and the zero-amount fallback.
"""

import unittest
from datetime import date

from bank_text_engine.extraction.normalizer import (
    parse_amount,
    try_parse_amount,
    normalize_date,
    parse_iso_date,
    clean_merchant_name,
)

# 2024-03-05 12:00:00 UTC
NOON_MARCH_5 = 1709640000000
# 2024-03-05 23:30:00 UTC
LATE_MARCH_5 = 1709681400000


class TestAmountParsing(unittest.TestCase):
    """Test cases for locale-formatted amounts."""

    def test_decimal_comma(self):
        """Test that a single comma is read as the decimal separator."""
        self.assertEqual(parse_amount("12,50"), 12.5)
        self.assertEqual(parse_amount("60,40"), 60.4)

    def test_decimal_point(self):
        """Test that a single dot is read as the decimal separator."""
        self.assertEqual(parse_amount("1250.50"), 1250.5)
        self.assertEqual(parse_amount("22.50"), 22.5)

    def test_euro_thousands_separator(self):
        """Test European formatting with dot thousands and comma decimals."""
        self.assertEqual(parse_amount("1.250,50"), 1250.5)

    def test_us_thousands_separator(self):
        """Test US formatting with comma thousands and dot decimals."""
        self.assertEqual(parse_amount("1,250.50"), 1250.5)

    def test_repeated_separators_are_thousands(self):
        """Test that repeated separators of one kind are grouping separators."""
        self.assertEqual(parse_amount("1.250.000"), 1250000.0)
        self.assertEqual(parse_amount("1,250,000"), 1250000.0)

    def test_whitespace_is_stripped(self):
        """Test that embedded whitespace does not break parsing."""
        self.assertEqual(parse_amount(" 1 250,00 "), 1250.0)

    def test_trailing_punctuation_is_not_a_separator(self):
        """Test that a sentence-ending dot or comma does not move the decimal point."""
        self.assertEqual(parse_amount("25,00."), 25.0)
        self.assertEqual(parse_amount("12.50,"), 12.5)
        self.assertEqual(parse_amount("1.250,50."), 1250.5)
        self.assertEqual(parse_amount("12."), 12.0)
        self.assertIsNone(try_parse_amount(".,"))

    def test_integer_amount(self):
        self.assertEqual(parse_amount("1"), 1.0)

    def test_unparseable_returns_zero(self):
        """Test that non-numeric text degrades to 0 instead of raising."""
        for text in ["abc", ".", ",", "", None, "12a", "nan", "inf", "1e5", "-5"]:
            self.assertEqual(parse_amount(text), 0.0, f"Expected 0.0 for {text!r}")

    def test_try_parse_distinguishes_unparseable(self):
        """Test that try_parse_amount reports unparseable text as None."""
        self.assertIsNone(try_parse_amount("abc"))
        self.assertIsNone(try_parse_amount("."))
        self.assertEqual(try_parse_amount("0,00"), 0.0)


class TestDateNormalization(unittest.TestCase):
    """Test cases for timestamp to calendar date conversion."""

    def test_utc_date(self):
        """Test that time-of-day is discarded in the reference zone."""
        self.assertEqual(normalize_date(NOON_MARCH_5), "2024-03-05")
        self.assertEqual(normalize_date(LATE_MARCH_5), "2024-03-05")

    def test_reference_timezone(self):
        """Test that the calendar date follows the configured zone."""
        self.assertEqual(normalize_date(LATE_MARCH_5, "Europe/Rome"), "2024-03-06")

    def test_epoch(self):
        self.assertEqual(normalize_date(0), "1970-01-01")

    def test_unusable_timestamp_falls_back(self):
        """Test that bad timestamps never raise."""
        self.assertEqual(normalize_date(None), "1970-01-01")
        self.assertEqual(normalize_date("not-a-time"), "1970-01-01")
        self.assertEqual(normalize_date(float("inf")), "1970-01-01")

    def test_parse_iso_date(self):
        self.assertEqual(parse_iso_date("2024-03-05"), date(2024, 3, 5))
        self.assertIsNone(parse_iso_date("05/03/2024"))
        self.assertIsNone(parse_iso_date(""))
        self.assertIsNone(parse_iso_date(None))


class TestMerchantCleaning(unittest.TestCase):
    """Test cases for trailing-noise removal from merchant names."""

    def test_strips_trailing_date_and_time(self):
        self.assertEqual(clean_merchant_name("Amazon 12/01/24 10:30"), "Amazon")
        self.assertEqual(clean_merchant_name("Esselunga 10:30 Milano"), "Esselunga")

    def test_strips_info_footer(self):
        self.assertEqual(clean_merchant_name("Bar Sport Per info chiama 800123"), "Bar Sport")

    def test_strips_masked_card_number(self):
        self.assertEqual(clean_merchant_name("**7215* SHOP"), "SHOP")

    def test_falls_back_to_input(self):
        """Test that the input is kept if cleaning would leave nothing."""
        self.assertEqual(clean_merchant_name("Per info"), "Per info")
        self.assertEqual(clean_merchant_name(""), "")


if __name__ == "__main__":
    unittest.main()
