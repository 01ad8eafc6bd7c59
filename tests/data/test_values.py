"""Tests for feed value conversion and shared value types."""

from datetime import date
from fractions import Fraction

import pytest

from twfeed.data.decimal import Decimal
from twfeed.data.models import ExpirationDate, OptionType
from twfeed.data.values import is_missing, to_decimal, to_price
from twfeed.errors import DecimalParseError, DecodeError


class TestMissingValues:
    """Test recognition of missing feed values."""

    @pytest.mark.parametrize("value", [None, "NaN", float("nan"), float("inf")])
    def test_missing(self, value):
        """Test null, the NaN literal and non-finite floats are missing."""
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, 0.0, "0", "nan", 1.5])
    def test_present(self, value):
        """Test ordinary values are not missing."""
        assert not is_missing(value)

    def test_converters_return_none(self):
        """Test both converters pass missing values through as None."""
        assert to_price("NaN") is None
        assert to_decimal(None) is None


class TestToPrice:
    """Test conversion to exact rational prices."""

    def test_float_uses_shortest_repr(self):
        """Test floats convert through their decimal representation."""
        assert to_price(17.52) == Fraction(1752, 100)
        assert to_price(0.1) == Fraction(1, 10)

    def test_integer(self):
        """Test integers convert exactly."""
        assert to_price(42) == Fraction(42)

    def test_string(self):
        """Test numeric strings convert exactly."""
        assert to_price("1.25") == Fraction(5, 4)

    @pytest.mark.parametrize("value", [True, "abc", [1.0], {"price": 1}])
    def test_rejects_non_numeric(self, value):
        """Test non-numeric values are rejected."""
        with pytest.raises(DecimalParseError):
            to_price(value)


class TestToDecimal:
    """Test conversion to four-digit decimals."""

    def test_float(self):
        """Test feed floats become exact decimals."""
        assert str(to_decimal(1.3)) == "1.3"
        assert to_decimal(0.1) + to_decimal(0.2) == Decimal.parse("0.3")

    def test_string_with_separator(self):
        """Test string amounts go through the decimal parser."""
        assert str(to_decimal("1,234.5")) == "1234.5"

    def test_rejects_excess_precision(self):
        """Test values needing more than four fractional digits are rejected."""
        with pytest.raises(DecimalParseError):
            to_decimal(0.123456)
        with pytest.raises(DecimalParseError):
            to_decimal("0.123456")


class TestOptionType:
    """Test the option right enum."""

    def test_codes(self):
        """Test the one-letter codes."""
        assert OptionType.from_code("C") is OptionType.CALL
        assert OptionType.from_code("P") is OptionType.PUT
        assert OptionType.PUT == "P"

    def test_invalid_code(self):
        """Test unknown codes raise a decode error."""
        with pytest.raises(DecodeError) as exc_info:
            OptionType.from_code("X")

        assert exc_info.value.context == {"code": "X"}


class TestExpirationDate:
    """Test the expiration date value type."""

    def test_parse_compact(self):
        """Test the YYMMDD form used in option symbols."""
        assert ExpirationDate.parse_compact("200918") == ExpirationDate(2020, 9, 18)

    def test_parse_iso(self):
        """Test ISO dates as found in brokerage records."""
        expiration = ExpirationDate.parse("2020-11-24")

        assert expiration.to_date() == date(2020, 11, 24)
        assert str(expiration) == "2020-11-24"

    @pytest.mark.parametrize("text", ["20091", "2009188", "20O918", "201318", "٢٠٠٩١٨"])
    def test_parse_compact_rejects_invalid(self, text):
        """Test malformed or impossible compact dates."""
        with pytest.raises(ValueError):
            ExpirationDate.parse_compact(text)

    def test_impossible_date(self):
        """Test impossible calendar dates are rejected at construction."""
        with pytest.raises(ValueError):
            ExpirationDate(2021, 2, 30)

    def test_ordering(self):
        """Test dates order chronologically."""
        dates = [ExpirationDate(2021, 1, 15), ExpirationDate(2020, 12, 18),
                 ExpirationDate(2021, 1, 8)]

        assert sorted(dates) == [ExpirationDate(2020, 12, 18), ExpirationDate(2021, 1, 8),
                                 ExpirationDate(2021, 1, 15)]

    def test_from_date(self):
        """Test conversion from a datetime.date."""
        assert ExpirationDate.from_date(date(2020, 9, 18)) == ExpirationDate(2020, 9, 18)
