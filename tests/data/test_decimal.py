"""Tests for the exact four-digit decimal codec."""

from fractions import Fraction

import pytest

from twfeed.data.decimal import Decimal, format_decimal, parse
from twfeed.errors import DecimalParseError, DecodeError


class TestDecimalParse:
    """Test parsing of decimal strings."""

    def test_parse_with_thousands_separator(self):
        """Test that thousands separators are stripped."""
        value = Decimal.parse("12,345.4321")
        assert value.as_fraction() == Fraction(123454321, 10000)
        assert str(value) == "12345.4321"

    def test_parse_single_fraction_digit(self):
        """Test that short fractions are right-padded."""
        assert Decimal.parse("0.3") == Fraction(3, 10)

    def test_parse_negative(self):
        """Test that the sign applies to the whole amount."""
        value = Decimal.parse("-9.12")
        assert value == Fraction(-912, 100)
        assert str(value) == "-9.12"

    def test_parse_negative_below_one(self):
        """Test that a negative sign on a zero integer part is kept."""
        value = Decimal.parse("-0.5")
        assert value == Fraction(-1, 2)
        assert str(value) == "-0.5"

    def test_parse_integer(self):
        """Test integral strings with and without a trailing point."""
        assert Decimal.parse("42") == 42
        assert Decimal.parse("42.") == 42
        assert str(Decimal.parse("42.0000")) == "42"

    def test_parse_four_digits_exactly(self):
        """Test the maximum precision is accepted."""
        assert Decimal.parse("1.0001").as_fraction() == Fraction(10001, 10000)

    @pytest.mark.parametrize("text,offending", [
        ("1.23456", "23456"),
        ("abc", "abc"),
        ("1.2a", "2a"),
        ("", ""),
        (".5", ""),
        ("--1", "-1"),
        ("1.2.3", "2.3"),
        (" 1", " 1"),
    ])
    def test_parse_rejects_invalid(self, text, offending):
        """Test that invalid input names the offending substring."""
        with pytest.raises(DecimalParseError) as exc_info:
            Decimal.parse(text)

        assert exc_info.value.offending == offending
        assert exc_info.value.raw_value == text

    def test_parse_error_is_value_error_and_decode_error(self):
        """Test the error fits both ValueError and the decode hierarchy."""
        with pytest.raises(ValueError):
            Decimal.parse("x")
        with pytest.raises(DecodeError):
            Decimal.parse("x")

    def test_parse_rejects_non_string(self):
        """Test that non-string input is rejected."""
        with pytest.raises(DecimalParseError):
            Decimal.parse(12)  # type: ignore[arg-type]

    def test_module_shorthands(self):
        """Test the module-level parse/format helpers."""
        assert format_decimal(parse("1,000.50")) == "1000.5"


class TestDecimalFormat:
    """Test canonical formatting."""

    @pytest.mark.parametrize("text,expected", [
        ("0", "0"),
        ("-0", "0"),
        ("1.5000", "1.5"),
        ("0.0001", "0.0001"),
        ("-1234.1200", "-1234.12"),
        ("1,000,000", "1000000"),
    ])
    def test_canonical_form(self, text, expected):
        """Test trailing zeros and the point are dropped."""
        assert str(Decimal.parse(text)) == expected

    def test_format_unreduced_rational(self):
        """Test formatting does not depend on the rational being reduced."""
        assert str(Decimal(Fraction(-912, 100))) == "-9.12"

    def test_repr_and_format(self):
        """Test repr and format specs."""
        value = Decimal.parse("2.5")
        assert repr(value) == "Decimal('2.5')"
        assert f"{value:>5}" == "  2.5"


class TestDecimalArithmetic:
    """Test exact arithmetic and comparison."""

    def test_addition_is_exact(self):
        """Test sums that would drift in binary floating point."""
        total = Decimal.parse("0.1") + Decimal.parse("0.2")
        assert total == Decimal.parse("0.3")
        assert str(total) == "0.3"

    def test_sum_with_builtin(self):
        """Test sum() starting from integer zero."""
        fees = [Decimal.parse("1.25"), Decimal.parse("0.0150"), Decimal.parse("-0.5")]
        assert str(sum(fees)) == "0.765"

    def test_subtraction_and_negation(self):
        """Test subtraction with Decimals and integers."""
        value = Decimal.parse("10.25")
        assert str(value - 11) == "-0.75"
        assert str(11 - value) == "0.75"
        assert str(-value) == "-10.25"

    def test_abs(self):
        """Test absolute value."""
        assert abs(Decimal.parse("-3.5")) == Decimal.parse("3.5")

    def test_integer_scaling(self):
        """Test multiplication by integer quantities."""
        assert str(Decimal.parse("1.3") * 100) == "130"
        assert str(3 * Decimal.parse("0.0001")) == "0.0003"

    def test_comparison(self):
        """Test ordering against Decimals and integers."""
        assert Decimal.parse("1.5") < Decimal.parse("1.51")
        assert Decimal.parse("2") >= 2
        assert Decimal.parse("-0.0001") < 0
        assert sorted([Decimal.parse("3"), Decimal.parse("-1"), Decimal.parse("2.5")]) == [
            Decimal.parse("-1"), Decimal.parse("2.5"), Decimal.parse("3")
        ]

    def test_hash_consistent_with_equality(self):
        """Test equal values hash equally regardless of representation."""
        assert hash(Decimal.parse("1.50")) == hash(Decimal.parse("1.5"))
        assert len({Decimal.parse("1.50"), Decimal.parse("1.5")}) == 1

    def test_conversions(self):
        """Test float/int/bool conversions."""
        value = Decimal.parse("-2.75")
        assert float(value) == -2.75
        assert int(value) == -2
        assert bool(Decimal.parse("0")) is False
        assert value.is_negative()


class TestDecimalConstruction:
    """Test alternative constructors."""

    def test_from_value_integer_or_string(self):
        """Test integers and strings are both accepted."""
        assert Decimal.from_value(5) == 5
        assert Decimal.from_value("5.25") == Fraction(21, 4)

    @pytest.mark.parametrize("value", [True, 1.5, None, [1]])
    def test_from_value_rejects_other_types(self, value):
        """Test booleans, floats and other types are rejected."""
        with pytest.raises(DecimalParseError):
            Decimal.from_value(value)

    def test_from_fraction(self):
        """Test representable fractions are accepted."""
        assert str(Decimal.from_fraction(Fraction(1, 8))) == "0.125"

    def test_from_fraction_rejects_excess_precision(self):
        """Test fractions needing more than four digits are rejected."""
        with pytest.raises(DecimalParseError):
            Decimal.from_fraction(Fraction(1, 3))
        with pytest.raises(DecimalParseError):
            Decimal.from_fraction(Fraction(1, 100000))

    def test_constructor_accepts_exact_values(self):
        """Test integers and representable fractions build directly."""
        assert str(Decimal(3)) == "3"
        assert str(Decimal(Fraction(1, 8))) == "0.125"
        assert Decimal() == 0

    @pytest.mark.parametrize("value", [Fraction(1, 3), Fraction(1, 100000)])
    def test_constructor_rejects_excess_precision(self, value):
        """Test the constructor enforces four fractional digits."""
        with pytest.raises(DecimalParseError):
            Decimal(value)

    @pytest.mark.parametrize("value", [0.5, True, "1.5", None])
    def test_constructor_rejects_other_types(self, value):
        """Test floats, booleans and strings are not coerced."""
        with pytest.raises(DecimalParseError):
            Decimal(value)

    def test_numerator_denominator(self):
        """Test the reduced rational components."""
        value = Decimal.parse("0.3")
        assert (value.numerator, value.denominator) == (3, 10)
