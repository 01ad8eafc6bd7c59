"""
Exact fixed-precision decimal amounts.

Amounts on the feed and in brokerage records carry at most four fractional
digits. They are held as a rational over 10000 so that sums, differences
and comparisons never pick up binary floating-point error.
"""

import re
from dataclasses import dataclass
from fractions import Fraction
from functools import total_ordering
from typing import Union

from ..errors import DecimalParseError

FRACTION_DIGITS = 4
SCALE = 10 ** FRACTION_DIGITS
THOUSANDS_SEPARATOR = ","

_INTEGER_RE = re.compile(r"[0-9]+")
_FRACTION_RE = re.compile(r"[0-9]{0,%d}" % FRACTION_DIGITS)
_DIGITS_RE = re.compile(r"[0-9]*")


@total_ordering
@dataclass(frozen=True, eq=False)
class Decimal:
    """
    Immutable exact decimal with at most four fractional digits.

    `str()` produces the canonical form: no trailing fractional zeros, the
    decimal point omitted for integral values and a leading `-` only for
    negative values.
    """
    value: Fraction = Fraction(0)

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, bool) or not isinstance(value, (int, Fraction)):
            raise DecimalParseError(
                f"Expected an integer or a Fraction, got {type(value).__name__}",
                raw_value=repr(value)
            )

        value = Fraction(value)
        if (value * SCALE).denominator != 1:
            raise DecimalParseError(
                f"{value} is not representable with {FRACTION_DIGITS} fractional digits",
                raw_value=str(value),
                offending=str(value)
            )
        object.__setattr__(self, "value", value)

    @classmethod
    def parse(cls, text: str) -> "Decimal":
        """
        Parse a decimal string such as `"12,345.4321"` or `"-9.12"`.

        Raises:
            DecimalParseError: naming the substring that could not be parsed
        """
        if not isinstance(text, str):
            raise DecimalParseError(
                f"Expected a string, got {type(text).__name__}",
                raw_value=repr(text)
            )

        cleaned = text.replace(THOUSANDS_SEPARATOR, "")
        negative = cleaned.startswith("-")
        body = cleaned[1:] if cleaned[:1] in ("-", "+") else cleaned

        integer_str, _, fraction_str = body.partition(".")

        if not _INTEGER_RE.fullmatch(integer_str):
            raise DecimalParseError(
                f"Invalid integer part {integer_str!r} in decimal {text!r}",
                raw_value=text,
                offending=integer_str
            )

        if not _DIGITS_RE.fullmatch(fraction_str):
            raise DecimalParseError(
                f"Invalid fractional part {fraction_str!r} in decimal {text!r}",
                raw_value=text,
                offending=fraction_str
            )

        if not _FRACTION_RE.fullmatch(fraction_str):
            raise DecimalParseError(
                f"Fractional part {fraction_str!r} of {text!r} exceeds "
                f"{FRACTION_DIGITS} digits",
                raw_value=text,
                offending=fraction_str
            )

        numerator = int(integer_str) * SCALE + int(fraction_str.ljust(FRACTION_DIGITS, "0"))
        if negative:
            numerator = -numerator

        return cls(Fraction(numerator, SCALE))

    @classmethod
    def from_value(cls, value: Union[int, str]) -> "Decimal":
        """Build from an integer or a decimal string, as amounts arrive in JSON."""
        if isinstance(value, bool):
            raise DecimalParseError(f"Expected an integer or a string, got {value!r}",
                                    raw_value=repr(value))
        if isinstance(value, int):
            return cls(Fraction(value))
        if isinstance(value, str):
            return cls.parse(value)
        raise DecimalParseError(
            f"Expected an integer or a string, got {type(value).__name__}",
            raw_value=repr(value)
        )

    @classmethod
    def from_fraction(cls, value: Fraction) -> "Decimal":
        """Wrap a rational, rejecting values that need more than four fractional digits."""
        return cls(value)

    @property
    def numerator(self) -> int:
        return self.value.numerator

    @property
    def denominator(self) -> int:
        return self.value.denominator

    def as_fraction(self) -> Fraction:
        return self.value

    def is_negative(self) -> bool:
        return self.value < 0

    def __str__(self) -> str:
        magnitude = abs(self.value)
        integer = int(magnitude)
        fraction = int((magnitude - integer) * SCALE)

        fraction_str = f"{fraction:0{FRACTION_DIGITS}d}".rstrip("0")
        text = f"{integer}.{fraction_str}" if fraction_str else str(integer)

        return f"-{text}" if self.value < 0 else text

    def __repr__(self) -> str:
        return f"Decimal('{self}')"

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    def _coerce(self, other: object) -> Fraction:
        if isinstance(other, Decimal):
            return other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return Fraction(other)
        return NotImplemented  # type: ignore[return-value]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Fraction):
            return self.value == other
        value = self._coerce(other)
        if value is NotImplemented:
            return NotImplemented
        return self.value == value

    def __lt__(self, other: object) -> bool:
        value = self._coerce(other)
        if value is NotImplemented:
            return NotImplemented
        return self.value < value

    def __hash__(self) -> int:
        return hash(self.value)

    def __add__(self, other: object) -> "Decimal":
        value = self._coerce(other)
        if value is NotImplemented:
            return NotImplemented
        return Decimal(self.value + value)

    __radd__ = __add__

    def __sub__(self, other: object) -> "Decimal":
        value = self._coerce(other)
        if value is NotImplemented:
            return NotImplemented
        return Decimal(self.value - value)

    def __rsub__(self, other: object) -> "Decimal":
        value = self._coerce(other)
        if value is NotImplemented:
            return NotImplemented
        return Decimal(value - self.value)

    def __mul__(self, other: object) -> "Decimal":
        # Scaling by an integer quantity keeps four-digit precision
        if isinstance(other, int) and not isinstance(other, bool):
            return Decimal(self.value * other)
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> "Decimal":
        return Decimal(-self.value)

    def __pos__(self) -> "Decimal":
        return self

    def __abs__(self) -> "Decimal":
        return Decimal(abs(self.value))

    def __bool__(self) -> bool:
        return self.value != 0

    def __float__(self) -> float:
        return float(self.value)

    def __int__(self) -> int:
        return int(self.value)


def parse(text: str) -> Decimal:
    """Module-level shorthand for `Decimal.parse`."""
    return Decimal.parse(text)


def format_decimal(value: Decimal) -> str:
    """Canonical string form of a Decimal."""
    return str(value)
