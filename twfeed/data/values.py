"""
Conversion of raw feed values into exact quantities.

Compact frames deliver numbers as JSON numbers, and deliver missing numeric
values as the string "NaN". Both converters map a missing value to None
instead of failing.
"""

import math
from fractions import Fraction
from typing import Any, Optional

from ..errors import DecimalParseError
from .decimal import Decimal

NAN_LITERAL = "NaN"


def is_missing(value: Any) -> bool:
    """True for null, the "NaN" literal and non-finite floats."""
    if value is None or value == NAN_LITERAL:
        return True
    return isinstance(value, float) and not math.isfinite(value)


def to_price(value: Any) -> Optional[Fraction]:
    """
    Convert a raw feed value to an exact rational price.

    Floats are converted through their shortest repr, so 17.52 becomes
    1752/100 rather than the nearest binary fraction.

    Raises:
        DecimalParseError: if the value is neither numeric nor missing
    """
    if is_missing(value):
        return None

    if isinstance(value, bool):
        raise DecimalParseError(f"Expected a numeric feed value, got {value!r}",
                                raw_value=repr(value))

    if isinstance(value, int):
        return Fraction(value)

    if isinstance(value, (float, str)):
        try:
            return Fraction(repr(value) if isinstance(value, float) else value)
        except ValueError:
            raise DecimalParseError(
                f"Invalid numeric feed value {value!r}",
                raw_value=str(value),
                offending=str(value)
            ) from None

    raise DecimalParseError(
        f"Expected a numeric feed value, got {type(value).__name__}",
        raw_value=repr(value)
    )


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a raw feed value to a four-digit Decimal.

    Raises:
        DecimalParseError: if the value is not numeric or needs more than
            four fractional digits
    """
    if is_missing(value):
        return None

    if isinstance(value, str):
        return Decimal.parse(value)

    price = to_price(value)
    return Decimal.from_fraction(price)
