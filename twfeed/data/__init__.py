"""
Codecs for exact amounts and option symbols.

Exact four-digit decimals, option identifier parsing and feed quote-symbol
formatting, and conversion of raw feed values.
"""

from .decimal import Decimal
from .models import ExpirationDate, OptionType
from .symbol import OptionSymbol, QuoteSymbol, strip_weekly
from .values import to_decimal, to_price

__all__ = [
    "Decimal",
    "ExpirationDate",
    "OptionType",
    "OptionSymbol",
    "QuoteSymbol",
    "strip_weekly",
    "to_decimal",
    "to_price",
]
