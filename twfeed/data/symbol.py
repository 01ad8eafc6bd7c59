"""
Option symbol parsing and feed quote-symbol formatting.

Brokerage option identifiers come in two shapes:

    Equity/index option (OCC style, underlying padded with spaces):
        "IQ    200918P00017500"
         ^^^^^^ ^^^^^^^^^^^^^^^
         root   YYMMDD + C/P + 5 integer and 3 fractional strike digits

    Futures option:
        "./NGZ0 LNEZ0 201124C4.5"
         ^^^^^^ ^^^^^ ^^^^^^^^^^
         future option YYMMDD + C/P + variable-width strike
                root+month+year digit

The feed addresses the same contracts with its own quote symbols, e.g.
".IQ200918P17.5" and "./LNEZ20C4.5:XNYM". `OptionSymbol` is a read-only
view over the identifier string; every accessor re-parses the relevant
fixed-position field and raises `SymbolDecodeError` if it is missing or
malformed.
"""

import re
from fractions import Fraction
from typing import Optional

from ..errors import DecodeError, SymbolDecodeError, UnresolvedFuturesExchangeError
from .models import ExpirationDate, OptionType

# Weekly option roots that quote under their standard root. Explicit
# entries only; similarly shaped tickers are not folded automatically.
WEEKLY_ROOTS: dict[str, str] = {
    "SPXW": "SPX",
}

FUTURES_EXCHANGES: dict[str, str] = {
    "/ZB": "XCBT",
    "/ZN": "XCBT",
    "/ZF": "XCBT",
    "/ZT": "XCBT",
    "/UB": "XCBT",
    "/GE": "XCME",
    "/6A": "XCME",
    "/6B": "XCME",
    "/6C": "XCME",
    "/6E": "XCME",
    "/6J": "XCME",
    "/6M": "XCME",
    "/ZC": "XCBT",
    "/ZS": "XCBT",
    "/ZW": "XCBT",
    "/HE": "XCBT",
    "/CL": "XNYM",
    "/NG": "XNYM",
    "/GC": "XCEC",
    "/SI": "XCEC",
    "/HG": "XCEC",
    "/ES": "XCME",
    "/NQ": "XCME",
    "/YM": "XCBT",
    "/RTY": "XCME",
    "/VX": "XCBF",
    "/VXM": "XCBF",
    "/BTC": "XCME",
}

FUTURES_MONTH_CODES = "FGHJKMNQUVXZ"

# Month code + single year digit, e.g. "Z0"
EXPIRY_SUFFIX_LEN = 2
DATE_LEN = 6
OPTION_TYPE_OFFSET = 6
STRIKE_OFFSET = 7
EQUITY_STRIKE_INTEGER_DIGITS = 5
EQUITY_STRIKE_FRACTION_DIGITS = 3

_DIGITS_RE = re.compile(r"[0-9]*")


def strip_weekly(underlying_symbol: str) -> str:
    """Map a weekly root such as SPXW onto the root it is quoted under."""
    return WEEKLY_ROOTS.get(underlying_symbol, underlying_symbol)


def _format_strike(integer_str: str, fraction_str: str) -> str:
    integer_str = integer_str.lstrip("0") or "0"
    fraction_str = fraction_str.rstrip("0")
    return f"{integer_str}.{fraction_str}" if fraction_str else integer_str


class OptionSymbol:
    """Parsing view over a brokerage option identifier."""

    __slots__ = ("_symbol",)

    def __init__(self, symbol: str):
        self._symbol = symbol

    @classmethod
    def from_string(cls, symbol: str) -> "OptionSymbol":
        return cls(symbol)

    @property
    def raw(self) -> str:
        return self._symbol

    def __str__(self) -> str:
        return self._symbol

    def __repr__(self) -> str:
        return f"OptionSymbol({self._symbol!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionSymbol):
            return NotImplemented
        return self._symbol == other._symbol

    def __hash__(self) -> int:
        return hash(self._symbol)

    def is_future_option(self) -> bool:
        return self._symbol[1:2] == "/"

    def _error(self, message: str, component: str) -> SymbolDecodeError:
        return SymbolDecodeError(
            f"{message} for symbol: {self._symbol!r}",
            symbol=self._symbol,
            component=component
        )

    def _common_slice(self) -> str:
        """The part shaped like `<ROOT> <YYMMDD><C|P><strike>` for both formats."""
        if not self.is_future_option():
            return self._symbol

        parts = self._symbol.split(" ", 1)
        if len(parts) < 2:
            raise self._error("Missing option component", "option")
        return parts[1].lstrip()

    def _first_token(self) -> str:
        tokens = self._common_slice().split()
        if not tokens:
            raise self._error("Missing underlying symbol", "underlying")
        return tokens[0]

    def _contract_token(self) -> str:
        tokens = self._common_slice().split()
        if len(tokens) < 2:
            raise self._error("Missing date/type/strike component", "contract")
        return tokens[1]

    def _date_component(self) -> str:
        date_str = self._contract_token()[:DATE_LEN]
        if len(date_str) != DATE_LEN or not date_str.isascii() or not date_str.isdigit():
            raise self._error("Missing date component", "date")
        return date_str

    def _option_type_component(self) -> str:
        token = self._contract_token()
        if len(token) <= OPTION_TYPE_OFFSET:
            raise self._error("Missing option type component", "option_type")
        return token[OPTION_TYPE_OFFSET]

    def _price_components(self) -> tuple[str, str]:
        """Raw (integer digits, fractional digits) of the strike."""
        price = self._contract_token()[STRIKE_OFFSET:]
        if not price:
            raise self._error("Missing price component", "strike")

        if self.is_future_option():
            integer_str, _, fraction_str = price.partition(".")
            if not integer_str and not fraction_str:
                raise self._error("Missing price digits", "strike")
        else:
            width = EQUITY_STRIKE_INTEGER_DIGITS + EQUITY_STRIKE_FRACTION_DIGITS
            if len(price) != width:
                raise self._error(
                    f"Expected {width} strike digits, got {price!r}", "strike"
                )
            integer_str = price[:EQUITY_STRIKE_INTEGER_DIGITS]
            fraction_str = price[EQUITY_STRIKE_INTEGER_DIGITS:]

        if not (_DIGITS_RE.fullmatch(integer_str) and _DIGITS_RE.fullmatch(fraction_str)):
            raise self._error(f"Malformed price component {price!r}", "strike")

        return integer_str, fraction_str

    def underlying_symbol(self) -> str:
        """
        Underlying root of the option.

        For equity/index options this is the first token with weekly roots
        mapped (SPXW -> SPX). For futures options it is the future's root
        without the leading `./` and the month/year suffix (`./NGZ0` -> `NG`).
        """
        if self.is_future_option():
            return self.future_symbol()[1:]
        return strip_weekly(self._first_token())

    def option_root(self) -> str:
        """Option product root: `LNE` for `./NGZ0 LNEZ0 ...`, the underlying otherwise."""
        if not self.is_future_option():
            return self.underlying_symbol()

        token = self._first_token()
        if len(token) <= EXPIRY_SUFFIX_LEN:
            raise self._error("Missing futures option root", "underlying")
        return token[:-EXPIRY_SUFFIX_LEN]

    def future_symbol(self) -> str:
        """Futures root including the slash, e.g. `/NG`; equity options raise."""
        if not self.is_future_option():
            raise self._error("Not a futures option", "future")

        token = self._symbol.split()[0]
        root = token[1:len(token) - EXPIRY_SUFFIX_LEN]
        if len(root) < 2:
            raise self._error("Missing futures root", "future")
        return root

    def future_exchange(self) -> Optional[str]:
        """Exchange code for futures options, None for equity/index options."""
        if not self.is_future_option():
            return None

        root = self.future_symbol()
        exchange = FUTURES_EXCHANGES.get(root)
        if exchange is None:
            raise UnresolvedFuturesExchangeError(
                f"Unhandled future: {root}",
                root=root,
                symbol=self._symbol
            )
        return exchange

    def expiration_date(self) -> ExpirationDate:
        """
        Expiration date of an equity/index option.

        Futures options carry no expiration date in this view; the date has
        to come from the record the symbol belongs to.
        """
        if self.is_future_option():
            raise self._error("Expiration date is not encoded in futures option symbols",
                              "date")

        date_str = self._date_component()
        try:
            return ExpirationDate.parse_compact(date_str)
        except ValueError:
            raise self._error(f"Invalid expiration date {date_str!r}", "date") from None

    def option_type(self) -> OptionType:
        try:
            return OptionType.from_code(self._option_type_component())
        except DecodeError:
            raise self._error("Invalid option type", "option_type") from None

    def strike_price(self) -> Fraction:
        """Exact strike price."""
        integer_str, fraction_str = self._price_components()
        integer = Fraction(int(integer_str or "0"))
        if not fraction_str:
            return integer
        return integer + Fraction(int(fraction_str), 10 ** len(fraction_str))

    def _futures_contract_code(self) -> str:
        """Option root with the year digit widened to two digits: `LNEZ0` -> `LNEZ20`."""
        token = self._first_token()
        root = self.option_root()
        month_code, year_digit = token[-2], token[-1]
        if month_code not in FUTURES_MONTH_CODES or not year_digit.isdigit():
            raise self._error(f"Invalid futures month/year suffix {token[-2:]!r}", "contract")

        # The contract year is the first year ending in the digit that does
        # not precede the year in the date field.
        date_year = int(self._date_component()[:2])
        year = date_year - date_year % 10 + int(year_digit)
        if year < date_year:
            year += 10
        return f"{root}{month_code}{year % 100:02d}"

    def quote_symbol(self) -> str:
        """Feed quote symbol, e.g. `.IQ200918P17.5` or `./LNEZ20C4.5:XNYM`."""
        option_type = self.option_type()
        strike = _format_strike(*self._price_components())

        if self.is_future_option():
            exchange = self.future_exchange()
            return f"./{self._futures_contract_code()}{option_type.value}{strike}:{exchange}"

        return (
            f".{self.underlying_symbol()}{self._date_component()}"
            f"{option_type.value}{strike}"
        )


class QuoteSymbol:
    """View over a feed quote symbol such as `.IQ200918P17.5`."""

    __slots__ = ("_symbol",)

    def __init__(self, symbol: str):
        self._symbol = symbol

    def __str__(self) -> str:
        return self._symbol

    def __repr__(self) -> str:
        return f"QuoteSymbol({self._symbol!r})"

    def matches_underlying_symbol(self, underlying_symbol: str) -> bool:
        """
        True if the quote symbol belongs to `underlying_symbol`.

        The underlying must be followed directly by the numeric date field,
        so `.IQ200918P17.5` matches `IQ` but not `I`.
        """
        body = self._symbol[1:]
        if not body.startswith(underlying_symbol):
            return False

        next_char = body[len(underlying_symbol):len(underlying_symbol) + 1]
        return not next_char or next_char.isdigit()
