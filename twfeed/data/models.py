"""
Value types shared by the option symbol codec and feed consumers.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from ..errors import DecodeError


class OptionType(str, Enum):
    """Option right, valued by its one-letter symbol code."""
    CALL = "C"
    PUT = "P"

    @classmethod
    def from_code(cls, code: str) -> "OptionType":
        """Resolve a `C`/`P` code, raising DecodeError for anything else."""
        try:
            return cls(code)
        except ValueError:
            raise DecodeError(
                f"Invalid option type code: {code!r}",
                context={"code": code}
            ) from None


@dataclass(frozen=True, order=True)
class ExpirationDate:
    """Calendar expiration date without a time component."""
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        # Raises ValueError for impossible dates such as 2021-02-30
        date(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, value: date) -> "ExpirationDate":
        return cls(value.year, value.month, value.day)

    @classmethod
    def parse(cls, text: str) -> "ExpirationDate":
        """Parse an ISO `YYYY-MM-DD` string."""
        return cls.from_date(datetime.strptime(text, "%Y-%m-%d").date())

    @classmethod
    def parse_compact(cls, text: str) -> "ExpirationDate":
        """Parse the six-digit `YYMMDD` form used inside option symbols."""
        if len(text) != 6 or not text.isascii() or not text.isdigit():
            raise ValueError(f"Expected six digits in YYMMDD form, got {text!r}")
        return cls.from_date(datetime.strptime(text, "%y%m%d").date())

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return self.to_date().isoformat()
