"""
Decode error classifications for symbols, decimals and feed frames.

These exceptions describe malformed input that the caller can recover from:
a bad symbol or amount affects a single value, not the connection.
"""

from typing import Any, Dict, Optional


class DecodeError(Exception):
    """Base class for input that could not be decoded."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class SymbolDecodeError(DecodeError):
    """A fixed-position field of an option symbol is absent or malformed."""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 component: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.component = component


class UnresolvedFuturesExchangeError(SymbolDecodeError):
    """Futures root symbol has no entry in the exchange table."""

    def __init__(self, message: str, root: Optional[str] = None, **kwargs):
        super().__init__(message, component="exchange", **kwargs)
        self.root = root


class DecimalParseError(DecodeError, ValueError):
    """Non-numeric or over-precision decimal input."""

    def __init__(self, message: str, raw_value: Optional[str] = None,
                 offending: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_value = raw_value
        self.offending = offending


class MissingSchemaError(DecodeError):
    """Data frame references an event type whose fields were never negotiated."""

    def __init__(self, message: str, event_type: Optional[str] = None,
                 received: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.event_type = event_type
        # Data decoded for known event types before the error was raised
        self.received = received if received is not None else {}


class FieldNotFoundError(DecodeError):
    """Field name is not part of the negotiated schema for an event type."""

    def __init__(self, message: str, event_type: Optional[str] = None,
                 field_name: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.event_type = event_type
        self.field_name = field_name


class MalformedFrameError(DecodeError):
    """Incoming message is not a well-formed feed frame."""

    def __init__(self, message: str, raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
