"""
Error classification system for the market-data feed client.

Decode errors cover malformed symbols, amounts and frames and are
recoverable per value. Streamer errors cover the connection itself and are
fatal to the current connection attempt.
"""

from .decode import (
    DecodeError,
    SymbolDecodeError,
    UnresolvedFuturesExchangeError,
    DecimalParseError,
    MissingSchemaError,
    FieldNotFoundError,
    MalformedFrameError,
)
from .streamer import (
    StreamerError,
    ConnectionNotEstablishedError,
    HandshakeDecodeError,
    AuthenticationRejectedError,
    TransportError,
    ConfigurationError,
)

__all__ = [
    # Decode Errors
    "DecodeError",
    "SymbolDecodeError",
    "UnresolvedFuturesExchangeError",
    "DecimalParseError",
    "MissingSchemaError",
    "FieldNotFoundError",
    "MalformedFrameError",
    # Streamer Failures
    "StreamerError",
    "ConnectionNotEstablishedError",
    "HandshakeDecodeError",
    "AuthenticationRejectedError",
    "TransportError",
    "ConfigurationError",
]
