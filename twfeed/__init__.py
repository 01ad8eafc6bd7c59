"""
twfeed - Brokerage Market-Data Feed Client

Client library for a brokerage's real-time market-data push feed. Handles
the streaming handshake, per-event-type schema negotiation and compact
frame demultiplexing, plus exact decimal amounts and option symbol
conversion between brokerage identifiers and feed quote symbols.
"""

__version__ = "0.1.0"
__author__ = "twfeed Team"

from .data import Decimal, ExpirationDate, OptionSymbol, OptionType, QuoteSymbol
from .session import StreamerSession
from .streamer import StreamerClient, SubscriptionData

__all__ = [
    "Decimal",
    "ExpirationDate",
    "OptionSymbol",
    "OptionType",
    "QuoteSymbol",
    "StreamerSession",
    "StreamerClient",
    "SubscriptionData",
]
