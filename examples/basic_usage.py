#!/usr/bin/env python3
"""
Basic Usage Example - twfeed streaming quotes

This script demonstrates the basic usage of the feed client. It shows how to:
- Build a session from TWFEED_TOKEN and TWFEED_URL
- Convert brokerage option identifiers to feed quote symbols
- Subscribe to Quote and Greeks events
- Poll and read demultiplexed values as exact decimals

Run: TWFEED_TOKEN=... TWFEED_URL=... python examples/basic_usage.py
"""

import time

from twfeed import OptionSymbol, StreamerClient, StreamerSession
from twfeed.data.values import to_decimal
from twfeed.errors import DecodeError
from twfeed.logging import configure_logging, get_logger

POSITIONS = [
    "SPY   210115C00400000",
    "SPXW  201016C03400000",
    "./ESZ0 EW4Z0 201127P3300",
]

POLL_INTERVAL_SECONDS = 1.0
POLL_ROUNDS = 10

logger = get_logger(__name__)


def quote_symbols(identifiers: list[str]) -> list[str]:
    """Feed quote symbols for the identifiers that can be converted."""
    symbols = []
    for identifier in identifiers:
        try:
            symbols.append(OptionSymbol(identifier).quote_symbol())
        except DecodeError as e:
            logger.warning("Skipping symbol", identifier=identifier, error=str(e))
    return symbols


def print_quotes(client: StreamerClient) -> None:
    data = client.poll()

    quotes = data.get("Quote")
    if quotes is not None:
        for row in quotes.rows():
            bid = to_decimal(row["bidPrice"])
            ask = to_decimal(row["askPrice"])
            print(f"📈 {row['eventSymbol']}: bid {bid} / ask {ask}")

    greeks = data.get("Greeks")
    if greeks is not None:
        for symbol, delta in zip(greeks.iter_field("eventSymbol"), greeks.iter_field("delta")):
            print(f"🔢 {symbol}: delta {delta}")


def main():
    configure_logging(level="INFO")

    session = StreamerSession.from_env()
    symbols = quote_symbols(POSITIONS)
    print(f"🔌 Subscribing to {len(symbols)} option symbols")

    with StreamerClient(session) as client:
        client.add_subscription("Quote", symbols)
        client.add_subscription("Greeks", symbols)

        for _ in range(POLL_ROUNDS):
            print_quotes(client)
            time.sleep(POLL_INTERVAL_SECONDS)


if __name__ == "__main__":
    main()
