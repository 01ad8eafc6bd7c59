"""
Control message construction and incoming message decoding.

Control messages are JSON objects sent as text frames. Channel 0 carries
connection-level traffic (setup, auth, keepalive); the feed service runs on
the channel opened by CHANNEL_REQUEST.

Incoming data frames use the compact format:

    {"type": "FEED_DATA", "channel": 1,
     "data": ["Quote", ["Quote", ".IQ200918P17.5", 1.2, 1.3, ...]]}

The `data` array alternates event-type names and flat value arrays whose
length is a multiple of the negotiated field count for that event type.
"""

from typing import Any, Iterator, Optional, Sequence

import orjson

from ..config.defaults import FeedParams, ProtocolParams
from ..errors import HandshakeDecodeError, MalformedFrameError

CONTROL_CHANNEL = 0

SETUP = "SETUP"
AUTH = "AUTH"
AUTH_STATE = "AUTH_STATE"
CHANNEL_REQUEST = "CHANNEL_REQUEST"
CHANNEL_OPENED = "CHANNEL_OPENED"
FEED_SETUP = "FEED_SETUP"
FEED_CONFIG = "FEED_CONFIG"
FEED_SUBSCRIPTION = "FEED_SUBSCRIPTION"
KEEPALIVE = "KEEPALIVE"
ERROR = "ERROR"

AUTHORIZED = "AUTHORIZED"
UNAUTHORIZED = "UNAUTHORIZED"

SUBSCRIPTION_ACTIONS = ("add", "remove")


def setup_message(params: ProtocolParams) -> dict[str, Any]:
    return {
        "type": SETUP,
        "channel": CONTROL_CHANNEL,
        "keepaliveTimeout": params.keepalive_timeout,
        "acceptKeepaliveTimeout": params.accept_keepalive_timeout,
        "version": params.version,
    }


def auth_message(token: str) -> dict[str, Any]:
    return {"type": AUTH, "channel": CONTROL_CHANNEL, "token": token}


def channel_request_message(params: FeedParams) -> dict[str, Any]:
    return {
        "type": CHANNEL_REQUEST,
        "channel": params.channel,
        "service": params.service,
        "parameters": {"contract": params.contract},
    }


def feed_setup_message(
    channel: int,
    event_type: str,
    fields: Sequence[str],
    params: FeedParams
) -> dict[str, Any]:
    return {
        "type": FEED_SETUP,
        "channel": channel,
        "acceptAggregationPeriod": params.aggregation_period,
        "acceptDataFormat": params.data_format,
        "acceptEventFields": {event_type: list(fields)},
    }


def subscription_message(
    channel: int,
    event_type: str,
    symbols: Sequence[str],
    action: str = "add"
) -> dict[str, Any]:
    if action not in SUBSCRIPTION_ACTIONS:
        raise ValueError(f"Unknown subscription action: {action}")

    return {
        "type": FEED_SUBSCRIPTION,
        "channel": channel,
        action: [{"type": event_type, "symbol": symbol} for symbol in symbols],
    }


def keepalive_message() -> dict[str, Any]:
    return {"type": KEEPALIVE, "channel": CONTROL_CHANNEL}


def encode(message: dict[str, Any]) -> str:
    return orjson.dumps(message).decode("utf-8")


def redact(message: dict[str, Any]) -> dict[str, Any]:
    """Copy of a message that is safe to log."""
    if "token" not in message:
        return message
    return {**message, "token": "***"}


def decode(text: Any) -> Optional[dict[str, Any]]:
    """Decode a text frame into a JSON object, or None if it is not one."""
    if not isinstance(text, (str, bytes, bytearray)):
        return None

    try:
        message = orjson.loads(text)
    except orjson.JSONDecodeError:
        return None

    return message if isinstance(message, dict) else None


def expect_reply(text: Optional[str], expected_type: str, step: str) -> dict[str, Any]:
    """
    Decode a handshake reply and check its message type.

    Raises:
        HandshakeDecodeError: if the reply is missing, unparseable or of
            another message type
    """
    if text is None:
        raise HandshakeDecodeError(
            f"No reply received during {step}",
            step=step,
            expected_type=expected_type
        )

    message = decode(text)
    if message is None:
        raise HandshakeDecodeError(
            f"Unreadable reply during {step}",
            step=step,
            expected_type=expected_type,
            raw_reply=str(text)
        )

    message_type = message.get("type")
    if message_type != expected_type:
        if message_type == ERROR:
            detail = f"{message.get('error')}: {message.get('message')}"
        else:
            detail = f"got {message_type!r}"
        raise HandshakeDecodeError(
            f"Expected {expected_type} reply during {step}, {detail}",
            step=step,
            expected_type=expected_type,
            raw_reply=str(text)
        )

    return message


def parse_data_frame(message: dict[str, Any]) -> list[tuple[str, list[Any]]]:
    """
    Split a compact data frame into (event type, flat values) pairs.

    Raises:
        MalformedFrameError: if `data` is absent or not alternating
            event-type names and value arrays
    """
    data = message.get("data")

    if not isinstance(data, list) or not data or len(data) % 2 != 0:
        raise MalformedFrameError("Data frame must alternate event types and value arrays",
                                  raw_data=str(data))

    frames = []
    for i in range(0, len(data), 2):
        event_type, values = data[i], data[i + 1]
        if not isinstance(event_type, str) or not isinstance(values, list):
            raise MalformedFrameError(
                f"Invalid data frame entry at position {i}",
                raw_data=str(data)
            )
        frames.append((event_type, values))

    return frames


def iter_batches(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    """Consecutive slices of at most `size` items."""
    for start in range(0, len(items), size):
        yield items[start:start + size]
