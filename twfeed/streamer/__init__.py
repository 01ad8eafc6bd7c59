"""
Streaming protocol client module.

Manages the feed connection state machine, per-event-type schema
negotiation, subscription batching and compact frame demultiplexing.
Handles transitions DISCONNECTED → ... → CHANNEL_OPEN → SUBSCRIBED.
"""

from .client import StreamerClient
from .models import ChannelState, Subscription, SubscriptionData
from .pacing import NoPacing, Pacer, TokenBucketPacer
from .registry import SchemaRegistry
from .transport import Transport, WebSocketTransport

__all__ = [
    "StreamerClient",
    "ChannelState",
    "Subscription",
    "SubscriptionData",
    "NoPacing",
    "Pacer",
    "TokenBucketPacer",
    "SchemaRegistry",
    "Transport",
    "WebSocketTransport",
]
