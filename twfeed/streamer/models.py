"""
Streamer data models.

Connection states for the protocol client, the per-event-type subscription
record and the demultiplexed data returned from a poll.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from ..errors import FieldNotFoundError


class ChannelState(str, Enum):
    """Protocol client states, in handshake order."""
    DISCONNECTED = "disconnected"
    TRANSPORT_CONNECTED = "transport_connected"
    SETUP_ACKNOWLEDGED = "setup_acknowledged"
    AUTHORIZED = "authorized"
    CHANNEL_OPEN = "channel_open"
    FEED_CONFIGURED = "feed_configured"
    SUBSCRIBED = "subscribed"
    FAILED = "failed"


# States in which the feed channel is usable
OPEN_STATES = frozenset({
    ChannelState.CHANNEL_OPEN,
    ChannelState.FEED_CONFIGURED,
    ChannelState.SUBSCRIBED,
})


@dataclass
class Subscription:
    """Symbols subscribed for one event type and the fields negotiated for it."""
    event_type: str
    fields: tuple[str, ...]
    symbols: set[str] = field(default_factory=set)


@dataclass
class SubscriptionData:
    """
    Values received for one event type.

    `values` is the flat sequence as received: record `i`
    occupies `values[i * len(fields):(i + 1) * len(fields)]`.
    """
    event_type: str
    fields: list[str]
    values: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        """Number of records."""
        if not self.fields:
            return 0
        return len(self.values) // len(self.fields)

    def field_index(self, field_name: str) -> int:
        try:
            return self.fields.index(field_name)
        except ValueError:
            raise FieldNotFoundError(
                f"Missing index for field: {field_name}",
                event_type=self.event_type,
                field_name=field_name
            ) from None

    def iter_field(self, field_name: str) -> Iterator[Any]:
        """Yield the value of one field for every record."""
        index = self.field_index(field_name)
        width = len(self.fields)
        for start in range(0, len(self.values) - width + 1, width):
            yield self.values[start + index]

    def rows(self) -> Iterator[dict[str, Any]]:
        """Yield each record as a field-name to value mapping."""
        width = len(self.fields)
        for start in range(0, len(self.values) - width + 1, width):
            yield dict(zip(self.fields, self.values[start:start + width]))

    def extend(self, values: list[Any]) -> None:
        self.values.extend(values)
