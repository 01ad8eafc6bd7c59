"""
Streaming protocol client.

Drives the feed handshake and demultiplexes compact data frames:

    DISCONNECTED → TRANSPORT_CONNECTED → SETUP_ACKNOWLEDGED → AUTHORIZED
        → CHANNEL_OPEN → FEED_CONFIGURED → SUBSCRIBED

Any failure during `connect()` closes the transport and leaves the client
in FAILED; calling `connect()` again starts over. The client does not
reconnect on its own.
"""

import threading
from typing import Any, Callable, Iterable, Optional, Sequence

from ..config.defaults import DefaultConfig, TransportParams, get_default_config
from ..errors import (
    AuthenticationRejectedError,
    ConnectionNotEstablishedError,
    HandshakeDecodeError,
    MalformedFrameError,
    MissingSchemaError,
)
from ..logging.config import get_protocol_logger, log_state_transition
from ..session import StreamerSession
from . import messages
from .models import OPEN_STATES, ChannelState, Subscription, SubscriptionData
from .pacing import Pacer, create_pacer
from .registry import SchemaRegistry
from .transport import Transport, WebSocketTransport

logger = get_protocol_logger(__name__)

TransportFactory = Callable[[str, TransportParams], Transport]


class StreamerClient:
    """
    Client for one feed connection.

    Every public operation holds an internal lock for its whole duration,
    so sends from different threads never interleave and the setup → auth
    → channel → feed-setup → subscribe ordering holds.
    """

    def __init__(
        self,
        session: StreamerSession,
        config: Optional[DefaultConfig] = None,
        transport_factory: Optional[TransportFactory] = None,
        pacer: Optional[Pacer] = None
    ) -> None:
        self.session = session
        self.config = config or get_default_config()
        self.registry = SchemaRegistry()

        self._transport_factory = transport_factory or WebSocketTransport.open
        self._pacer = pacer or create_pacer(self.config.subscription)
        self._transport: Optional[Transport] = None
        self._state = ChannelState.DISCONNECTED
        self._channel: Optional[int] = None
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = threading.RLock()

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def channel(self) -> Optional[int]:
        return self._channel

    @property
    def is_connected(self) -> bool:
        return self._state in OPEN_STATES and self._transport is not None

    @property
    def subscriptions(self) -> dict[str, Subscription]:
        return {
            event_type: Subscription(sub.event_type, sub.fields, set(sub.symbols))
            for event_type, sub in self._subscriptions.items()
        }

    def __enter__(self) -> "StreamerClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def _transition(self, to_state: ChannelState, trigger: str,
                    context: Optional[dict[str, Any]] = None) -> None:
        log_state_transition(
            logger,
            from_state=self._state.value,
            to_state=to_state.value,
            trigger=trigger,
            context=context
        )
        self._state = to_state

    def _require_channel(self, operation: str) -> Transport:
        if not self.is_connected:
            raise ConnectionNotEstablishedError(
                f"Cannot {operation}: the streamer client is not connected",
                operation=operation,
                context={"state": self._state.value}
            )
        return self._transport  # type: ignore[return-value]

    def _send(self, message: dict[str, Any]) -> None:
        logger.debug("Sending message", message=messages.redact(message))
        self._transport.send(messages.encode(message))  # type: ignore[union-attr]

    def _read_reply(self, expected_type: str, step: str) -> dict[str, Any]:
        text = self._transport.recv(timeout=None)  # type: ignore[union-attr]
        logger.debug("Received message", step=step, message=text)
        return messages.expect_reply(text, expected_type, step)

    def _read_reply_within(self, expected_type: str, step: str,
                           timeout: float) -> Optional[dict[str, Any]]:
        """Like `_read_reply`, but None if nothing arrives within `timeout` seconds."""
        text = self._transport.recv(timeout=timeout)  # type: ignore[union-attr]
        if text is None:
            return None
        logger.debug("Received message", step=step, message=text)
        return messages.expect_reply(text, expected_type, step)

    def _close_transport(self) -> None:
        transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()

    # Handshake

    def connect(self) -> None:
        """
        Open the transport, authorize and open the feed channel.

        No-op if the channel is already open.

        Raises:
            TransportError: if the endpoint cannot be reached
            HandshakeDecodeError: on an unexpected or unreadable reply
            AuthenticationRejectedError: if the token is not accepted
        """
        with self._lock:
            if self.is_connected:
                return

            self._close_transport()
            self.registry.clear()
            self._subscriptions.clear()
            self._channel = None

            try:
                self._transport = self._transport_factory(self.session.url,
                                                          self.config.transport)
                self._transition(ChannelState.TRANSPORT_CONNECTED, "transport_open",
                                 context={"url": self.session.url})
                self._setup()
                self._authorize()
                self._open_channel()
            except BaseException as exc:
                self._close_transport()
                self._transition(ChannelState.FAILED, "connect_failed",
                                 context={"error": str(exc), "error_type": type(exc).__name__})
                raise

    def _setup(self) -> None:
        self._send(messages.setup_message(self.config.protocol))
        reply = self._read_reply(messages.SETUP, "setup")
        self._transition(ChannelState.SETUP_ACKNOWLEDGED, "setup_reply",
                         context={"version": reply.get("version")})

    def _authorize(self) -> None:
        self._send(messages.auth_message(self.session.token))
        reply = self._read_reply(messages.AUTH_STATE, "auth")
        auth_state = reply.get("state")

        # The feed may announce UNAUTHORIZED right after SETUP, before it has
        # seen the token. A verdict on the token can only follow within the
        # bounded wait; a lone UNAUTHORIZED is a rejection.
        if auth_state == messages.UNAUTHORIZED:
            follow_up = self._read_reply_within(messages.AUTH_STATE, "auth",
                                                self.config.protocol.auth_state_timeout)
            if follow_up is not None:
                auth_state = follow_up.get("state")

        if auth_state != messages.AUTHORIZED:
            raise AuthenticationRejectedError(
                f"Streamer token was not authorized (state: {auth_state})",
                auth_state=auth_state
            )

        self._transition(ChannelState.AUTHORIZED, "auth_state")

    def _open_channel(self) -> None:
        self._send(messages.channel_request_message(self.config.feed))
        reply = self._read_reply(messages.CHANNEL_OPENED, "channel_open")

        channel = reply.get("channel")
        if not isinstance(channel, int) or isinstance(channel, bool):
            raise HandshakeDecodeError(
                f"CHANNEL_OPENED reply carries no channel id: {reply!r}",
                step="channel_open",
                expected_type=messages.CHANNEL_OPENED,
                raw_reply=str(reply)
            )

        self._channel = channel
        self._transition(ChannelState.CHANNEL_OPEN, "channel_opened",
                         context={"channel": channel})

    def disconnect(self) -> None:
        """Close the transport and forget negotiated schemas. Idempotent."""
        with self._lock:
            self._close_transport()
            self.registry.clear()
            self._subscriptions.clear()
            self._channel = None

            if self._state != ChannelState.DISCONNECTED:
                self._transition(ChannelState.DISCONNECTED, "disconnect")

    # Subscriptions

    def _resolve_fields(self, event_type: str,
                        fields: Optional[Sequence[str]]) -> tuple[str, ...]:
        if fields is not None:
            fields = tuple(fields)
            if not fields:
                raise ValueError(f"Field list for {event_type} must not be empty")
            return fields

        default_fields = self.config.feed.event_fields.get(event_type)
        if default_fields is None:
            raise ValueError(
                f"No default fields configured for event type {event_type}; "
                "pass fields explicitly"
            )
        return tuple(default_fields)

    def _configure_feed(self, event_type: str,
                        fields: Optional[Sequence[str]]) -> tuple[str, ...]:
        """Send FEED_SETUP for an event type the first time it is used."""
        if self.registry.is_negotiated(event_type):
            if fields is not None:
                # Logs and ignores a differing list
                self.registry.negotiate(event_type, fields)
            return self.registry.fields(event_type)

        resolved = self._resolve_fields(event_type, fields)
        self._send(messages.feed_setup_message(
            self._channel, event_type, resolved, self.config.feed  # type: ignore[arg-type]
        ))
        self.registry.negotiate(event_type, resolved)

        if self._state == ChannelState.CHANNEL_OPEN:
            self._transition(ChannelState.FEED_CONFIGURED, "feed_setup",
                             context={"event_type": event_type})
        return resolved

    def _send_subscription_batches(self, event_type: str, symbols: Sequence[str],
                                   action: str) -> int:
        batch_count = 0
        for batch in messages.iter_batches(symbols, self.config.subscription.max_batch_size):
            self._pacer.acquire()
            self._send(messages.subscription_message(
                self._channel, event_type, batch, action  # type: ignore[arg-type]
            ))
            batch_count += 1
        return batch_count

    def add_subscription(
        self,
        event_type: str,
        symbols: Iterable[str],
        fields: Optional[Sequence[str]] = None
    ) -> None:
        """
        Subscribe to `event_type` events for `symbols`.

        Sets up the feed for the event type first if needed, then sends the
        symbols in batches of at most `max_batch_size`.

        Args:
            event_type: Feed event type, e.g. "Quote" or "Greeks"
            symbols: Feed quote symbols
            fields: Field list to negotiate; defaults to the configured
                fields for the event type. Ignored once negotiated.

        Raises:
            ConnectionNotEstablishedError: if the channel is not open
            ValueError: if no field list is known for the event type
        """
        with self._lock:
            self._require_channel("add_subscription")

            symbols = list(dict.fromkeys(symbols))
            negotiated = self._configure_feed(event_type, fields)

            subscription = self._subscriptions.setdefault(
                event_type, Subscription(event_type, negotiated)
            )

            if not symbols:
                return

            batch_count = self._send_subscription_batches(event_type, symbols, "add")
            subscription.symbols.update(symbols)

            logger.info(
                "Subscribed to symbols",
                event_type=event_type,
                symbol_count=len(symbols),
                batch_count=batch_count
            )

            if self._state != ChannelState.SUBSCRIBED:
                self._transition(ChannelState.SUBSCRIBED, "feed_subscription",
                                 context={"event_type": event_type})

    def remove_subscription(self, event_type: str, symbols: Iterable[str]) -> None:
        """Unsubscribe `symbols` from `event_type` events."""
        with self._lock:
            self._require_channel("remove_subscription")

            symbols = list(dict.fromkeys(symbols))
            if not symbols:
                return

            batch_count = self._send_subscription_batches(event_type, symbols, "remove")

            subscription = self._subscriptions.get(event_type)
            if subscription is not None:
                subscription.symbols.difference_update(symbols)

            logger.info(
                "Unsubscribed from symbols",
                event_type=event_type,
                symbol_count=len(symbols),
                batch_count=batch_count
            )

    # Polling

    def poll(self) -> dict[str, SubscriptionData]:
        """
        Drain every queued message and demultiplex the data frames.

        Messages that are not data frames or are malformed are skipped.
        A keepalive is sent after draining, even when the call raises.

        Returns:
            Event type to the data received for it during this call

        Raises:
            ConnectionNotEstablishedError: if the channel is not open
            MissingSchemaError: if a frame's event type was never set up;
                raised after the drain, with the data decoded for set-up
                event types attached as `received`
        """
        with self._lock:
            transport = self._require_channel("poll")
            result: dict[str, SubscriptionData] = {}
            unknown_types: list[str] = []

            while True:
                text = transport.recv(timeout=0)
                if text is None:
                    break
                self._handle_message(text, result, unknown_types)

            self._send(messages.keepalive_message())

            if unknown_types:
                raise MissingSchemaError(
                    f"No fields negotiated for event types: {', '.join(unknown_types)}",
                    event_type=unknown_types[0],
                    received=result,
                    context={"event_types": unknown_types}
                )

            return result

    def _handle_message(self, text: str, result: dict[str, SubscriptionData],
                        unknown_types: list[str]) -> None:
        message = messages.decode(text)
        if message is None:
            logger.debug("Skipping unreadable message", message=text)
            return

        message_type = message.get("type")
        if message_type == messages.ERROR:
            logger.warning("Feed reported an error",
                           error=message.get("error"), detail=message.get("message"))
            return

        if message_type == messages.FEED_CONFIG:
            self._check_feed_config(message)
            return

        if "data" not in message:
            logger.debug("Skipping non-data message", message_type=message_type)
            return

        try:
            frames = messages.parse_data_frame(message)
        except MalformedFrameError as e:
            logger.debug("Skipping malformed data frame", error=str(e))
            return

        for event_type, values in frames:
            if not self.registry.is_negotiated(event_type):
                logger.warning("Data frame for event type without schema",
                               event_type=event_type, value_count=len(values))
                if event_type not in unknown_types:
                    unknown_types.append(event_type)
                continue

            fields = self.registry.fields(event_type)

            if len(values) % len(fields) != 0:
                logger.warning(
                    "Skipping data frame with partial record",
                    event_type=event_type,
                    value_count=len(values),
                    field_count=len(fields)
                )
                continue

            data = result.get(event_type)
            if data is None:
                data = result[event_type] = SubscriptionData(event_type, list(fields))
            data.extend(values)

    def _check_feed_config(self, message: dict[str, Any]) -> None:
        """Warn when the feed reports fields other than the negotiated ones."""
        event_fields = message.get("eventFields")
        if not isinstance(event_fields, dict):
            logger.debug("Feed configuration", data_format=message.get("dataFormat"))
            return

        for event_type, reported in event_fields.items():
            if not self.registry.is_negotiated(event_type):
                continue
            negotiated = self.registry.fields(event_type)
            if not isinstance(reported, list) or tuple(reported) != negotiated:
                logger.warning(
                    "Feed reports fields that differ from the negotiated schema",
                    event_type=event_type,
                    negotiated_fields=list(negotiated),
                    reported_fields=reported
                )
