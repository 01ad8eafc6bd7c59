"""Pytest configuration and shared fixtures."""

import json
from collections import deque
from typing import Any, Optional, Union

import pytest

from twfeed.errors import TransportError
from twfeed.session import StreamerSession
from twfeed.streamer.client import StreamerClient
from twfeed.streamer.pacing import NoPacing
from twfeed.streamer.transport import Transport

Message = Union[str, dict[str, Any]]


class FakeTransport(Transport):
    """Scripted in-memory transport recording everything sent."""

    def __init__(self, replies: Optional[list[Message]] = None):
        self.incoming: deque[str] = deque()
        self.sent: list[str] = []
        self.recv_timeouts: list[Optional[float]] = []
        self.closed = False
        self.queue(*(replies or []))

    def queue(self, *messages: Message) -> None:
        for message in messages:
            self.incoming.append(message if isinstance(message, str) else json.dumps(message))

    def send(self, text: str) -> None:
        if self.closed:
            raise TransportError("send on closed transport")
        self.sent.append(text)

    def recv(self, timeout: Optional[float] = None) -> Optional[str]:
        self.recv_timeouts.append(timeout)
        if self.incoming:
            return self.incoming.popleft()
        if timeout is None:
            raise TransportError("no scripted reply left")
        return None

    def close(self) -> None:
        self.closed = True

    @property
    def sent_messages(self) -> list[dict[str, Any]]:
        return [json.loads(text) for text in self.sent]

    def sent_of_type(self, message_type: str) -> list[dict[str, Any]]:
        return [m for m in self.sent_messages if m.get("type") == message_type]


HANDSHAKE_REPLIES: list[dict[str, Any]] = [
    {"type": "SETUP", "channel": 0, "version": "1.0", "keepaliveTimeout": 60,
     "acceptKeepaliveTimeout": 60},
    {"type": "AUTH_STATE", "channel": 0, "state": "UNAUTHORIZED"},
    {"type": "AUTH_STATE", "channel": 0, "state": "AUTHORIZED", "userId": "user-1"},
    {"type": "CHANNEL_OPENED", "channel": 1, "service": "FEED",
     "parameters": {"contract": "AUTO"}},
]


@pytest.fixture
def session() -> StreamerSession:
    """Session pointing at a dummy feed endpoint."""
    return StreamerSession.from_token("test-token", "wss://feed.example.com/realtime")


@pytest.fixture
def handshake_replies() -> list[dict[str, Any]]:
    """Replies for a successful setup/auth/channel handshake."""
    return [dict(reply) for reply in HANDSHAKE_REPLIES]


@pytest.fixture
def transport(handshake_replies) -> FakeTransport:
    """Transport scripted with a successful handshake."""
    return FakeTransport(handshake_replies)


@pytest.fixture
def client(session, transport) -> StreamerClient:
    """Unconnected client wired to the fake transport without pacing delays."""
    return StreamerClient(
        session,
        transport_factory=lambda url, params: transport,
        pacer=NoPacing(),
    )


@pytest.fixture
def connected_client(client) -> StreamerClient:
    """Client that has completed the handshake."""
    client.connect()
    return client


@pytest.fixture
def option_symbols() -> list[str]:
    """Brokerage option identifiers in both shapes."""
    return [
        "IQ 200918P00017500",
        "PENN  200821C00040500",
        "SPXW  201016C03400000",
        "./NGZ0 LNEZ0 201124C4.5",
    ]


@pytest.fixture
def make_transport():
    """Factory for fake transports scripted with the given replies."""
    return FakeTransport
