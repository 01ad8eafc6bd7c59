"""
Message transports for the streamer.

A transport sends and receives whole text messages. Reads take an explicit
timeout: None blocks until a message arrives (handshake replies), 0 returns
immediately when nothing is queued (poll draining).
"""

from abc import ABC, abstractmethod
from typing import Optional

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import ClientConnection, connect

from ..config.defaults import TransportParams
from ..errors import TransportError
from ..logging.config import get_protocol_logger

logger = get_protocol_logger(__name__)


class Transport(ABC):
    """Bidirectional text message channel."""

    @abstractmethod
    def send(self, text: str) -> None:
        """Send one text message."""
        pass

    @abstractmethod
    def recv(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Receive one message.

        Args:
            timeout: Seconds to wait; None waits indefinitely, 0 does not wait

        Returns:
            The message text, or None if no message arrived within the timeout
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the transport. Safe to call more than once."""
        pass


class WebSocketTransport(Transport):
    """Transport over a synchronous `websockets` client connection."""

    def __init__(self, url: str, connection: ClientConnection):
        self.url = url
        self._connection = connection
        self._closed = False

    @classmethod
    def open(cls, url: str, params: Optional[TransportParams] = None) -> "WebSocketTransport":
        """Open a WebSocket connection to `url`."""
        params = params or TransportParams()

        try:
            connection = connect(
                url,
                open_timeout=params.open_timeout,
                close_timeout=params.close_timeout,
                max_size=params.max_message_size,
            )
        except (OSError, WebSocketException) as e:
            raise TransportError(f"Failed to connect to {url}: {e}", url=url) from e

        logger.debug("WebSocket connected", url=url)
        return cls(url, connection)

    def send(self, text: str) -> None:
        try:
            self._connection.send(text)
        except (OSError, WebSocketException) as e:
            raise TransportError(f"Failed to send message: {e}", url=self.url) from e

    def recv(self, timeout: Optional[float] = None) -> Optional[str]:
        try:
            message = self._connection.recv(timeout=timeout)
        except TimeoutError:
            return None
        except ConnectionClosed as e:
            raise TransportError(f"Connection closed: {e}", url=self.url) from e
        except (OSError, WebSocketException) as e:
            raise TransportError(f"Failed to receive message: {e}", url=self.url) from e

        if isinstance(message, bytes):
            return message.decode("utf-8", errors="replace")
        return message

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._connection.close()
        logger.debug("WebSocket closed", url=self.url)
