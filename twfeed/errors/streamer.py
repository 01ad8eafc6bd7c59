"""
Streamer failure classifications.

These exceptions are fatal to the current connection attempt. The client
does not retry; callers layer reconnection on top if they need it.
"""

from typing import Any, Dict, Optional


class StreamerError(Exception):
    """Base class for connection-level failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConnectionNotEstablishedError(StreamerError):
    """Operation attempted before the feed channel was opened."""

    def __init__(self, message: str = "The streamer client is not connected",
                 operation: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation


class HandshakeDecodeError(StreamerError):
    """Unexpected or unparseable reply during setup, auth or channel open."""

    def __init__(self, message: str, step: Optional[str] = None,
                 expected_type: Optional[str] = None,
                 raw_reply: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.step = step
        self.expected_type = expected_type
        self.raw_reply = raw_reply


class AuthenticationRejectedError(StreamerError):
    """Feed did not report an authorized state for the supplied token."""

    def __init__(self, message: str, auth_state: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.auth_state = auth_state


class TransportError(StreamerError):
    """Underlying transport could not be opened, read or written."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.url = url


class ConfigurationError(StreamerError):
    """Streamer configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
