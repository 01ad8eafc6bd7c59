"""
Streamer session context.

Holds the feed endpoint and the opaque token issued by the brokerage's
login layer. A session is created once and passed to every client that
needs it; nothing about the token is cached globally.
"""

import os
from dataclasses import dataclass, field
from typing import ClassVar, Mapping, Optional

from .errors import ConfigurationError


def to_websocket_url(url: str) -> str:
    """Rewrite an http(s) endpoint to its ws(s) equivalent."""
    if url.startswith("https://"):
        return "wss://" + url[len("https://"):]
    if url.startswith("http://"):
        return "ws://" + url[len("http://"):]
    return url


@dataclass(frozen=True)
class StreamerSession:
    """Feed endpoint URL and auth token for one streaming session."""

    TOKEN_ENV_KEY: ClassVar[str] = "TWFEED_TOKEN"
    URL_ENV_KEY: ClassVar[str] = "TWFEED_URL"

    url: str
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigurationError("Streamer URL must not be empty")
        if not self.token:
            raise ConfigurationError("Streamer token must not be empty")
        object.__setattr__(self, "url", to_websocket_url(self.url))

    @classmethod
    def from_token(cls, token: str, url: str) -> "StreamerSession":
        return cls(url=url, token=token)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StreamerSession":
        """Build a session from TWFEED_TOKEN and TWFEED_URL."""
        environ = os.environ if environ is None else environ

        token = environ.get(cls.TOKEN_ENV_KEY)
        url = environ.get(cls.URL_ENV_KEY)
        missing = [key for key, value in ((cls.TOKEN_ENV_KEY, token), (cls.URL_ENV_KEY, url))
                   if not value]
        if missing:
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}",
                context={"missing": missing}
            )

        return cls(url=url, token=token)
