"""Unit tests for the streamer session context."""

import pytest

from twfeed.errors import ConfigurationError
from twfeed.session import StreamerSession, to_websocket_url


class TestWebSocketUrl:
    """Test endpoint scheme rewriting."""

    @pytest.mark.parametrize("url,expected", [
        ("https://tasty.dxfeed.com/realtime", "wss://tasty.dxfeed.com/realtime"),
        ("http://localhost:8080/feed", "ws://localhost:8080/feed"),
        ("wss://feed.example.com", "wss://feed.example.com"),
    ])
    def test_rewrite(self, url, expected):
        """Test http(s) endpoints become ws(s) endpoints."""
        assert to_websocket_url(url) == expected


class TestStreamerSession:
    """Test session construction."""

    def test_from_token(self):
        """Test building a session from a token and URL."""
        session = StreamerSession.from_token("abc", "https://feed.example.com/realtime")

        assert session.token == "abc"
        assert session.url == "wss://feed.example.com/realtime"

    def test_token_not_in_repr(self):
        """Test the token stays out of reprs and logs."""
        session = StreamerSession.from_token("super-secret", "wss://feed.example.com")

        assert "super-secret" not in repr(session)

    @pytest.mark.parametrize("token,url", [("", "wss://feed"), ("abc", "")])
    def test_rejects_empty(self, token, url):
        """Test empty tokens and URLs."""
        with pytest.raises(ConfigurationError):
            StreamerSession.from_token(token, url)

    def test_immutable(self):
        """Test sessions cannot be modified after creation."""
        session = StreamerSession.from_token("abc", "wss://feed.example.com")

        with pytest.raises(AttributeError):
            session.token = "other"  # type: ignore[misc]


class TestSessionFromEnv:
    """Test building sessions from the environment."""

    def test_from_mapping(self):
        """Test reading both variables from an explicit mapping."""
        session = StreamerSession.from_env({
            "TWFEED_TOKEN": "abc",
            "TWFEED_URL": "https://feed.example.com/realtime",
        })

        assert session.token == "abc"
        assert session.url == "wss://feed.example.com/realtime"

    def test_from_process_environment(self, monkeypatch):
        """Test the process environment is used by default."""
        monkeypatch.setenv("TWFEED_TOKEN", "env-token")
        monkeypatch.setenv("TWFEED_URL", "wss://env.example.com")

        session = StreamerSession.from_env()

        assert session.token == "env-token"
        assert session.url == "wss://env.example.com"

    def test_missing_variables(self):
        """Test every missing variable is reported."""
        with pytest.raises(ConfigurationError) as exc_info:
            StreamerSession.from_env({"TWFEED_URL": ""})

        assert exc_info.value.context["missing"] == ["TWFEED_TOKEN", "TWFEED_URL"]
