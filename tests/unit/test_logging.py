"""Unit tests for logging helpers."""

from unittest.mock import Mock

from structlog.testing import capture_logs

from twfeed.logging.config import (
    REDACTED,
    get_protocol_logger,
    log_state_transition,
    redact_secrets,
)


class TestRedactSecrets:
    """Test the token-masking processor."""

    def test_masks_token_keys(self):
        """Test token-bearing keys are replaced."""
        event_dict = {"event": "auth", "token": "abc", "access_token": "def", "url": "wss://x"}

        result = redact_secrets(None, "info", event_dict)

        assert result["token"] == REDACTED
        assert result["access_token"] == REDACTED
        assert result["url"] == "wss://x"

    def test_leaves_other_events(self):
        """Test events without secrets pass through unchanged."""
        event_dict = {"event": "poll", "count": 3}

        assert redact_secrets(None, "debug", dict(event_dict)) == event_dict


class TestLogStateTransition:
    """Test standardized state transition logging."""

    def test_info_for_normal_transition(self):
        """Test ordinary transitions log at info with bound states."""
        logger = Mock()
        bound = logger.bind.return_value

        log_state_transition(logger, "authorized", "channel_open", "channel_opened")

        logger.bind.assert_called_once_with(
            from_state="authorized", to_state="channel_open", trigger="channel_opened"
        )
        bound.info.assert_called_once_with("State transition")
        bound.warning.assert_not_called()

    def test_warning_for_failure(self):
        """Test transitions into the failed state log at warning."""
        logger = Mock()
        bound = logger.bind.return_value.bind.return_value

        log_state_transition(logger, "setup_acknowledged", "failed", "connect_failed",
                             context={"error": "rejected"})

        logger.bind.return_value.bind.assert_called_once_with(context={"error": "rejected"})
        bound.warning.assert_called_once_with("State transition")


class TestProtocolLogger:
    """Test the streamer subsystem logger."""

    def test_binds_subsystem(self):
        """Test protocol loggers tag events with the streamer subsystem."""
        with capture_logs() as logs:
            get_protocol_logger("test").info("hello")

        assert logs[0]["subsystem"] == "streamer"
        assert logs[0]["event"] == "hello"
