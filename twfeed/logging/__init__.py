"""
Logging configuration and utilities for the feed client.
"""
from .config import configure_logging, get_logger, get_protocol_logger, log_state_transition

__all__ = ["configure_logging", "get_logger", "get_protocol_logger", "log_state_transition"]
