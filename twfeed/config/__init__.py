"""
Configuration module.

Default streamer parameters, YAML overrides and validation.
"""

from .defaults import DEFAULT_EVENT_FIELDS, DefaultConfig, get_default_config
from .loader import ConfigLoader
from .validation import ConfigValidator, ValidationError

__all__ = [
    "DEFAULT_EVENT_FIELDS",
    "DefaultConfig",
    "get_default_config",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationError",
]
