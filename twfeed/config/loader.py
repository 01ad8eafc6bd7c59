"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from ..logging.config import get_logger
from .defaults import (
    DefaultConfig,
    FeedParams,
    ProtocolParams,
    SubscriptionParams,
    TransportParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILE_NAME = "streamer.yaml"

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from streamer.yaml, if present."""
        config_file = self.config_dir / CONFIG_FILE_NAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}

        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{config_file} must contain a mapping at the top level",
                context={"path": str(config_file)}
            )

        logger.debug("Loaded streamer configuration file", path=str(config_file))
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. streamer.yaml in the config directory
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """Merge, validate and build the typed configuration."""
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            messages = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            logger.error("Streamer configuration is invalid", errors=messages)
            raise ConfigurationError(
                "Invalid streamer configuration: " + "; ".join(messages),
                errors=errors
            )

        feed = dict(config["feed"])
        feed["event_fields"] = {
            event_type: tuple(event_fields)
            for event_type, event_fields in feed["event_fields"].items()
        }

        return DefaultConfig(
            protocol=ProtocolParams(**config["protocol"]),
            feed=FeedParams(**feed),
            subscription=SubscriptionParams(**config["subscription"]),
            transport=TransportParams(**config["transport"]),
        )

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, dict):
                    result[field_name] = dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
