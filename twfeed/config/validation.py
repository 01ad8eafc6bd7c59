"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import FeedParams, ProtocolParams, SubscriptionParams, TransportParams

_SECTIONS = {
    "protocol": ProtocolParams,
    "feed": FeedParams,
    "subscription": SubscriptionParams,
    "transport": TransportParams,
}

PACING_MODES = ("token_bucket", "none")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_keys(config: dict[str, Any]) -> list[ValidationError]:
        """Reject sections and keys that have no matching parameter."""
        errors = []

        for section, values in config.items():
            params_cls = _SECTIONS.get(section)
            if params_cls is None:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=values
                ))
                continue

            if not isinstance(values, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Section must be a mapping",
                    value=values
                ))
                continue

            known = {f.name for f in fields(params_cls)}
            for key in values:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown configuration key",
                        value=values[key]
                    ))

        return errors

    @staticmethod
    def validate_protocol_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate SETUP handshake parameters."""
        errors = []

        if "version" in params:
            value = params["version"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="version",
                    message="Must be a non-empty string",
                    value=value
                ))

        for name in ("keepalive_timeout", "accept_keepalive_timeout"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive integer",
                        value=value
                    ))

        if "auth_state_timeout" in params:
            value = params["auth_state_timeout"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="auth_state_timeout",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_feed_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate feed channel parameters."""
        errors = []

        if "channel" in params:
            value = params["channel"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="channel",
                    message="Must be a positive integer (channel 0 is reserved)",
                    value=value
                ))

        if "aggregation_period" in params:
            value = params["aggregation_period"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="aggregation_period",
                    message="Must be a non-negative number",
                    value=value
                ))

        for name in ("service", "contract", "data_format"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or not value:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-empty string",
                        value=value
                    ))

        if "event_fields" in params:
            value = params["event_fields"]
            if not isinstance(value, dict):
                errors.append(ValidationError(
                    field="event_fields",
                    message="Must map event types to field lists",
                    value=value
                ))
            else:
                for event_type, event_fields in value.items():
                    if (not isinstance(event_fields, (list, tuple)) or not event_fields
                            or not all(isinstance(f, str) for f in event_fields)):
                        errors.append(ValidationError(
                            field=f"event_fields.{event_type}",
                            message="Must be a non-empty list of field names",
                            value=event_fields
                        ))
                    elif len(set(event_fields)) != len(event_fields):
                        errors.append(ValidationError(
                            field=f"event_fields.{event_type}",
                            message="Field names must be unique",
                            value=event_fields
                        ))

        return errors

    @staticmethod
    def validate_subscription_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate subscription batching parameters."""
        errors = []

        if "max_batch_size" in params:
            value = params["max_batch_size"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="max_batch_size",
                    message="Must be a positive integer",
                    value=value
                ))

        if "pacing" in params:
            value = params["pacing"]
            if value not in PACING_MODES:
                errors.append(ValidationError(
                    field="pacing",
                    message=f"Must be one of {', '.join(PACING_MODES)}",
                    value=value
                ))

        if "batches_per_second" in params:
            value = params["batches_per_second"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="batches_per_second",
                    message="Must be a positive number",
                    value=value
                ))

        if "burst" in params:
            value = params["burst"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="burst",
                    message="Must be an integer >= 1",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_transport_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate transport parameters."""
        errors = []

        for name in ("open_timeout", "close_timeout"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        if "max_message_size" in params:
            value = params["max_message_size"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="max_message_size",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = cls.validate_keys(config)

        if isinstance(config.get("protocol"), dict):
            errors.extend(cls.validate_protocol_params(config["protocol"]))

        if isinstance(config.get("feed"), dict):
            errors.extend(cls.validate_feed_params(config["feed"]))

        if isinstance(config.get("subscription"), dict):
            errors.extend(cls.validate_subscription_params(config["subscription"]))

        if isinstance(config.get("transport"), dict):
            errors.extend(cls.validate_transport_params(config["transport"]))

        return errors
