"""Per-event-type field schemas negotiated with the feed."""

from typing import Iterable

from ..errors import FieldNotFoundError, MissingSchemaError
from ..logging.config import get_protocol_logger

logger = get_protocol_logger(__name__)


class SchemaRegistry:
    """
    Ordered field lists keyed by event type.

    A schema is recorded the first time an event type is set up on the feed
    channel and stays fixed until the registry is cleared on disconnect.
    """

    def __init__(self) -> None:
        self._fields: dict[str, tuple[str, ...]] = {}

    def negotiate(self, event_type: str, fields: Iterable[str]) -> bool:
        """
        Record the field list for an event type.

        Returns:
            True if the schema was recorded, False if it was already known
        """
        fields = tuple(fields)
        if not fields:
            raise ValueError(f"Field list for {event_type} must not be empty")

        existing = self._fields.get(event_type)

        if existing is not None:
            if existing != fields:
                logger.warning(
                    "Ignoring field list for already negotiated event type",
                    event_type=event_type,
                    negotiated_fields=list(existing),
                    requested_fields=list(fields)
                )
            return False

        self._fields[event_type] = fields
        logger.debug("Negotiated event schema", event_type=event_type, fields=list(fields))
        return True

    def is_negotiated(self, event_type: str) -> bool:
        return event_type in self._fields

    def fields(self, event_type: str) -> tuple[str, ...]:
        try:
            return self._fields[event_type]
        except KeyError:
            raise MissingSchemaError(
                f"No fields negotiated for event type: {event_type}",
                event_type=event_type
            ) from None

    def field_index(self, event_type: str, field_name: str) -> int:
        fields = self.fields(event_type)
        try:
            return fields.index(field_name)
        except ValueError:
            raise FieldNotFoundError(
                f"Field {field_name!r} is not negotiated for event type {event_type}",
                event_type=event_type,
                field_name=field_name
            ) from None

    def event_types(self) -> list[str]:
        return list(self._fields)

    def clear(self) -> None:
        self._fields.clear()

    def __contains__(self, event_type: object) -> bool:
        return event_type in self._fields

    def __len__(self) -> int:
        return len(self._fields)
