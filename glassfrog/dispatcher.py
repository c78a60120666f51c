"""Request dispatcher interface and envelope decoding."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import structlog

from glassfrog.exceptions import TransportError
from glassfrog.models import Base, model_for
from glassfrog.registry import ResourceKind

logger = structlog.get_logger()

VERBS = ("GET", "POST", "PATCH", "DELETE")


class Dispatcher(ABC):
    """Abstract base class for request executors."""

    @abstractmethod
    def execute(self, verb: str, path: str, params: dict[str, Any]) -> dict[str, Any] | bool:
        """Send one request.

        Args:
            verb: One of GET, POST, PATCH or DELETE
            path: The resource route, e.g. ``/roles``
            params: Resolved request parameters; an ``id`` entry addresses a single record

        Returns:
            The decoded JSON envelope, or True when the response has no body

        Raises:
            TransportError: If the request fails or the response cannot be decoded
        """
        pass

    def close(self) -> None:
        """Release any resources held by the dispatcher."""


def decode_envelope(kind: ResourceKind, envelope: dict[str, Any] | bool) -> list[Base]:
    """Convert the records under the kind's envelope key into model instances.

    A missing key (or a body-less response) yields an empty list.
    """
    if not isinstance(envelope, dict):
        return []
    records = envelope.get(kind.envelope_key) or []
    if not isinstance(records, list):
        raise TransportError(f"Malformed response: '{kind.envelope_key}' is not a list")
    model = model_for(kind)
    entities = []
    for record in records:
        if not isinstance(record, Mapping):
            raise TransportError(f"Malformed response: '{kind.envelope_key}' holds a {type(record).__name__} record")
        try:
            entities.append(model.from_raw(record))
        except (TypeError, ValueError) as e:
            raise TransportError(f"Malformed response: invalid {kind.value} record: {e}") from e
    logger.debug("Decoded response envelope", kind=kind.value, count=len(entities))
    return entities
