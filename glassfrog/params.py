"""Turn caller-supplied options into request parameters.

Callers may pass nothing, an id (``5`` or ``"5"``), a mapping of filters, or
a record they already fetched. Options are classified once into one of the
variants below and every request path works from that variant.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from glassfrog.associations import association_fields, rule_for
from glassfrog.exceptions import ArgumentError
from glassfrog.models import Base, model_for
from glassfrog.registry import ResourceKind, resolve_kind

logger = structlog.get_logger()


@dataclass(frozen=True)
class Empty:
    """No options: every record of the kind."""


@dataclass(frozen=True)
class Identifier:
    value: int


@dataclass(frozen=True)
class EntityRef:
    entity: Base


@dataclass(frozen=True)
class FilterMap:
    params: dict[str, Any]


Options = Empty | Identifier | EntityRef | FilterMap


def _normalize_keys(mapping: Mapping[Any, Any]) -> dict[str, Any]:
    return {(key.value if isinstance(key, Enum) else str(key)): value for key, value in mapping.items()}


def _coerce_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def classify(options: Any) -> Options:
    """Classify raw options into an ``Options`` variant.

    Raises:
        ArgumentError: If the options are of a type no request accepts.
    """
    if options is None:
        return Empty()
    if isinstance(options, Options):
        return options
    if isinstance(options, Base):
        return EntityRef(options)
    if isinstance(options, Mapping):
        params = _normalize_keys(options)
        return FilterMap(params) if params else Empty()
    if isinstance(options, str) and not options.strip():
        return Empty()
    identifier = _coerce_id(options)
    if identifier is not None:
        return Identifier(identifier)
    raise ArgumentError(f"Options cannot be {type(options).__name__}")


def _identifier_of(kind: ResourceKind, options: Options) -> int | None:
    if isinstance(options, Identifier):
        return options.value
    if isinstance(options, FilterMap) and "id" in options.params:
        identifier = _coerce_id(options.params["id"])
        if identifier is None:
            raise ArgumentError(f"Invalid id: {options.params['id']!r}")
        return identifier
    if isinstance(options, EntityRef) and options.entity.kind is kind:
        return _coerce_id(options.entity.id)
    return None


def extract_id(kind: Any, options: Any) -> int | None:
    """Return the identifier carried by ``options`` for ``kind``, if any."""
    return _identifier_of(resolve_kind(kind), classify(options))


def _associated_params(kind: ResourceKind, entity: Base) -> dict[str, Any]:
    rule = rule_for(kind, entity.kind)
    if rule is None:
        raise ArgumentError(f"Options cannot be {type(entity).__name__} when requesting {kind.plural}")
    return rule.params_for(entity)


def _filter_params(kind: ResourceKind, params: dict[str, Any]) -> dict[str, Any]:
    allowed = model_for(kind).accepted_fields() | association_fields(kind)
    unknown = sorted(set(params) - allowed)
    if unknown:
        raise ArgumentError(f"Options for {kind.plural} cannot include {', '.join(unknown)}")
    return params


def resolve(kind: Any, options: Any = None) -> dict[str, Any]:
    """Resolve ``options`` into the parameters of a GET request for ``kind``.

    An identifier always wins; otherwise a record of a related kind becomes
    its association filter and a mapping is checked against the keys the
    kind understands.

    Raises:
        ArgumentError: If the options cannot be expressed as parameters.
    """
    kind = resolve_kind(kind)
    variant = classify(options)

    params: dict[str, Any] = {}
    if not isinstance(variant, Empty):
        identifier = _identifier_of(kind, variant)
        if identifier is not None:
            params = {"id": identifier}
        elif isinstance(variant, EntityRef):
            params = _associated_params(kind, variant.entity)
        elif isinstance(variant, FilterMap):
            params = _filter_params(kind, variant.params)

    logger.debug("Resolved request parameters", kind=kind.value, options=type(variant).__name__, params=params)
    return params


def validate_options(kind: Any, options: Any) -> dict[str, Any]:
    """Validate create/update options: a mapping or a record of ``kind`` itself.

    Raises:
        ArgumentError: For any other type of options.
    """
    kind = resolve_kind(kind)
    if isinstance(options, Base) and options.kind is kind:
        return options.to_params()
    if isinstance(options, Mapping):
        return _normalize_keys(options)
    raise ArgumentError(f"Options cannot be {type(options).__name__}")
