"""Which filter parameter a related record translates to for each resource kind."""

from collections.abc import Callable
from dataclasses import dataclass
from operator import attrgetter
from typing import Any

from glassfrog.models import Base
from glassfrog.registry import ResourceKind, parameterize


@dataclass(frozen=True)
class AssociationRule:
    """Filter ``field`` takes its value from ``accessor(source_entity)``."""

    field: str
    accessor: Callable[[Base], Any]

    def params_for(self, entity: Base) -> dict[str, Any]:
        return {self.field: self.accessor(entity)}


def by_id(field: str) -> AssociationRule:
    return AssociationRule(field, attrgetter("id"))


def by_slug(field: str) -> AssociationRule:
    """Filter on the slugified name (e.g. people filtered by role name)."""
    return AssociationRule(field, lambda entity: parameterize(entity.name or ""))


_K = ResourceKind

ASSOCIATIONS: dict[tuple[ResourceKind, ResourceKind], AssociationRule] = {
    (_K.ROLE, _K.CIRCLE): by_id("circle_id"),
    (_K.ROLE, _K.PERSON): by_id("person_id"),
    (_K.PERSON, _K.CIRCLE): by_id("circle_id"),
    (_K.PERSON, _K.ROLE): by_slug("role"),
    (_K.PROJECT, _K.CIRCLE): by_id("circle_id"),
    (_K.PROJECT, _K.PERSON): by_id("person_id"),
    (_K.METRIC, _K.CIRCLE): by_id("circle_id"),
    (_K.METRIC, _K.ROLE): by_id("role_id"),
    (_K.CHECKLIST_ITEM, _K.CIRCLE): by_id("circle_id"),
    (_K.ACTION, _K.PERSON): by_id("person_id"),
    (_K.ACTION, _K.CIRCLE): by_id("circle_id"),
    (_K.TRIGGER, _K.PERSON): by_id("person_id"),
    (_K.TRIGGER, _K.CIRCLE): by_id("circle_id"),
}


def rule_for(target: ResourceKind, source: ResourceKind) -> AssociationRule | None:
    return ASSOCIATIONS.get((target, source))


def association_fields(target: ResourceKind) -> frozenset[str]:
    """Filter keys a plain mapping may use to express an association of ``target``."""
    return frozenset(rule.field for (kind, _), rule in ASSOCIATIONS.items() if kind is target)
