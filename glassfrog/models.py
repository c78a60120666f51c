"""Data models for GlassFrog records."""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from glassfrog.registry import ResourceKind, resolve_kind


@dataclass(frozen=True)
class Base:
    """A point-in-time snapshot of one record returned by the API."""

    kind: ClassVar[ResourceKind]
    # Attribute names that differ from the key used on the wire
    wire_names: ClassVar[dict[str, str]] = {}

    id: int | None = None
    links: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def accepted_fields(cls) -> frozenset[str]:
        """Wire keys accepted on create/update for this kind."""
        return frozenset(cls.wire_names.get(f.name, f.name) for f in fields(cls))

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "Base":
        """Build an instance from one decoded record, ignoring unknown keys."""
        attributes = {cls.wire_names.get(f.name, f.name): f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in raw.items():
            name = attributes.get(str(key))
            if name is None:
                continue
            if name == "links":
                value = dict(value or {})
            values[name] = value
        return cls(**values)

    def to_params(self) -> dict[str, Any]:
        """Return the non-empty fields keyed by their wire names."""
        params: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or (f.name == "links" and not value):
                continue
            params[self.wire_names.get(f.name, f.name)] = dict(value) if f.name == "links" else value
        return params


@dataclass(frozen=True)
class Action(Base):
    kind: ClassVar[ResourceKind] = ResourceKind.ACTION

    description: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class ChecklistItem(Base):
    kind: ClassVar[ResourceKind] = ResourceKind.CHECKLIST_ITEM
    wire_names: ClassVar[dict[str, str]] = {"global_": "global"}

    description: str | None = None
    frequency: str | None = None
    global_: bool | None = None


@dataclass(frozen=True)
class Circle(Base):
    """A circle; ``links["supported_role"]`` is the role representing it in its parent."""

    kind: ClassVar[ResourceKind] = ResourceKind.CIRCLE

    name: str | None = None
    short_name: str | None = None
    strategy: str | None = None
    organization_id: int | None = None


@dataclass(frozen=True)
class Metric(Base):
    kind: ClassVar[ResourceKind] = ResourceKind.METRIC
    wire_names: ClassVar[dict[str, str]] = {"global_": "global"}

    description: str | None = None
    frequency: str | None = None
    global_: bool | None = None


@dataclass(frozen=True)
class Person(Base):
    kind: ClassVar[ResourceKind] = ResourceKind.PERSON

    name: str | None = None
    email: str | None = None
    external_id: int | None = None
    tag_names: list[str] | None = None


@dataclass(frozen=True)
class Project(Base):
    kind: ClassVar[ResourceKind] = ResourceKind.PROJECT

    description: str | None = None
    status: str | None = None
    link: str | None = None
    value: int | None = None
    effort: int | None = None
    roi: float | None = None
    private_to_circle: bool | None = None
    created_at: str | None = None
    archived_at: str | None = None


@dataclass(frozen=True)
class Role(Base):
    """A role inside a circle.

    ``links["circle"]`` is the circle the role belongs to. When
    ``links["supporting_circle"]`` is set the role represents that sub-circle
    inside its own circle, i.e. it anchors the sub-circle to its parent.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.ROLE

    name: str | None = None
    purpose: str | None = None
    is_core: bool | None = None

    @property
    def is_anchor(self) -> bool:
        return self.links.get("supporting_circle") is not None


@dataclass(frozen=True)
class Trigger(Base):
    kind: ClassVar[ResourceKind] = ResourceKind.TRIGGER

    description: str | None = None
    created_at: str | None = None


MODELS: dict[ResourceKind, type[Base]] = {
    model.kind: model for model in (Action, ChecklistItem, Circle, Metric, Person, Project, Role, Trigger)
}


def model_for(kind: Any) -> type[Base]:
    """Return the model class for a kind token (see ``resolve_kind``)."""
    return MODELS[resolve_kind(kind)]
