"""Resource kinds exposed by the GlassFrog API and lookup by name."""

import re
from enum import Enum
from typing import Any

from glassfrog.exceptions import ArgumentError

_NON_SLUG = re.compile(r"[^a-z0-9_]")


def parameterize(value: Any) -> str:
    """Turn a human-readable value into a URL-safe slug.

    Lowercases, replaces spaces with underscores and strips anything that is
    not alphanumeric or an underscore, e.g. ``"Lead Link"`` -> ``"lead_link"``.
    """
    text = value.value if isinstance(value, Enum) else str(value)
    return _NON_SLUG.sub("", text.strip().lower().replace(" ", "_"))


class ResourceKind(Enum):
    """A category of record served by the API."""

    ACTION = "action"
    CHECKLIST_ITEM = "checklist_item"
    CIRCLE = "circle"
    METRIC = "metric"
    PERSON = "person"
    PROJECT = "project"
    ROLE = "role"
    TRIGGER = "trigger"

    @property
    def plural(self) -> str:
        """Plural tag used both as request path segment and envelope key."""
        return _PLURALS[self]

    @property
    def path(self) -> str:
        return f"/{self.plural}"

    @property
    def envelope_key(self) -> str:
        return self.plural


_PLURALS = {
    ResourceKind.ACTION: "actions",
    ResourceKind.CHECKLIST_ITEM: "checklist_items",
    ResourceKind.CIRCLE: "circles",
    ResourceKind.METRIC: "metrics",
    ResourceKind.PERSON: "people",
    ResourceKind.PROJECT: "projects",
    ResourceKind.ROLE: "roles",
    ResourceKind.TRIGGER: "triggers",
}

# Singular and plural spellings, with and without underscores
_TOKENS: dict[str, ResourceKind] = {}
for _kind in ResourceKind:
    for _name in (_kind.value, _kind.plural):
        _TOKENS[_name] = _kind
        _TOKENS[_name.replace("_", "")] = _kind


def resolve_kind(token: Any) -> ResourceKind:
    """Resolve a kind token to a ResourceKind.

    Accepts a ResourceKind, a model class (anything with a ``kind`` attribute)
    or a singular/plural name such as ``"role"``, ``"people"`` or
    ``"ChecklistItems"``.

    Raises:
        ArgumentError: If the token does not name a known kind.
    """
    if isinstance(token, ResourceKind):
        return token
    kind = getattr(token, "kind", None)
    if isinstance(kind, ResourceKind):
        return kind
    if isinstance(token, str):
        # CamelCase names map onto the snake_case spellings
        snake = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", token.strip())
        slug = parameterize(snake)
        if slug in _TOKENS:
            return _TOKENS[slug]
        if slug.replace("_", "") in _TOKENS:
            return _TOKENS[slug.replace("_", "")]
    raise ArgumentError(f"Unknown resource type: {token!r}")
