"""Rebuild the circle hierarchy from flat circle and role collections.

The API returns circles without parent/child pointers. Nesting is expressed
by roles: a role with ``links["supporting_circle"]`` set lives in its parent
circle (``links["circle"]``) and represents the sub-circle whose
``links["supported_role"]`` is that role's id.
"""

from collections.abc import Iterable, Iterator
from typing import Any

import structlog

from glassfrog.exceptions import StructuralError
from glassfrog.models import Circle, Role

logger = structlog.get_logger()


class CircleNode:
    """A circle placed in the hierarchy, with its parent and ordered children."""

    def __init__(self, circle: Circle, parent: "CircleNode | None" = None) -> None:
        self.circle = circle
        self.parent = parent
        self.children: list[CircleNode] = []

    @property
    def id(self) -> int | None:
        return self.circle.id

    @property
    def name(self) -> str | None:
        return self.circle.name

    @property
    def depth(self) -> int:
        depth, node = 0, self.parent
        while node is not None:
            depth, node = depth + 1, node.parent
        return depth

    def walk(self) -> Iterator["CircleNode"]:
        """Yield this node and its descendants depth-first, parents before children."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, circle_id: Any) -> "CircleNode | None":
        return next((node for node in self.walk() if node.id == circle_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"CircleNode(id={self.id!r}, name={self.name!r}, children={len(self.children)})"


def _anchor_edges(circles: list[Circle], roles: Iterable[Role]) -> list[tuple[Role, int, int]]:
    """Return ``(role, parent_id, child_id)`` for every anchor role between known circles.

    Edges are in role order; roles pointing at circles that are not in
    ``circles`` are skipped.
    """
    known = {circle.id for circle in circles}
    by_supported_role = {
        circle.links["supported_role"]: circle.id
        for circle in circles
        if circle.links.get("supported_role") is not None
    }
    edges = []
    for role in roles:
        if not role.is_anchor:
            continue
        parent_id = role.links.get("circle")
        child_id = by_supported_role.get(role.id)
        if child_id is None and role.links["supporting_circle"] in known:
            child_id = role.links["supporting_circle"]
        if parent_id not in known or child_id is None or child_id == parent_id:
            logger.debug("Ignoring anchor role", role_id=role.id, parent_id=parent_id, child_id=child_id)
            continue
        edges.append((role, parent_id, child_id))
    return edges


def find_root(circles: Iterable[Circle], roles: Iterable[Role]) -> Circle:
    """Find the circle that no anchor role nests inside another circle.

    When several circles are not nested anywhere, the one that itself
    contains sub-circles wins; unrelated circles are orphans.

    Raises:
        StructuralError: If there is no root or more than one candidate root.
    """
    circles = list(circles)
    if not circles:
        raise StructuralError("Cannot find the root of an empty set of circles")

    edges = _anchor_edges(circles, roles)
    anchored = {child_id for _, _, child_id in edges}
    candidates = [circle for circle in circles if circle.id not in anchored]

    if len(candidates) > 1:
        parents = {parent_id for _, parent_id, _ in edges}
        candidates = [circle for circle in candidates if circle.id in parents]
        if len(candidates) != 1:
            raise StructuralError(
                f"Ambiguous root: {len(candidates) or 'several'} circles are not nested in any other circle"
            )
    if not candidates:
        raise StructuralError("No root circle: every circle is nested inside another")

    root = candidates[0]
    logger.debug("Found root circle", circle_id=root.id, name=root.name)
    return root


def build_hierarchy(circles: Iterable[Circle], roles: Iterable[Role]) -> CircleNode:
    """Build the circle tree and return its root node.

    Children are ordered by the position of their anchor role in ``roles``.
    Every node is new; the given circles and roles are left untouched.
    Circles unreachable from the root are left out.

    Raises:
        StructuralError: See ``find_root``.
    """
    circles = list(circles)
    roles = list(roles)
    root = find_root(circles, roles)

    by_id = {circle.id: circle for circle in circles}
    children_of: dict[int, list[int]] = {}
    for _, parent_id, child_id in _anchor_edges(circles, roles):
        children_of.setdefault(parent_id, []).append(child_id)

    root_node = CircleNode(root)
    placed = {root.id}
    pending = [root_node]
    while pending:
        node = pending.pop()
        for child_id in children_of.get(node.id, []):
            # A circle appears once even if several roles (or a cycle) point at it
            if child_id in placed:
                continue
            placed.add(child_id)
            child = CircleNode(by_id[child_id], parent=node)
            node.children.append(child)
            pending.append(child)

    detached = len(circles) - len(placed)
    if detached:
        logger.warning("Circles left out of the hierarchy", count=detached)
    logger.info("Built circle hierarchy", root_id=root.id, size=len(placed))
    return root_node
