"""Python client for the GlassFrog API."""

from glassfrog.client import Client
from glassfrog.exceptions import ArgumentError, GlassfrogError, StructuralError, TransportError
from glassfrog.graph import CircleNode, build_hierarchy, find_root
from glassfrog.models import Action, Base, ChecklistItem, Circle, Metric, Person, Project, Role, Trigger
from glassfrog.registry import ResourceKind

__all__ = [
    "Action",
    "ArgumentError",
    "Base",
    "ChecklistItem",
    "Circle",
    "CircleNode",
    "Client",
    "GlassfrogError",
    "Metric",
    "Person",
    "Project",
    "ResourceKind",
    "Role",
    "StructuralError",
    "TransportError",
    "Trigger",
    "build_hierarchy",
    "find_root",
]
