"""Shared fixtures."""

from typing import Any

import pytest
import structlog

from glassfrog.dispatcher import Dispatcher
from glassfrog.models import Circle, Role


class FakeDispatcher(Dispatcher):
    """Records requests and answers from canned envelopes keyed by (verb, path)."""

    def __init__(self, responses: dict[tuple[str, str], Any] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.closed = False

    def execute(self, verb: str, path: str, params: dict[str, Any]) -> dict[str, Any] | bool:
        self.calls.append((verb, path, dict(params)))
        return self.responses.get((verb, path), True)

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep log events out of captured command output."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger("critical"))
    yield
    structlog.reset_defaults()


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def circles() -> list[Circle]:
    """General circle (1) > Sales (2) > Field Sales (3)."""
    return [
        Circle(id=1, name="General Company Circle", links={"supported_role": None}),
        Circle(id=2, name="Sales", links={"supported_role": 20}),
        Circle(id=3, name="Field Sales", links={"supported_role": 30}),
    ]


@pytest.fixture
def roles() -> list[Role]:
    return [
        Role(id=10, name="Lead Link", links={"circle": 1, "supporting_circle": None}),
        Role(id=20, name="Sales", links={"circle": 1, "supporting_circle": 2}),
        Role(id=30, name="Field Sales", links={"circle": 2, "supporting_circle": 3}),
        Role(id=40, name="Rep Link", links={"circle": 3, "supporting_circle": None}),
    ]
