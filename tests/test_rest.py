"""Tests for the REST dispatcher."""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from glassfrog.cache import ResponseCache
from glassfrog.dispatcher import decode_envelope
from glassfrog.exceptions import ArgumentError, TransportError
from glassfrog.models import Role
from glassfrog.registry import ResourceKind
from glassfrog.rest import RestDispatcher

BASE_URL = "https://glassfrog.test/api/v3"


class Recorder:
    """httpx handler that records requests and replies with a fixed status and body."""

    def __init__(self, status_code: int = 200, **body: Any) -> None:
        self.status_code = status_code
        self.body = body or {"json": {"roles": [{"id": 1, "name": "Lead Link"}]}}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.body)


def make_dispatcher(recorder: Recorder, cache: ResponseCache | None = None) -> RestDispatcher:
    return RestDispatcher("secret", base_url=BASE_URL, cache=cache, transport=httpx.MockTransport(recorder))


def test_get_all() -> None:
    """Test fetching every record of a kind."""
    recorder = Recorder()
    result = make_dispatcher(recorder).execute("GET", "/roles", {})

    assert result == {"roles": [{"id": 1, "name": "Lead Link"}]}
    request = recorder.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/api/v3/roles"
    assert request.headers["X-Auth-Token"] == "secret"


def test_get_by_id() -> None:
    """Test that the id is moved into the path."""
    recorder = Recorder()
    make_dispatcher(recorder).execute("GET", "/roles", {"id": 5})

    request = recorder.requests[0]
    assert request.url.path == "/api/v3/roles/5"
    assert not request.url.params


def test_get_with_filters() -> None:
    """Test that filters are sent as query parameters."""
    recorder = Recorder()
    make_dispatcher(recorder).execute("GET", "/people", {"role": "lead_link"})

    assert recorder.requests[0].url.params["role"] == "lead_link"


def test_post_wraps_params_in_envelope() -> None:
    """Test the POST body format."""
    recorder = Recorder(200, json={"projects": [{"id": 3, "description": "Ship it"}]})
    make_dispatcher(recorder).execute("POST", "/projects", {"description": "Ship it"})

    request = recorder.requests[0]
    assert request.method == "POST"
    assert json.loads(request.content) == {"projects": [{"description": "Ship it"}]}


def test_patch_sends_json_patch() -> None:
    """Test the PATCH body format."""
    recorder = Recorder(204, content=b"")
    result = make_dispatcher(recorder).execute("PATCH", "/projects", {"id": 3, "status": "Done"})

    assert result is True
    request = recorder.requests[0]
    assert request.url.path == "/api/v3/projects/3"
    assert json.loads(request.content) == [{"op": "replace", "path": "/projects/0/status", "value": "Done"}]


def test_delete_without_body() -> None:
    """Test that an empty response resolves to True."""
    recorder = Recorder(204, content=b"")
    assert make_dispatcher(recorder).execute("DELETE", "/projects", {"id": 3}) is True
    assert recorder.requests[0].url.path == "/api/v3/projects/3"


def test_http_error_status() -> None:
    """Test that error statuses raise TransportError with the status code."""
    recorder = Recorder(404, json={"error": "not found"})
    with pytest.raises(TransportError) as excinfo:
        make_dispatcher(recorder).execute("GET", "/roles", {"id": 5})
    assert excinfo.value.status_code == 404


def test_network_error() -> None:
    """Test that connection failures raise TransportError."""

    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    dispatcher = RestDispatcher("secret", base_url=BASE_URL, transport=httpx.MockTransport(fail))
    with pytest.raises(TransportError, match="connection refused"):
        dispatcher.execute("GET", "/roles", {})


def test_invalid_json() -> None:
    """Test that undecodable bodies raise TransportError."""
    recorder = Recorder(200, content=b"<html>")
    with pytest.raises(TransportError, match="invalid JSON"):
        make_dispatcher(recorder).execute("GET", "/roles", {})


def test_unsupported_method() -> None:
    """Test that unknown verbs are rejected before sending."""
    recorder = Recorder()
    with pytest.raises(ArgumentError):
        make_dispatcher(recorder).execute("PUT", "/roles", {})
    assert recorder.requests == []


def test_cached_get(tmp_path: Path) -> None:
    """Test that repeated reads are served from the cache and writes clear it."""
    recorder = Recorder()
    dispatcher = make_dispatcher(recorder, cache=ResponseCache(tmp_path))

    first = dispatcher.execute("GET", "/roles", {"circle_id": 1})
    second = dispatcher.execute("GET", "/roles", {"circle_id": 1})
    assert first == second
    assert len(recorder.requests) == 1

    dispatcher.execute("GET", "/roles", {"circle_id": 2})
    assert len(recorder.requests) == 2

    dispatcher.execute("DELETE", "/roles", {"id": 1})
    dispatcher.execute("GET", "/roles", {"circle_id": 1})
    assert len(recorder.requests) == 4


def test_cache_key_ignores_param_order(tmp_path: Path) -> None:
    """Test that parameter order does not change the cache key."""
    assert ResponseCache.key("get", "/roles", {"a": 1, "b": 2}) == ResponseCache.key("GET", "/roles", {"b": 2, "a": 1})


def test_cache_discards_corrupt_entry(tmp_path: Path) -> None:
    """Test that an unreadable entry counts as a miss."""
    cache = ResponseCache(tmp_path)
    cache.set("GET", "/roles", {}, {"roles": []})
    next(tmp_path.glob("*.json")).write_text("{not json")

    assert cache.get("GET", "/roles", {}) is None
    assert list(tmp_path.glob("*.json")) == []


def test_decode_envelope() -> None:
    """Test converting an envelope into records."""
    roles = decode_envelope(ResourceKind.ROLE, {"roles": [{"id": 1, "name": "Lead Link"}], "linked": {}})
    assert roles == [Role(id=1, name="Lead Link")]


@pytest.mark.parametrize("envelope", [{}, {"roles": None}, True])
def test_decode_envelope_empty(envelope: object) -> None:
    """Test that missing collections decode to an empty list."""
    assert decode_envelope(ResourceKind.ROLE, envelope) == []


def test_decode_envelope_malformed() -> None:
    """Test that a non-list collection is rejected."""
    with pytest.raises(TransportError):
        decode_envelope(ResourceKind.ROLE, {"roles": {"id": 1}})


@pytest.mark.parametrize("records", [[1], ["Lead Link"], [{"id": 1}, None], [{"id": 1, "links": 5}]])
def test_decode_envelope_malformed_record(records: list[object]) -> None:
    """Test that records which are not objects, or carry invalid links, are rejected."""
    with pytest.raises(TransportError, match="Malformed response"):
        decode_envelope(ResourceKind.ROLE, {"roles": records})
