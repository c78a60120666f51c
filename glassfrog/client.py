"""Client for the GlassFrog API."""

import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from glassfrog import graph
from glassfrog.cache import ResponseCache
from glassfrog.config import Config
from glassfrog.dispatcher import Dispatcher, decode_envelope
from glassfrog.exceptions import ArgumentError
from glassfrog.graph import CircleNode
from glassfrog.models import Base, Circle, Role
from glassfrog.params import extract_id, resolve, validate_options
from glassfrog.registry import ResourceKind, resolve_kind
from glassfrog.rest import DEFAULT_BASE_URL, RestDispatcher

logger = structlog.get_logger()

CACHE_PREFIX = "glassfrog-cache-"


class Client:
    """Typed access to GlassFrog resources.

    Every resource method takes a kind token (``"role"``, ``"people"``,
    ``ResourceKind.CIRCLE``, ``Circle``...) and options that are resolved into
    request parameters, so a record fetched earlier can be passed straight
    back in, e.g. ``client.get("people", role)``.

    Use as a context manager (or call ``close``) to release the HTTP session
    and any temporary cache directory.
    """

    def __init__(
        self,
        api_key: str | Mapping[str, Any] | None = None,
        *,
        caching: bool | None = None,
        caching_settings: Mapping[str, Any] | None = None,
        base_url: str = DEFAULT_BASE_URL,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: The API key, or a mapping of any of the keyword arguments below plus ``api_key``
            caching: Whether to cache GET responses; defaults to on when caching_settings is given
            caching_settings: Cache options; ``directory`` pins the cache location
            base_url: API root URL
            dispatcher: Request executor to use instead of the REST dispatcher. The caller keeps
                ownership of it, and the caching options are ignored.
        """
        if isinstance(api_key, Mapping):
            attrs = dict(api_key)
            api_key = attrs.pop("api_key", None)
            caching = attrs.pop("caching", caching)
            caching_settings = attrs.pop("caching_settings", caching_settings)
            base_url = attrs.pop("base_url", base_url)
            if attrs:
                raise ArgumentError(f"Unknown client options: {', '.join(sorted(attrs))}")
        elif api_key is not None and not isinstance(api_key, str):
            raise ArgumentError("Invalid arguments. Must be str or dict.")

        self.api_key = api_key
        self._caching = bool(caching) or (caching is None and caching_settings is not None)
        self._caching_settings = dict(caching_settings or {})
        self._tmpdir: tempfile.TemporaryDirectory | None = None
        self._owns_dispatcher = dispatcher is None
        if dispatcher is not None and self._caching:
            logger.warning("Ignoring caching options for a custom dispatcher")
            self._caching = False
        self.cache = self._setup_cache() if self._caching else None
        self.dispatcher = dispatcher or RestDispatcher(api_key, base_url=base_url, cache=self.cache)
        logger.debug("Client initialized", caching=self._caching, has_api_key=self.has_api_key())

    @classmethod
    def from_config(cls, config: Config) -> "Client":
        """Build a client from the ``api_key``, ``base_url``, ``caching`` and ``cache_dir`` settings."""
        caching = config.get("caching")
        cache_dir = config.get("cache_dir")
        return cls(
            config.get("api_key"),
            caching=None if caching is None else str(caching).lower() in ("1", "true", "yes", "on"),
            caching_settings={"directory": cache_dir} if cache_dir else None,
            base_url=config.get("base_url") or DEFAULT_BASE_URL,
        )

    @property
    def caching(self) -> bool:
        return self._caching

    @property
    def caching_settings(self) -> dict[str, Any]:
        return dict(self._caching_settings)

    def _setup_cache(self) -> ResponseCache:
        directory = self._caching_settings.get("directory")
        if directory is None:
            self._tmpdir = tempfile.TemporaryDirectory(prefix=CACHE_PREFIX)
            directory = self._tmpdir.name
        return ResponseCache(Path(directory))

    def headers(self) -> dict[str, str]:
        return {"X-Auth-Token": self.api_key or ""}

    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def _execute(self, verb: str, kind: ResourceKind, params: dict[str, Any]) -> dict[str, Any] | bool:
        return self.dispatcher.execute(verb, kind.path, params)

    def get(self, kind: Any, options: Any = None) -> list[Base]:
        """Fetch records of ``kind``.

        Args:
            kind: Resource kind token
            options: Nothing, an id, a filter mapping, or a related record

        Returns:
            The matching records (empty if none)
        """
        kind = resolve_kind(kind)
        params = resolve(kind, options)
        logger.info("Fetching resources", kind=kind.plural, params=params)
        return decode_envelope(kind, self._execute("GET", kind, params))

    def post(self, kind: Any, options: Any) -> list[Base]:
        """Create a record of ``kind`` from a mapping or a record of that kind."""
        kind = resolve_kind(kind)
        params = validate_options(kind, options)
        logger.info("Creating resource", kind=kind.plural)
        return decode_envelope(kind, self._execute("POST", kind, params))

    def patch(self, kind: Any, options: Any, identifier: Any = None) -> dict[str, Any] | bool:
        """Update a record of ``kind``.

        Args:
            kind: Resource kind token
            options: Attributes to update, as a mapping or a record of that kind
            identifier: Id of the record; taken from ``options`` when omitted

        Returns:
            The attributes sent, id included, if the update succeeded, otherwise False
        """
        kind = resolve_kind(kind)
        if identifier is None:
            identifier = extract_id(kind, options)
        if identifier is None:
            raise ArgumentError("No valid id found given in options")
        params = validate_options(kind, options)
        params["id"] = identifier
        logger.info("Updating resource", kind=kind.plural, id=identifier)
        return params if self._execute("PATCH", kind, params) else False

    def delete(self, kind: Any, options: Any) -> bool:
        """Delete the record of ``kind`` identified by ``options``."""
        kind = resolve_kind(kind)
        identifier = extract_id(kind, options)
        if identifier is None:
            raise ArgumentError("No valid id found given in options")
        logger.info("Deleting resource", kind=kind.plural, id=identifier)
        return bool(self._execute("DELETE", kind, {"id": identifier}))

    def _circles_and_roles(
        self, circles: list[Circle] | None, roles: list[Role] | None
    ) -> tuple[list[Circle], list[Role]]:
        if circles is None:
            circles = self.get(ResourceKind.CIRCLE)
        if roles is None:
            roles = self.get(ResourceKind.ROLE)
        return circles, roles

    def find_root(self, circles: list[Circle] | None = None, roles: list[Role] | None = None) -> Circle:
        """Find the root circle, fetching circles and roles that are not given."""
        return graph.find_root(*self._circles_and_roles(circles, roles))

    def build_hierarchy(self, circles: list[Circle] | None = None, roles: list[Role] | None = None) -> CircleNode:
        """Build the organization's circle hierarchy and return its root node."""
        return graph.build_hierarchy(*self._circles_and_roles(circles, roles))

    def close(self) -> None:
        """Close the HTTP session and remove the temporary cache directory, if any.

        A dispatcher passed in by the caller is left open.
        """
        if self._owns_dispatcher:
            self.dispatcher.close()
        if self._tmpdir is not None:
            self._tmpdir.cleanup()
            self._tmpdir = None
            logger.debug("Removed temporary cache directory")

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
