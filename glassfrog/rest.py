"""GlassFrog REST API dispatcher using httpx."""

from typing import Any

import httpx
import structlog

from glassfrog.cache import ResponseCache
from glassfrog.dispatcher import VERBS, Dispatcher
from glassfrog.exceptions import ArgumentError, TransportError

logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://api.glassfrog.com/api/v3"


class RestDispatcher(Dispatcher):
    """Sends requests to the GlassFrog v3 REST API."""

    TIMEOUT = 30

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        cache: ResponseCache | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            api_key: GlassFrog API key sent as the X-Auth-Token header
            base_url: API root URL
            cache: Optional cache for GET responses
            transport: Optional httpx transport (used to stub the network in tests)
        """
        self.base_url = base_url
        self.cache = cache
        headers = {"X-Auth-Token": api_key} if api_key else {}
        self.http = httpx.Client(base_url=base_url, headers=headers, timeout=self.TIMEOUT, transport=transport)
        logger.debug("REST dispatcher initialized", base_url=base_url, caching=cache is not None)

    def _request_kwargs(self, verb: str, plural: str, params: dict[str, Any]) -> dict[str, Any]:
        if verb == "GET":
            return {"params": params}
        if verb == "POST":
            return {"json": {plural: [params]}}
        if verb == "PATCH":
            # The API takes JSON Patch operations against the first record of the envelope
            operations = [{"op": "replace", "path": f"/{plural}/0/{key}", "value": value} for key, value in params.items()]
            return {"json": operations}
        return {}

    def execute(self, verb: str, path: str, params: dict[str, Any]) -> dict[str, Any] | bool:
        verb = verb.upper()
        if verb not in VERBS:
            raise ArgumentError(f"Unsupported request method: {verb}")

        if verb == "GET" and self.cache is not None:
            cached = self.cache.get(verb, path, params)
            if cached is not None:
                return cached

        body = dict(params)
        identifier = body.pop("id", None)
        url = path if identifier is None else f"{path}/{identifier}"
        plural = path.strip("/").split("/")[0]

        logger.debug("Sending request", method=verb, url=url, params=body)
        try:
            response = self.http.request(verb, url, **self._request_kwargs(verb, plural, body))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("Request rejected", method=verb, url=url, status_code=status)
            raise TransportError(f"{verb} {url} failed with status {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error("Request failed", method=verb, url=url, error=str(e))
            raise TransportError(f"{verb} {url} failed: {e}") from e

        if not response.content.strip():
            result: dict[str, Any] | bool = True
        else:
            try:
                result = response.json()
            except ValueError as e:
                raise TransportError(f"{verb} {url} returned invalid JSON", status_code=response.status_code) from e
        logger.debug("Received response", method=verb, url=url, status_code=response.status_code)

        if self.cache is not None:
            if verb == "GET":
                self.cache.set(verb, path, params, result)
            else:
                self.cache.clear()
        return result

    def close(self) -> None:
        self.http.close()
