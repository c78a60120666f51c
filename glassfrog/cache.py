"""File-backed cache of GET responses."""

import hashlib
import json
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()


class ResponseCache:
    """Stores decoded responses as JSON files keyed by request.

    Only reads are cached. Callers clear the cache after any write so a
    later read goes back to the server.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug("Response cache initialized", directory=str(self.directory))

    @staticmethod
    def key(method: str, path: str, params: dict[str, Any]) -> str:
        payload = json.dumps([method.upper(), path, params], sort_keys=True, default=str)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def _file(self, method: str, path: str, params: dict[str, Any]) -> Path:
        return self.directory / f"{self.key(method, path, params)}.json"

    def get(self, method: str, path: str, params: dict[str, Any]) -> Any | None:
        cache_file = self._file(method, path, params)
        if not cache_file.exists():
            return None
        try:
            with open(cache_file, "r") as f:
                value = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable cache entry", file=str(cache_file), error=str(e))
            cache_file.unlink(missing_ok=True)
            return None
        logger.debug("Cache hit", method=method, path=path)
        return value

    def set(self, method: str, path: str, params: dict[str, Any], value: Any) -> None:
        with open(self._file(method, path, params), "w") as f:
            json.dump(value, f)
        logger.debug("Cached response", method=method, path=path)

    def clear(self) -> None:
        removed = 0
        for cache_file in self.directory.glob("*.json"):
            cache_file.unlink(missing_ok=True)
            removed += 1
        logger.debug("Cache cleared", removed=removed)
