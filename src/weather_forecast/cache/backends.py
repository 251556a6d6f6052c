"""Key/value cache backends with per-entry TTL."""

from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import redis

from ..config import Settings
from ..exceptions import ConfigError
from ..redaction import sanitize_text


class CacheBackend(ABC):
    """Minimal store contract shared by the forecast and geocoding caches.

    Values are JSON-compatible dicts. Implementations raise on backend failure;
    callers decide whether to absorb it.
    """

    @abstractmethod
    def read(self, key: str) -> dict[str, Any] | None:
        """Return the stored value, or None when absent or expired."""

    @abstractmethod
    def write(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def delete_by_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix and return how many were removed."""


class InMemoryCacheBackend(CacheBackend):
    """Thread-safe TTL dict for development and tests.

    Not shared across processes.
    """

    def __init__(self, time_func: Callable[[], float] = time.monotonic) -> None:
        self._time_func = time_func
        self._lock = threading.Lock()
        self._storage: dict[str, tuple[float, str]] = {}

    def read(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            item = self._storage.get(key)
            if item is None:
                return None
            expires_at, raw = item
            if expires_at <= self._time_func():
                self._storage.pop(key, None)
                return None
        return json.loads(raw)

    def write(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        # Serialize on write so callers never share mutable state with the store.
        raw = json.dumps(value)
        with self._lock:
            self._storage[key] = (self._time_func() + ttl_seconds, raw)

    def delete(self, key: str) -> None:
        with self._lock:
            self._storage.pop(key, None)

    def delete_by_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [key for key in self._storage if key.startswith(prefix)]
            for key in doomed:
                del self._storage[key]
        return len(doomed)


class RedisCacheBackend(CacheBackend):
    """Redis-backed store shared by every process pointing at the same server."""

    def __init__(self, client: redis.Redis, namespace: str = "") -> None:
        self._client = client
        self._namespace = f"{namespace}:" if namespace else ""

    @classmethod
    def from_url(cls, url: str, namespace: str = "") -> RedisCacheBackend:
        return cls(redis.Redis.from_url(url, decode_responses=True), namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def read(self, key: str) -> dict[str, Any] | None:
        raw = self._client.get(self._key(key))
        if not raw:
            return None
        return json.loads(raw)

    def write(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        self._client.set(self._key(key), json.dumps(value, separators=(",", ":")), ex=ttl_seconds)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def delete_by_prefix(self, prefix: str) -> int:
        keys = list(self._client.scan_iter(match=f"{self._key(prefix)}*"))
        if not keys:
            return 0
        return int(self._client.delete(*keys))

    def close(self) -> None:
        self._client.close()


def build_cache_backend(settings: Settings, logger: logging.Logger) -> CacheBackend:
    """Pick Redis when REDIS_URL is configured, otherwise an in-process store."""
    if settings.redis_url:
        try:
            return RedisCacheBackend.from_url(settings.redis_url, namespace=settings.cache_namespace)
        except ValueError as exc:
            raise ConfigError(f"Invalid REDIS_URL: {sanitize_text(str(exc))}") from exc
    logger.warning(
        "REDIS_URL not set; using in-memory cache (entries are not shared across processes)."
    )
    return InMemoryCacheBackend()


def check_cache_backend(backend: CacheBackend, logger: logging.Logger) -> bool:
    """Probe the backend with a write/read/delete round trip. Never raises."""
    probe_key = f"startup_check:{uuid.uuid4().hex[:8]}"
    try:
        backend.write(probe_key, {"ok": True}, ttl_seconds=60)
        value = backend.read(probe_key)
        backend.delete(probe_key)
    except Exception as exc:  # noqa: BLE001 - any backend failure means "unavailable"
        logger.error("Cache connection failed: %s", sanitize_text(str(exc)))
        return False
    if value != {"ok": True}:
        logger.warning("Cache write/read test failed")
        return False
    logger.info("Cache connected successfully (%s)", type(backend).__name__)
    return True
