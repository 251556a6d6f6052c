"""Cache-aside wrapper for normalized forecasts, partitioned by postal key."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from pydantic import ValidationError

from ..exceptions import InvalidKeyError
from ..models import CacheEntry, CacheResult, ForecastBundle
from ..redaction import sanitize_text
from .backends import CacheBackend

DEFAULT_TTL = timedelta(minutes=30)


class ForecastCache:
    """Serve forecasts from the backend when fresh, otherwise compute and store.

    Backend failures never reach the caller: a failed read is a miss and a
    failed write only forfeits future hits.
    """

    namespace = "forecast"

    def __init__(
        self,
        backend: CacheBackend,
        ttl: timedelta = DEFAULT_TTL,
        logger: logging.Logger | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        if ttl < timedelta(seconds=1):
            raise ValueError("Forecast cache TTL must be at least one second.")
        self.backend = backend
        self.ttl = ttl
        self.logger = logger or logging.getLogger(__name__)
        self._now = now_provider or (lambda: datetime.now(UTC))

    def fetch_or_store(
        self,
        postal_key: str,
        compute: Callable[[], ForecastBundle],
    ) -> CacheResult:
        """Return the cached forecast for postal_key, computing it on a miss."""
        normalized = self._normalize(postal_key)
        cache_key = self._cache_key(normalized)

        entry = self._read(cache_key)
        if entry is not None and entry.cached_at + self.ttl <= self._now():
            self.logger.info("Discarding stale cache entry for zip code: %s", normalized)
            entry = None
        if entry is not None:
            self.logger.info("Cache HIT for zip code: %s", normalized)
            return CacheResult(
                forecast=entry.payload,
                from_cache=True,
                cached_at=entry.cached_at,
                expires_at=entry.cached_at + self.ttl,
            )

        self.logger.info("Cache MISS for zip code: %s", normalized)
        forecast = compute()
        cached_at = self._now()
        self._write(cache_key, CacheEntry(payload=forecast, cached_at=cached_at))
        return CacheResult(
            forecast=forecast,
            from_cache=False,
            cached_at=cached_at,
            expires_at=cached_at + self.ttl,
        )

    def invalidate(self, postal_key: str) -> bool:
        """Remove one entry. Absent entries are not an error."""
        normalized = self._normalize(postal_key)
        try:
            self.backend.delete(self._cache_key(normalized))
        except Exception as exc:  # noqa: BLE001 - backend failures are absorbed
            self.logger.error("Error clearing cache: %s", sanitize_text(str(exc)))
            return False
        self.logger.info("Cache cleared for zip code: %s", normalized)
        return True

    def invalidate_all(self) -> bool:
        """Remove every entry under this cache's namespace."""
        try:
            removed = self.backend.delete_by_prefix(f"{self.namespace}:")
        except Exception as exc:  # noqa: BLE001 - backend failures are absorbed
            self.logger.error("Error clearing cache: %s", sanitize_text(str(exc)))
            return False
        self.logger.info("All forecast caches cleared (%d entries)", removed)
        return True

    @staticmethod
    def _normalize(postal_key: str | None) -> str:
        normalized = (postal_key or "").strip().lower()
        if not normalized:
            raise InvalidKeyError("Zip code cannot be blank")
        return normalized

    def _cache_key(self, normalized_key: str) -> str:
        return f"{self.namespace}:{normalized_key}"

    def _read(self, cache_key: str) -> CacheEntry | None:
        try:
            raw = self.backend.read(cache_key)
        except Exception as exc:  # noqa: BLE001 - backend failures are absorbed
            self.logger.error("Error reading from cache: %s", sanitize_text(str(exc)))
            return None
        if raw is None:
            return None
        try:
            return CacheEntry.model_validate(raw)
        except ValidationError as exc:
            self.logger.warning("Discarding undecodable cache entry %s: %s", cache_key, exc)
            return None

    def _write(self, cache_key: str, entry: CacheEntry) -> None:
        try:
            self.backend.write(
                cache_key,
                entry.to_cache_value(),
                ttl_seconds=math.ceil(self.ttl.total_seconds()),
            )
        except Exception as exc:  # noqa: BLE001 - backend failures are absorbed
            self.logger.error("Error writing to cache: %s", sanitize_text(str(exc)))
