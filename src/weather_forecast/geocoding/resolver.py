"""Resolve free-text addresses to coordinates and a postal cache key."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import ValidationError

from ..cache.backends import CacheBackend
from ..exceptions import AddressError, AddressNotFound, GeocodingProviderError, ResolutionFailure
from ..models import Location
from ..redaction import sanitize_text
from .base import GeocodingCandidate, GeocodingProvider

DEFAULT_TTL_SECONDS = 3600

PostalCodeStrategy = Callable[[GeocodingCandidate], "str | None"]


def _as_postal(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _nested(*path: str) -> PostalCodeStrategy:
    def _lookup(candidate: GeocodingCandidate) -> str | None:
        node: Any = candidate.data
        for part in path:
            if not isinstance(node, dict):
                return None
            node = node.get(part)
        return _as_postal(node)

    _lookup.__name__ = "data." + ".".join(path)
    return _lookup


def from_postal_code(candidate: GeocodingCandidate) -> str | None:
    return _as_postal(candidate.postal_code)


def from_zipcode(candidate: GeocodingCandidate) -> str | None:
    return _as_postal(candidate.zipcode)


# Providers disagree on where the postal code lives; first non-empty wins.
POSTAL_CODE_STRATEGIES: tuple[PostalCodeStrategy, ...] = (
    from_postal_code,
    from_zipcode,
    _nested("address", "postcode"),
    _nested("address", "zip"),
)


def extract_postal_code(
    candidate: GeocodingCandidate,
    strategies: Sequence[PostalCodeStrategy] = POSTAL_CODE_STRATEGIES,
) -> str | None:
    """Return the first postal code any strategy finds, or None."""
    for strategy in strategies:
        value = strategy(candidate)
        if value:
            return value
    return None


def normalize_postal_key(value: str) -> str:
    return value.strip().lower()


class AddressResolver:
    """Geocode addresses through a provider, memoizing results for an hour."""

    def __init__(
        self,
        provider: GeocodingProvider,
        cache: CacheBackend,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        logger: logging.Logger | None = None,
        strategies: Sequence[PostalCodeStrategy] = POSTAL_CODE_STRATEGIES,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.strategies = tuple(strategies)

    def resolve(self, address: str) -> Location:
        """Resolve address to a Location.

        Raises AddressError for blank input, AddressNotFound when the provider
        has no usable match and ResolutionFailure when the lookup itself fails.
        """
        if address is None or not address.strip():
            raise AddressError("Address cannot be blank")

        cache_key = self._cache_key(address)
        cached = self._read(cache_key)
        if cached is not None:
            return cached

        location = self._lookup(address)
        self._write(cache_key, location)
        return location

    @staticmethod
    def _cache_key(address: str) -> str:
        normalized = address.strip().lower()
        return f"geocoding:{hashlib.md5(normalized.encode('utf-8')).hexdigest()}"

    def _lookup(self, address: str) -> Location:
        try:
            candidates = self.provider.search(address.strip())
        except GeocodingProviderError as exc:
            self.logger.error("Geocoder error for '%s': %s", address, exc)
            raise ResolutionFailure(f"Failed to geocode address: {exc}") from exc

        if not candidates:
            raise AddressNotFound("No location found for the given address")

        best = candidates[0]
        postal_code = extract_postal_code(best, self.strategies)
        if postal_code is None:
            raise AddressNotFound("No postal code found for the given address")

        return Location(
            latitude=best.latitude,
            longitude=best.longitude,
            postal_key=normalize_postal_key(postal_code),
            formatted_address=best.address or address.strip(),
            city=best.city,
            region=best.state,
            country=best.country,
        )

    def _read(self, cache_key: str) -> Location | None:
        try:
            raw = self.cache.read(cache_key)
        except Exception as exc:  # noqa: BLE001 - backend failures are absorbed
            self.logger.error("Error reading geocoding cache: %s", sanitize_text(str(exc)))
            return None
        if raw is None:
            return None
        try:
            return Location.model_validate(raw)
        except ValidationError as exc:
            self.logger.warning("Discarding undecodable geocoding entry %s: %s", cache_key, exc)
            return None

    def _write(self, cache_key: str, location: Location) -> None:
        try:
            self.cache.write(cache_key, location.model_dump(mode="json"), self.ttl_seconds)
        except Exception as exc:  # noqa: BLE001 - backend failures are absorbed
            self.logger.error("Error writing geocoding cache: %s", sanitize_text(str(exc)))
