"""Provider-agnostic geocoding interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class GeocodingCandidate(BaseModel):
    """One provider match, best-ranked first in a search result list."""

    latitude: float
    longitude: float
    address: str = ""
    postal_code: str | None = None
    zipcode: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    data: dict[str, Any] = Field(default_factory=dict, description="Raw provider record")


class GeocodingProvider(ABC):
    """Base contract for address lookup services."""

    @abstractmethod
    def search(self, query: str) -> list[GeocodingCandidate]:
        """Return candidate matches for query, best match first.

        Raises GeocodingProviderError when the lookup itself fails.
        """

    @abstractmethod
    def close(self) -> None:
        """Release provider resources."""
