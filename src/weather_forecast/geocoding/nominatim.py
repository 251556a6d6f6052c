"""Nominatim (OpenStreetMap) geocoding provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import GeocodingProviderError
from ..redaction import sanitize_text
from .base import GeocodingCandidate, GeocodingProvider


class NominatimGeocoder(GeocodingProvider):
    """Free-text address search against a Nominatim-compatible `/search` endpoint."""

    provider_name = "nominatim"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._client = httpx.Client(
            base_url=str(settings.geocoder_base_url),
            timeout=settings.geocoder_timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": settings.geocoder_user_agent,
            },
            transport=transport,
        )

    def __enter__(self) -> NominatimGeocoder:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def search(self, query: str) -> list[GeocodingCandidate]:
        payload = self._request_json(
            "/search",
            params={
                "q": query,
                "format": "jsonv2",
                "addressdetails": 1,
                "limit": self.settings.geocoder_max_results,
            },
        )
        return [self._to_candidate(item) for item in payload if isinstance(item, dict)]

    def _request_json(self, endpoint: str, params: dict[str, Any]) -> list[Any]:
        try:
            response = self._client.get(endpoint, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise GeocodingProviderError(
                f"Geocoding request timed out after {self.settings.geocoder_timeout_seconds}s"
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise GeocodingProviderError(
                f"Geocoding request failed with status {status}: "
                f"{sanitize_text(exc.response.text[:300])}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise GeocodingProviderError(
                f"Geocoding request failed: {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeocodingProviderError("Geocoding service returned non-JSON response.") from exc
        if not isinstance(payload, list):
            raise GeocodingProviderError(
                f"Geocoding service returned unexpected payload type {type(payload).__name__}."
            )
        return payload

    def _to_candidate(self, item: dict[str, Any]) -> GeocodingCandidate:
        address = item.get("address")
        if not isinstance(address, dict):
            address = {}
        try:
            latitude = float(item["lat"])
            longitude = float(item["lon"])
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingProviderError("Geocoding result missing coordinates.") from exc

        city = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("hamlet")
        )
        return GeocodingCandidate(
            latitude=latitude,
            longitude=longitude,
            address=str(item.get("display_name") or ""),
            postal_code=address.get("postcode"),
            city=city,
            state=address.get("state"),
            country=address.get("country"),
            data=item,
        )
