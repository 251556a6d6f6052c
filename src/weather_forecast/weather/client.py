"""WeatherAPI.com HTTP client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherApiError
from ..redaction import sanitize_text

INVALID_RESPONSE = "Invalid response from weather service"


class WeatherClient:
    """Fetches raw current/forecast payloads and classifies failures.

    No retries happen here; a caller that wants them wraps this client.
    """

    provider_name = "weatherapi"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._client = httpx.Client(
            base_url=str(settings.weather_api_base_url),
            timeout=settings.weather_timeout_seconds,
            headers={
                "Content-Type": "application/json",
                "User-Agent": "WeatherForecastApp/1.0",
            },
            transport=transport,
        )

    def __enter__(self) -> WeatherClient:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_current(self, lat: float, lon: float) -> dict[str, Any]:
        """Fetch current conditions for a coordinate pair."""
        params = {"key": self._api_key(), "q": f"{lat},{lon}", "aqi": "no"}
        return self._request_json("/current.json", params)

    def fetch_forecast(self, lat: float, lon: float, days: int = 3) -> dict[str, Any]:
        """Fetch current conditions plus a `days`-day forecast."""
        params = {
            "key": self._api_key(),
            "q": f"{lat},{lon}",
            "days": days,
            "aqi": "no",
            "alerts": "no",
        }
        return self._request_json("/forecast.json", params)

    def _api_key(self) -> str:
        key = self.settings.weather_api_key
        if not key or not key.strip():
            raise WeatherApiError(
                "Weather API key not configured. "
                "Please set WEATHER_API_KEY environment variable."
            )
        return key

    def _request_json(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.TimeoutException as exc:
            self.logger.error("Weather API request to %s timed out", endpoint)
            raise WeatherApiError(
                f"Weather service timed out after {self.settings.weather_timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            self.logger.error(
                "Weather API request to %s failed: %s", endpoint, sanitize_text(str(exc))
            )
            raise WeatherApiError(
                f"Weather service request failed: {sanitize_text(str(exc))}"
            ) from exc
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        status = response.status_code
        if 200 <= status <= 299:
            try:
                payload = response.json()
            except ValueError as exc:
                self.logger.error("Failed to parse weather API response: %s", exc)
                raise WeatherApiError(INVALID_RESPONSE) from exc
            if not isinstance(payload, dict):
                self.logger.error(
                    "Weather API returned unexpected payload type %s", type(payload).__name__
                )
                raise WeatherApiError(INVALID_RESPONSE)
            return payload
        if status == 400:
            raise WeatherApiError(f"Bad request: {self._error_message(response)}")
        if status == 401:
            raise WeatherApiError("Invalid API key")
        if status == 403:
            raise WeatherApiError("API key quota exceeded or disabled")
        if status == 404:
            raise WeatherApiError("Location not found")
        if 500 <= status <= 599:
            raise WeatherApiError("Weather service is currently unavailable")
        raise WeatherApiError(f"Unexpected response code: {status}")

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return "Unknown error"
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return "Unknown error"
