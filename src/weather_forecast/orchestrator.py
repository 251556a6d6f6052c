"""Facade composing address resolution, the forecast cache and the weather fetch."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Any, Protocol

from .cache.backends import build_cache_backend, check_cache_backend
from .cache.forecast_cache import ForecastCache
from .config import Settings
from .geocoding.nominatim import NominatimGeocoder
from .geocoding.resolver import AddressResolver
from .models import ForecastBundle, Location, ResultEnvelope
from .weather.client import WeatherClient
from .weather.normalizer import normalize

FetchWeather = Callable[[float, float, int], dict[str, Any]]
Normalizer = Callable[[dict[str, Any], str], ForecastBundle]


class Resolver(Protocol):
    def resolve(self, address: str) -> Location: ...


class ForecastOrchestrator:
    """Single entry point for the presentation layer.

    Errors from resolution and from the weather fetch propagate unchanged.
    """

    def __init__(
        self,
        resolver: Resolver,
        cache: ForecastCache,
        fetch_weather: FetchWeather,
        normalizer: Normalizer = normalize,
        forecast_days: int = 3,
    ) -> None:
        self.resolver = resolver
        self.cache = cache
        self.fetch_weather = fetch_weather
        self.normalizer = normalizer
        self.forecast_days = forecast_days

    def get_forecast(self, address: str) -> ResultEnvelope:
        location = self.resolver.resolve(address)

        def _compute() -> ForecastBundle:
            raw = self.fetch_weather(location.latitude, location.longitude, self.forecast_days)
            return self.normalizer(raw, location.postal_key)

        result = self.cache.fetch_or_store(location.postal_key, _compute)
        return ResultEnvelope(
            forecast=result.forecast,
            location=location,
            from_cache=result.from_cache,
            cached_at=result.cached_at,
            expires_at=result.expires_at,
        )

    def clear_cache(self, postal_key: str) -> bool:
        return self.cache.invalidate(postal_key)

    def clear_all_caches(self) -> bool:
        return self.cache.invalidate_all()


def build_orchestrator(
    settings: Settings,
    logger: logging.Logger,
) -> tuple[ForecastOrchestrator, Callable[[], None]]:
    """Wire production collaborators; returns the facade and a closer for its clients."""
    backend = build_cache_backend(settings, logger)
    check_cache_backend(backend, logger)

    geocoder = NominatimGeocoder(settings=settings, logger=logger)
    weather_client = WeatherClient(settings=settings, logger=logger)
    resolver = AddressResolver(
        provider=geocoder,
        cache=backend,
        ttl_seconds=settings.geocoding_cache_ttl_seconds,
        logger=logger,
    )
    cache = ForecastCache(
        backend=backend,
        ttl=timedelta(minutes=settings.forecast_cache_ttl_minutes),
        logger=logger,
    )

    def _fetch(lat: float, lon: float, days: int) -> dict[str, Any]:
        return weather_client.fetch_forecast(lat, lon, days=days)

    def _close() -> None:
        geocoder.close()
        weather_client.close()
        close_backend = getattr(backend, "close", None)
        if callable(close_backend):
            close_backend()

    orchestrator = ForecastOrchestrator(
        resolver=resolver,
        cache=cache,
        fetch_weather=_fetch,
        forecast_days=settings.forecast_days,
    )
    return orchestrator, _close
