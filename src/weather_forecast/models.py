"""Shared typed models for resolved locations, forecasts and cache provenance."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Location(_Frozen):
    """Resolved address: coordinates plus the postal key used for caching."""

    latitude: float
    longitude: float
    postal_key: str = Field(min_length=1, description="Normalized postal/zip code")
    formatted_address: str
    city: str | None = None
    region: str | None = None
    country: str | None = None


class CurrentConditions(_Frozen):
    """Current conditions as reported by the weather provider."""

    temperature_f: float | None = None
    temperature_c: float | None = None
    condition: str | None = None
    condition_icon: str | None = None
    humidity: float | None = None
    wind_mph: float | None = None
    wind_kph: float | None = None
    wind_direction: str | None = None
    pressure_mb: float | None = None
    pressure_in: float | None = None
    precip_mm: float | None = None
    precip_in: float | None = None
    feels_like_f: float | None = None
    feels_like_c: float | None = None
    uv_index: float | None = None
    last_updated: str | None = None


class Astronomy(_Frozen):
    """Provider astronomy strings, kept verbatim."""

    sunrise: str | None = None
    sunset: str | None = None
    moonrise: str | None = None
    moonset: str | None = None
    moon_phase: str | None = None


class DayForecast(_Frozen):
    """One forecast day."""

    date: str | None = None
    date_epoch: int | None = None
    max_temp_f: float | None = None
    max_temp_c: float | None = None
    min_temp_f: float | None = None
    min_temp_c: float | None = None
    avg_temp_f: float | None = None
    avg_temp_c: float | None = None
    condition: str | None = None
    condition_icon: str | None = None
    max_wind_mph: float | None = None
    max_wind_kph: float | None = None
    total_precip_mm: float | None = None
    total_precip_in: float | None = None
    avg_humidity: float | None = None
    chance_of_rain: float | None = None
    chance_of_snow: float | None = None
    astro: Astronomy = Field(default_factory=Astronomy)


class ForecastLocation(_Frozen):
    """Location block as the weather provider reports it."""

    name: str | None = None
    region: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    localtime: str | None = None


class ForecastBundle(_Frozen):
    """Normalized forecast; the unit stored in the cache and returned to callers."""

    postal_key: str
    current: CurrentConditions
    days: list[DayForecast] = Field(default_factory=list)
    retrieved_at: datetime
    provider_location: ForecastLocation | None = None


class CacheEntry(_Frozen):
    """Stored cache value: the bundle plus the time it was written."""

    payload: ForecastBundle
    cached_at: datetime

    def to_cache_value(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class CacheResult(_Frozen):
    """Forecast plus cache provenance, as produced by the forecast cache."""

    forecast: ForecastBundle
    from_cache: bool
    cached_at: datetime
    expires_at: datetime


class ResultEnvelope(_Frozen):
    """Facade output consumed by the presentation layer."""

    forecast: ForecastBundle
    location: Location
    from_cache: bool
    cached_at: datetime
    expires_at: datetime
