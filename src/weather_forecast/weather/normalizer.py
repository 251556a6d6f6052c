"""Transform raw WeatherAPI.com payloads into ForecastBundle models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from ..exceptions import WeatherApiError
from ..models import (
    Astronomy,
    CurrentConditions,
    DayForecast,
    ForecastBundle,
    ForecastLocation,
)
from .client import INVALID_RESPONSE


def _section(data: Any, key: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _normalize_current(current: dict[str, Any]) -> CurrentConditions:
    condition = _section(current, "condition")
    return CurrentConditions(
        temperature_f=current.get("temp_f"),
        temperature_c=current.get("temp_c"),
        condition=condition.get("text"),
        condition_icon=condition.get("icon"),
        humidity=current.get("humidity"),
        wind_mph=current.get("wind_mph"),
        wind_kph=current.get("wind_kph"),
        wind_direction=current.get("wind_dir"),
        pressure_mb=current.get("pressure_mb"),
        pressure_in=current.get("pressure_in"),
        precip_mm=current.get("precip_mm"),
        precip_in=current.get("precip_in"),
        feels_like_f=current.get("feelslike_f"),
        feels_like_c=current.get("feelslike_c"),
        uv_index=current.get("uv"),
        last_updated=current.get("last_updated"),
    )


def _normalize_day(entry: dict[str, Any]) -> DayForecast:
    day = _section(entry, "day")
    condition = _section(day, "condition")
    astro = _section(entry, "astro")
    return DayForecast(
        date=entry.get("date"),
        date_epoch=entry.get("date_epoch"),
        max_temp_f=day.get("maxtemp_f"),
        max_temp_c=day.get("maxtemp_c"),
        min_temp_f=day.get("mintemp_f"),
        min_temp_c=day.get("mintemp_c"),
        avg_temp_f=day.get("avgtemp_f"),
        avg_temp_c=day.get("avgtemp_c"),
        condition=condition.get("text"),
        condition_icon=condition.get("icon"),
        max_wind_mph=day.get("maxwind_mph"),
        max_wind_kph=day.get("maxwind_kph"),
        total_precip_mm=day.get("totalprecip_mm"),
        total_precip_in=day.get("totalprecip_in"),
        avg_humidity=day.get("avghumidity"),
        chance_of_rain=day.get("daily_chance_of_rain"),
        chance_of_snow=day.get("daily_chance_of_snow"),
        astro=Astronomy(
            sunrise=astro.get("sunrise"),
            sunset=astro.get("sunset"),
            moonrise=astro.get("moonrise"),
            moonset=astro.get("moonset"),
            moon_phase=astro.get("moon_phase"),
        ),
    )


def _normalize_location(location: dict[str, Any]) -> ForecastLocation | None:
    if not location:
        return None
    return ForecastLocation(
        name=location.get("name"),
        region=location.get("region"),
        country=location.get("country"),
        latitude=location.get("lat"),
        longitude=location.get("lon"),
        timezone=location.get("tz_id"),
        localtime=location.get("localtime"),
    )


def normalize(
    raw: dict[str, Any],
    postal_key: str,
    now: datetime | None = None,
) -> ForecastBundle:
    """Build a ForecastBundle from a `/forecast.json` (or `/current.json`) payload.

    An absent forecast block yields an empty day list; an absent `current`
    block means the payload is unusable.
    """
    current = _section(raw, "current")
    if not current:
        raise WeatherApiError(INVALID_RESPONSE)

    forecast_days = _section(raw, "forecast").get("forecastday")
    if not isinstance(forecast_days, list):
        forecast_days = []

    try:
        return ForecastBundle(
            postal_key=postal_key,
            current=_normalize_current(current),
            days=[_normalize_day(entry) for entry in forecast_days if isinstance(entry, dict)],
            retrieved_at=now or datetime.now(UTC),
            provider_location=_normalize_location(_section(raw, "location")),
        )
    except ValidationError as exc:
        raise WeatherApiError(INVALID_RESPONSE) from exc
