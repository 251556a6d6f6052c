"""Normalization of WeatherAPI.com payloads into ForecastBundle."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from weather_forecast.exceptions import WeatherApiError
from weather_forecast.weather.normalizer import normalize

STAMP = datetime(2024, 1, 15, 17, 30, tzinfo=UTC)


def test_current_conditions_are_relabelled(forecast_payload: dict[str, Any]) -> None:
    bundle = normalize(forecast_payload, "95014", now=STAMP)

    current = bundle.current
    assert bundle.postal_key == "95014"
    assert current.temperature_f == 72.0
    assert current.temperature_c == 22.2
    assert current.condition == "Sunny"
    assert current.condition_icon.endswith("113.png")
    assert current.humidity == 45
    assert current.wind_mph == 5.6
    assert current.wind_kph == 9.0
    assert current.wind_direction == "NW"
    assert current.pressure_mb == 1016.0
    assert current.pressure_in == 30.0
    assert current.precip_mm == 0.0
    assert current.feels_like_f == 71.6
    assert current.feels_like_c == 22.0
    assert current.uv_index == 4.0
    assert current.last_updated == "2024-01-15 09:15"


def test_days_keep_provider_order_and_fields(forecast_payload: dict[str, Any]) -> None:
    bundle = normalize(forecast_payload, "95014", now=STAMP)

    assert [day.date for day in bundle.days] == ["2024-01-15", "2024-01-16"]
    rainy = bundle.days[1]
    assert rainy.date_epoch == 1705363200
    assert rainy.max_temp_f == 64.4
    assert rainy.min_temp_c == 9.0
    assert rainy.avg_temp_f == 55.4
    assert rainy.condition == "Patchy rain possible"
    assert rainy.max_wind_kph == 19.8
    assert rainy.total_precip_in == 0.17
    assert rainy.avg_humidity == 78
    assert rainy.chance_of_rain == 85
    assert rainy.chance_of_snow == 0


def test_astronomy_copied_verbatim(forecast_payload: dict[str, Any]) -> None:
    bundle = normalize(forecast_payload, "95014", now=STAMP)

    astro = bundle.days[1].astro
    assert astro.sunrise == "07:21 AM"
    assert astro.sunset == "05:13 PM"
    assert astro.moonrise == "11:02 AM"
    assert astro.moonset == "No moonset"
    assert astro.moon_phase == "First Quarter"


def test_provider_location_is_captured(forecast_payload: dict[str, Any]) -> None:
    bundle = normalize(forecast_payload, "95014", now=STAMP)

    assert bundle.provider_location is not None
    assert bundle.provider_location.name == "Cupertino"
    assert bundle.provider_location.timezone == "America/Los_Angeles"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda payload: payload.pop("forecast"),
        lambda payload: payload["forecast"].pop("forecastday"),
        lambda payload: payload.__setitem__("forecast", None),
        lambda payload: payload["forecast"].__setitem__("forecastday", []),
    ],
)
def test_missing_forecast_days_normalize_to_empty_list(
    forecast_payload: dict[str, Any], mutate: Any
) -> None:
    mutate(forecast_payload)

    bundle = normalize(forecast_payload, "95014", now=STAMP)

    assert bundle.days == []
    assert bundle.current.temperature_f == 72.0


def test_current_endpoint_payload_normalizes(forecast_payload: dict[str, Any]) -> None:
    raw = {"location": forecast_payload["location"], "current": forecast_payload["current"]}
    assert normalize(raw, "95014", now=STAMP).days == []


def test_retrieved_at_stamped_at_normalization_time(forecast_payload: dict[str, Any]) -> None:
    before = datetime.now(UTC)
    bundle = normalize(forecast_payload, "95014")
    after = datetime.now(UTC)

    assert before <= bundle.retrieved_at <= after
    assert normalize(forecast_payload, "95014", now=STAMP).retrieved_at == STAMP


def test_missing_current_block_is_invalid(forecast_payload: dict[str, Any]) -> None:
    forecast_payload.pop("current")
    with pytest.raises(WeatherApiError, match="Invalid response from weather service"):
        normalize(forecast_payload, "95014", now=STAMP)


def test_wrongly_typed_fields_are_invalid(forecast_payload: dict[str, Any]) -> None:
    forecast_payload["current"]["temp_f"] = "warm"
    with pytest.raises(WeatherApiError, match="Invalid response from weather service"):
        normalize(forecast_payload, "95014", now=STAMP)


def test_missing_nested_sections_become_none(forecast_payload: dict[str, Any]) -> None:
    day = forecast_payload["forecast"]["forecastday"][0]
    day.pop("astro")
    day["day"].pop("condition")

    bundle = normalize(forecast_payload, "95014", now=STAMP)

    assert bundle.days[0].condition is None
    assert bundle.days[0].astro.sunrise is None
