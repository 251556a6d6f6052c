"""Shared fixtures: WeatherAPI.com payloads, fake geocoders and a controllable clock."""

from __future__ import annotations

import copy
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from weather_forecast.exceptions import GeocodingProviderError
from weather_forecast.geocoding.base import GeocodingCandidate, GeocodingProvider

FORECAST_PAYLOAD: dict[str, Any] = {
    "location": {
        "name": "Cupertino",
        "region": "California",
        "country": "United States of America",
        "lat": 37.32,
        "lon": -122.03,
        "tz_id": "America/Los_Angeles",
        "localtime": "2024-01-15 9:30",
    },
    "current": {
        "last_updated": "2024-01-15 09:15",
        "temp_c": 22.2,
        "temp_f": 72.0,
        "condition": {"text": "Sunny", "icon": "//cdn.weatherapi.com/weather/64x64/day/113.png"},
        "wind_mph": 5.6,
        "wind_kph": 9.0,
        "wind_dir": "NW",
        "pressure_mb": 1016.0,
        "pressure_in": 30.0,
        "precip_mm": 0.0,
        "precip_in": 0.0,
        "humidity": 45,
        "feelslike_c": 22.0,
        "feelslike_f": 71.6,
        "uv": 4.0,
    },
    "forecast": {
        "forecastday": [
            {
                "date": "2024-01-15",
                "date_epoch": 1705276800,
                "day": {
                    "maxtemp_c": 24.0,
                    "maxtemp_f": 75.2,
                    "mintemp_c": 10.0,
                    "mintemp_f": 50.0,
                    "avgtemp_c": 17.0,
                    "avgtemp_f": 62.6,
                    "maxwind_mph": 8.1,
                    "maxwind_kph": 13.0,
                    "totalprecip_mm": 0.0,
                    "totalprecip_in": 0.0,
                    "avghumidity": 50,
                    "daily_chance_of_rain": 0,
                    "daily_chance_of_snow": 0,
                    "condition": {"text": "Sunny", "icon": "//cdn/113.png"},
                },
                "astro": {
                    "sunrise": "07:21 AM",
                    "sunset": "05:12 PM",
                    "moonrise": "10:30 AM",
                    "moonset": "10:58 PM",
                    "moon_phase": "Waxing Crescent",
                },
            },
            {
                "date": "2024-01-16",
                "date_epoch": 1705363200,
                "day": {
                    "maxtemp_c": 18.0,
                    "maxtemp_f": 64.4,
                    "mintemp_c": 9.0,
                    "mintemp_f": 48.2,
                    "avgtemp_c": 13.0,
                    "avgtemp_f": 55.4,
                    "maxwind_mph": 12.3,
                    "maxwind_kph": 19.8,
                    "totalprecip_mm": 4.2,
                    "totalprecip_in": 0.17,
                    "avghumidity": 78,
                    "daily_chance_of_rain": 85,
                    "daily_chance_of_snow": 0,
                    "condition": {"text": "Patchy rain possible", "icon": "//cdn/176.png"},
                },
                "astro": {
                    "sunrise": "07:21 AM",
                    "sunset": "05:13 PM",
                    "moonrise": "11:02 AM",
                    "moonset": "No moonset",
                    "moon_phase": "First Quarter",
                },
            },
        ]
    },
}


class FakeGeocoder(GeocodingProvider):
    """Records queries and returns canned candidates (or raises)."""

    def __init__(
        self,
        candidates: list[GeocodingCandidate] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.candidates = candidates or []
        self.error = error
        self.queries: list[str] = []
        self.closed = False

    def search(self, query: str) -> list[GeocodingCandidate]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.candidates)

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Controllable UTC wall clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 15, 17, 30, tzinfo=UTC)

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def forecast_payload() -> dict[str, Any]:
    return copy.deepcopy(FORECAST_PAYLOAD)


@pytest.fixture()
def cupertino_candidate() -> GeocodingCandidate:
    return GeocodingCandidate(
        latitude=37.3349,
        longitude=-122.009,
        address="Apple Park, 1 Apple Park Way, Cupertino, CA 95014, USA",
        city="Cupertino",
        state="California",
        country="United States",
        data={"address": {"postcode": "95014", "city": "Cupertino"}},
    )


@pytest.fixture()
def fake_geocoder(cupertino_candidate: GeocodingCandidate) -> FakeGeocoder:
    return FakeGeocoder([cupertino_candidate])


@pytest.fixture()
def failing_geocoder() -> FakeGeocoder:
    return FakeGeocoder(error=GeocodingProviderError("connection reset by peer"))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def make_geocoder() -> type[FakeGeocoder]:
    return FakeGeocoder
