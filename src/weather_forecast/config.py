"""Typed settings loader for the weather forecast service."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

_REDIS_SCHEMES = ("redis://", "rediss://", "unix://")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    weather_api_key: str | None = Field(default=None, alias="WEATHER_API_KEY", repr=False)
    weather_api_base_url: AnyUrl = Field(
        default=AnyUrl("https://api.weatherapi.com/v1"),
        alias="WEATHER_API_BASE_URL",
    )
    weather_timeout_seconds: float = Field(default=10.0, alias="WEATHER_TIMEOUT_SECONDS")
    forecast_days: int = Field(default=3, alias="FORECAST_DAYS")

    geocoder_base_url: AnyUrl = Field(
        default=AnyUrl("https://nominatim.openstreetmap.org"),
        alias="GEOCODER_BASE_URL",
    )
    geocoder_timeout_seconds: float = Field(default=5.0, alias="GEOCODER_TIMEOUT_SECONDS")
    geocoder_user_agent: str = Field(
        default="WeatherForecastApp/1.0",
        alias="GEOCODER_USER_AGENT",
    )
    geocoder_max_results: int = Field(default=5, alias="GEOCODER_MAX_RESULTS")
    geocoding_cache_ttl_seconds: int = Field(
        default=3600,
        alias="GEOCODING_CACHE_TTL_SECONDS",
    )

    forecast_cache_ttl_minutes: int = Field(default=30, alias="FORECAST_CACHE_TTL_MINUTES")
    redis_url: str | None = Field(default=None, alias="REDIS_URL", repr=False)
    cache_namespace: str = Field(default="weather_forecast", alias="CACHE_NAMESPACE")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )

    @field_validator("weather_api_key", "redis_url", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("redis_url")
    @classmethod
    def validate_redis_scheme(cls, value: str | None) -> str | None:
        if value is not None and not value.strip().lower().startswith(_REDIS_SCHEMES):
            raise ValueError("REDIS_URL must start with redis://, rediss:// or unix://.")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Reject values the service cannot run with."""
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if not (1 <= self.forecast_days <= 14):
            raise ValueError("FORECAST_DAYS must be between 1 and 14.")
        if self.geocoder_timeout_seconds <= 0:
            raise ValueError("GEOCODER_TIMEOUT_SECONDS must be > 0.")
        if not self.geocoder_user_agent.strip():
            raise ValueError("GEOCODER_USER_AGENT must not be empty.")
        if self.geocoder_max_results <= 0:
            raise ValueError("GEOCODER_MAX_RESULTS must be > 0.")
        if self.geocoding_cache_ttl_seconds <= 0:
            raise ValueError("GEOCODING_CACHE_TTL_SECONDS must be > 0.")
        if self.forecast_cache_ttl_minutes <= 0:
            raise ValueError("FORECAST_CACHE_TTL_MINUTES must be > 0.")
        if not self.cache_namespace.strip():
            raise ValueError("CACHE_NAMESPACE must not be empty.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "app_env": self.app_env,
            "weather_api_base_url": str(self.weather_api_base_url),
            "weather_api_key_configured": bool(self.weather_api_key),
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "forecast_days": self.forecast_days,
            "geocoder_base_url": str(self.geocoder_base_url),
            "geocoder_timeout_seconds": self.geocoder_timeout_seconds,
            "geocoding_cache_ttl_seconds": self.geocoding_cache_ttl_seconds,
            "forecast_cache_ttl_minutes": self.forecast_cache_ttl_minutes,
            "cache_backend": "redis" if self.redis_url else "memory",
            "cache_namespace": self.cache_namespace,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
