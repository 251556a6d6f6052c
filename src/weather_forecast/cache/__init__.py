"""Forecast cache and its storage backends."""

from .backends import (
    CacheBackend,
    InMemoryCacheBackend,
    RedisCacheBackend,
    build_cache_backend,
    check_cache_backend,
)
from .forecast_cache import DEFAULT_TTL, ForecastCache

__all__ = [
    "DEFAULT_TTL",
    "CacheBackend",
    "ForecastCache",
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "build_cache_backend",
    "check_cache_backend",
]
