"""WeatherAPI.com integration: HTTP client and payload normalization."""

from .client import WeatherClient
from .normalizer import normalize

__all__ = ["WeatherClient", "normalize"]
