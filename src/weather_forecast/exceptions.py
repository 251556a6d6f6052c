"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class GeocodingError(Exception):
    """Base class for address resolution failures."""


class AddressError(GeocodingError):
    """Raised when the caller supplies a blank address."""


class AddressNotFound(GeocodingError):
    """Raised when the geocoding provider has no usable match for an address."""


class ResolutionFailure(GeocodingError):
    """Raised when the upstream geocoding lookup itself fails."""


class GeocodingProviderError(Exception):
    """Raised by geocoding adapters for transport, HTTP or payload failures."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WeatherApiError(Exception):
    """Raised for any weather provider failure; the message carries the cause."""


class InvalidKeyError(ValueError):
    """Raised when a forecast cache key is blank."""
