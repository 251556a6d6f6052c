"""Address resolution: geocoding providers and the caching resolver."""

from .base import GeocodingCandidate, GeocodingProvider
from .nominatim import NominatimGeocoder
from .resolver import POSTAL_CODE_STRATEGIES, AddressResolver, extract_postal_code

__all__ = [
    "POSTAL_CODE_STRATEGIES",
    "AddressResolver",
    "GeocodingCandidate",
    "GeocodingProvider",
    "NominatimGeocoder",
    "extract_postal_code",
]
