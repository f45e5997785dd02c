"""Geocoding and local search providers."""

from .base import Geocoder, SearchProvider
from .google_places import GooglePlacesSearchProvider
from .nominatim import NominatimGeocoder

__all__ = [
    "Geocoder",
    "SearchProvider",
    "GooglePlacesSearchProvider",
    "NominatimGeocoder",
]
