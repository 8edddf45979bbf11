"""Geocoder adapters."""

from .base import GeocodedLocation, Geocoder, GeocodingError
from .mapquest import MapQuestGeocoder
from .static import StaticGeocoder

__all__ = [
    "GeocodedLocation",
    "Geocoder",
    "GeocodingError",
    "MapQuestGeocoder",
    "StaticGeocoder",
]
