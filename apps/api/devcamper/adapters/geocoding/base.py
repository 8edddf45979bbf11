"""Geocoding provider interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from devcamper.domain.geo import GeoPoint
from devcamper.errors import UpstreamFailure


class GeocodingError(UpstreamFailure):
    """Raised when a geocoder cannot resolve a query."""

    collaborator = "geocoder"


@dataclass(frozen=True, slots=True)
class GeocodedLocation:
    point: GeoPoint
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None

    def as_document(self) -> dict[str, Any]:
        """Shape stored on resources under ``location``."""
        return {
            **self.point.as_geojson(),
            "formatted_address": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipcode": self.zipcode,
            "country": self.country,
        }


class Geocoder(ABC):
    """Provider-neutral forward geocoding interface."""

    @abstractmethod
    async def geocode(self, query: str) -> GeocodedLocation:
        """Resolve an address or postal code, raising ``GeocodingError`` on failure."""


__all__ = ["GeocodedLocation", "Geocoder", "GeocodingError"]
