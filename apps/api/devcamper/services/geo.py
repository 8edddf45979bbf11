"""Postal code to region resolution for proximity searches."""

from __future__ import annotations

import logging

from devcamper.adapters.geocoding import Geocoder
from devcamper.core.logging_safety import safe_log_postal_code
from devcamper.domain.geo import DistanceUnit, GeoPoint, SphericalRegion, parse_distance, radius_query

logger = logging.getLogger(__name__)


class GeoResolver:
    def __init__(self, geocoder: Geocoder) -> None:
        self._geocoder = geocoder

    async def resolve(self, postal_code: str) -> GeoPoint:
        """Geocode a postal code; ``GeocodingError`` propagates to the caller."""
        location = await self._geocoder.geocode(postal_code)
        logger.info("geo.resolved postal_code=%s", safe_log_postal_code(postal_code))
        return location.point

    async def region_for(self, postal_code: str, distance: object, unit: DistanceUnit) -> SphericalRegion:
        # Distance is validated before the geocoder is called.
        parsed_distance = parse_distance(distance)
        center = await self.resolve(postal_code)
        return radius_query(center, parsed_distance, unit)


__all__ = ["GeoResolver"]
