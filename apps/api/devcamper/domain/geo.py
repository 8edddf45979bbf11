"""Geospatial value types and radius conversion."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


class DistanceUnit(str, Enum):
    MILES = "mi"
    KILOMETERS = "km"

    @property
    def earth_radius(self) -> float:
        return _EARTH_RADIUS[self]


_EARTH_RADIUS: dict[DistanceUnit, float] = {
    DistanceUnit.MILES: 3963.0,
    DistanceUnit.KILOMETERS: 6378.0,
}


class InvalidDistanceError(ValueError):
    """Raised when a search distance is not a finite, non-negative number."""


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float

    def as_geojson(self) -> dict[str, Any]:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}


@dataclass(frozen=True, slots=True)
class SphericalRegion:
    """A spherical cap: center plus angular radius in radians."""

    center: GeoPoint
    radius: float

    def as_store_filter(self) -> dict[str, Any]:
        return {
            "$geoWithin": {
                "$centerSphere": [[self.center.longitude, self.center.latitude], self.radius],
            }
        }


def parse_distance(raw: Any) -> float:
    """Validate a client-supplied distance before any conversion."""
    if isinstance(raw, bool):
        raise InvalidDistanceError(f"Distance must be a number, got {raw!r}")
    try:
        distance = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidDistanceError(f"Distance must be a number, got {raw!r}") from exc
    if not math.isfinite(distance) or distance < 0:
        raise InvalidDistanceError(f"Distance must be a non-negative number, got {raw!r}")
    return distance


def radius_query(center: GeoPoint, distance: float, unit: DistanceUnit = DistanceUnit.MILES) -> SphericalRegion:
    """Convert a linear distance into a region by dividing by Earth's radius in ``unit``."""
    distance = parse_distance(distance)
    return SphericalRegion(center=center, radius=distance / unit.earth_radius)


__all__ = [
    "DistanceUnit",
    "GeoPoint",
    "InvalidDistanceError",
    "SphericalRegion",
    "parse_distance",
    "radius_query",
]
