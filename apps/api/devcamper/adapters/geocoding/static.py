"""Table-backed geocoder for local development and tests."""

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, TypeAdapter, ValidationError

from devcamper.adapters.geocoding.base import GeocodedLocation, Geocoder, GeocodingError
from devcamper.domain.geo import GeoPoint


class StaticTableEntry(BaseModel):
    """One row of a static geocoding table file."""

    latitude: float
    longitude: float
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None

    def to_location(self) -> GeocodedLocation:
        return GeocodedLocation(
            point=GeoPoint(latitude=self.latitude, longitude=self.longitude),
            formatted_address=self.formatted_address,
            street=self.street,
            city=self.city,
            state=self.state,
            zipcode=self.zipcode,
            country=self.country,
        )


_TABLE_ADAPTER = TypeAdapter(dict[str, StaticTableEntry])


@lru_cache(maxsize=8)
def load_static_table(path: Path) -> Mapping[str, GeocodedLocation]:
    """Read a JSON object mapping queries to locations."""
    try:
        entries = _TABLE_ADAPTER.validate_json(Path(path).read_bytes())
    except (OSError, ValidationError) as exc:
        raise GeocodingError("Static geocoding table could not be loaded", details={"table": Path(path).name}) from exc
    return {query: entry.to_location() for query, entry in entries.items()}


class StaticGeocoder(Geocoder):
    """Resolves queries from a fixed table; lookups ignore case and surrounding space."""

    def __init__(self, locations: Mapping[str, GeocodedLocation] | None = None) -> None:
        self._locations = {self._key(query): location for query, location in (locations or {}).items()}
        self.calls: list[str] = []

    @classmethod
    def from_file(cls, path: Path) -> "StaticGeocoder":
        return cls(load_static_table(Path(path)))

    async def geocode(self, query: str) -> GeocodedLocation:
        self.calls.append(query)
        location = self._locations.get(self._key(query))
        if location is None:
            raise GeocodingError("Geocoder returned no results", details={"query_length": len(query)})
        return location

    @staticmethod
    def _key(query: str) -> str:
        return query.strip().lower()


__all__ = ["StaticGeocoder", "StaticTableEntry", "load_static_table"]
