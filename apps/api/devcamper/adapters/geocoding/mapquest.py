"""MapQuest geocoding adapter."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from devcamper.adapters.geocoding.base import GeocodedLocation, Geocoder, GeocodingError
from devcamper.domain.geo import GeoPoint

logger = logging.getLogger(__name__)


def _formatted_address(location: dict[str, Any]) -> str:
    street = location.get("street") or ""
    city = location.get("adminArea5") or ""
    state = location.get("adminArea3") or ""
    zipcode = location.get("postalCode") or ""
    country = location.get("adminArea1") or ""
    region = " ".join(part for part in (state, zipcode) if part)
    return ", ".join(part for part in (street, city, region, country) if part)


class MapQuestGeocoder(Geocoder):
    """Calls the MapQuest ``geocoding/v1/address`` endpoint.

    Every call is bounded by ``timeout`` seconds. Failures are not retried.
    """

    def __init__(self, *, api_key: str | None, base_url: str, timeout: float) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout

    async def geocode(self, query: str) -> GeocodedLocation:
        if not self._api_key:
            raise GeocodingError("Geocoder API key is not configured")

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._base_url, params={"key": self._api_key, "location": query})
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("geocoder.timeout provider=mapquest timeout=%s", self._timeout)
            raise GeocodingError("Geocoder request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("geocoder.http_error provider=mapquest status=%s", exc.response.status_code)
            raise GeocodingError(
                "Geocoder request failed",
                details={"status_code": exc.response.status_code},
            ) from exc
        except (httpx.RequestError, ValueError) as exc:
            logger.warning("geocoder.request_error provider=mapquest error=%s", type(exc).__name__)
            raise GeocodingError("Geocoder request failed") from exc

        return self._first_location(payload)

    @staticmethod
    def _first_location(payload: Any) -> GeocodedLocation:
        try:
            location = payload["results"][0]["locations"][0]
            lat_lng = location["latLng"]
            point = GeoPoint(latitude=float(lat_lng["lat"]), longitude=float(lat_lng["lng"]))
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise GeocodingError("Geocoder returned no results") from exc

        return GeocodedLocation(
            point=point,
            formatted_address=_formatted_address(location) or None,
            street=location.get("street") or None,
            city=location.get("adminArea5") or None,
            state=location.get("adminArea3") or None,
            zipcode=location.get("postalCode") or None,
            country=location.get("adminArea1") or None,
        )


__all__ = ["MapQuestGeocoder"]
