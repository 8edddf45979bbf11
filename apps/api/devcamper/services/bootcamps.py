"""Bootcamp service layer."""

from __future__ import annotations

import logging
import re
from typing import Any, BinaryIO

from devcamper.adapters.geocoding import Geocoder
from devcamper.adapters.storage import FileStorage
from devcamper.core.logging_safety import safe_log_identifier, safe_log_postal_code
from devcamper.domain.authorization import Action, authorize, require_single_per_owner
from devcamper.domain.geo import DistanceUnit, InvalidDistanceError
from devcamper.domain.query import QueryDescriptor
from devcamper.domain.uploads import UploadedAsset, UploadRejection, validate_upload
from devcamper.errors import bad_request, not_found
from devcamper.repositories.memory import InMemoryStore
from devcamper.schemas.auth import Principal
from devcamper.schemas.bootcamp import Bootcamp, CreateBootcampRequest, UpdateBootcampRequest
from devcamper.services.access import ensure_allowed, ensure_precondition
from devcamper.services.geo import GeoResolver
from devcamper.services.pagination import Page, PaginationExecutor, PopulateSpec

logger = logging.getLogger(__name__)

DEFAULT_PHOTO = "no-photo.jpg"

BOOTCAMP_COURSES = PopulateSpec(
    path="courses",
    collection="courses",
    local_field="id",
    foreign_field="bootcamp_id",
    many=True,
)

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    return _SLUG_SEPARATORS.sub("-", name.lower()).strip("-") or "bootcamp"


def refresh_average_cost(store: InMemoryStore, bootcamp_id: str) -> None:
    average = store.courses.average("tuition", {"bootcamp_id": bootcamp_id})
    store.bootcamps.update(bootcamp_id, {"average_cost": round(average, 2) if average is not None else None})


def refresh_average_rating(store: InMemoryStore, bootcamp_id: str) -> None:
    average = store.reviews.average("rating", {"bootcamp_id": bootcamp_id})
    store.bootcamps.update(bootcamp_id, {"average_rating": round(average, 2) if average is not None else None})


class BootcampService:
    def __init__(self, store: InMemoryStore, geocoder: Geocoder | None = None) -> None:
        self._store = store
        self._geocoder = geocoder

    def list_bootcamps(self, descriptor: QueryDescriptor) -> Page[dict[str, Any]]:
        return PaginationExecutor(self._store).execute(descriptor, self._store.bootcamps, populate=(BOOTCAMP_COURSES,))

    def get_bootcamp(self, bootcamp_id: str) -> Bootcamp:
        document = self._store.bootcamps.get(bootcamp_id)
        if document is None:
            raise not_found(bootcamp_id)
        return Bootcamp.model_validate(document)

    async def create_bootcamp(self, *, principal: Principal, payload: CreateBootcampRequest) -> Bootcamp:
        existing = self._store.bootcamps.find_one({"owner_id": principal.id})
        ensure_precondition(
            require_single_per_owner(
                principal,
                Bootcamp.model_validate(existing) if existing is not None else None,
                kind="bootcamp",
            )
        )

        document = payload.model_dump(mode="json")
        document.update(
            owner_id=principal.id,
            slug=slugify(payload.name),
            location=await self._geocode_address(payload.address),
            average_cost=None,
            average_rating=None,
            photo=DEFAULT_PHOTO,
        )
        record = self._store.bootcamps.insert(document)
        logger.info(
            "bootcamp.created bootcamp_id=%s owner_id=%s",
            record["id"],
            safe_log_identifier(principal.id, prefix="pid"),
        )
        return Bootcamp.model_validate(record)

    async def update_bootcamp(
        self,
        *,
        principal: Principal,
        bootcamp_id: str,
        payload: UpdateBootcampRequest,
    ) -> Bootcamp:
        bootcamp = self.get_bootcamp(bootcamp_id)
        ensure_allowed(authorize(principal, bootcamp, Action.UPDATE))

        changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if "name" in changes:
            changes["slug"] = slugify(changes["name"])
        if "address" in changes and changes["address"] != bootcamp.address:
            changes["location"] = await self._geocode_address(changes["address"])

        record = self._store.bootcamps.update(bootcamp.id, changes)
        if record is None:
            raise not_found(bootcamp_id)
        logger.info("bootcamp.updated bootcamp_id=%s fields=%s", bootcamp.id, ",".join(sorted(changes)))
        return Bootcamp.model_validate(record)

    def delete_bootcamp(self, *, principal: Principal, bootcamp_id: str) -> None:
        bootcamp = self.get_bootcamp(bootcamp_id)
        ensure_allowed(authorize(principal, bootcamp, Action.DELETE))

        removed_courses = self._store.courses.delete_many({"bootcamp_id": bootcamp.id})
        removed_reviews = self._store.reviews.delete_many({"bootcamp_id": bootcamp.id})
        self._store.bootcamps.delete(bootcamp.id)
        logger.info(
            "bootcamp.deleted bootcamp_id=%s courses=%s reviews=%s",
            bootcamp.id,
            removed_courses,
            removed_reviews,
        )

    async def find_within_radius(self, *, zipcode: str, distance: str, unit: DistanceUnit) -> list[Bootcamp]:
        resolver = GeoResolver(self._require_geocoder())
        try:
            region = await resolver.region_for(zipcode, distance, unit)
        except InvalidDistanceError as exc:
            raise bad_request(str(exc)) from exc

        documents = self._store.bootcamps.find({"location": region.as_store_filter()})
        logger.info(
            "bootcamp.radius_search postal_code=%s radius=%.6f unit=%s matches=%s",
            safe_log_postal_code(zipcode),
            region.radius,
            unit.value,
            len(documents),
        )
        return [Bootcamp.model_validate(document) for document in documents]

    def upload_photo(
        self,
        *,
        principal: Principal,
        bootcamp_id: str,
        asset: UploadedAsset | None,
        source: BinaryIO | None,
        storage: FileStorage,
        max_size_bytes: int,
    ) -> str:
        """Authorize and validate on metadata alone; ``source`` is only read once accepted."""
        bootcamp = self.get_bootcamp(bootcamp_id)
        ensure_allowed(authorize(principal, bootcamp, Action.UPLOAD))

        outcome = validate_upload(asset, max_size_bytes, resource_id=bootcamp.id)
        if isinstance(outcome, UploadRejection):
            logger.info("bootcamp.photo_rejected bootcamp_id=%s reason=%s", bootcamp.id, outcome.value)
            raise bad_request(outcome.message(max_size_bytes), details={"rejection": outcome.value})

        if source is None:
            raise bad_request(UploadRejection.MISSING_FILE.message(max_size_bytes))
        stored_name = storage.save(outcome.value, source)
        self._store.bootcamps.update(bootcamp.id, {"photo": stored_name})
        logger.info("bootcamp.photo_uploaded bootcamp_id=%s size=%s", bootcamp.id, asset.size_bytes)
        return stored_name

    async def _geocode_address(self, address: str | None) -> dict[str, Any] | None:
        if not address or self._geocoder is None:
            return None
        location = await self._geocoder.geocode(address)
        return location.as_document()

    def _require_geocoder(self) -> Geocoder:
        if self._geocoder is None:
            raise RuntimeError("BootcampService was built without a geocoder")
        return self._geocoder


__all__ = [
    "BOOTCAMP_COURSES",
    "BootcampService",
    "refresh_average_cost",
    "refresh_average_rating",
    "slugify",
]
