"""Review service layer."""

from __future__ import annotations

import logging
from typing import Any

from devcamper.core.logging_safety import safe_log_identifier
from devcamper.domain.authorization import Action, authorize, require_single_per_owner
from devcamper.domain.query import QueryDescriptor
from devcamper.errors import not_found
from devcamper.repositories.memory import InMemoryStore
from devcamper.schemas.auth import Principal
from devcamper.schemas.bootcamp import BootcampSummary
from devcamper.schemas.review import CreateReviewRequest, Review, UpdateReviewRequest
from devcamper.services.access import ensure_allowed, ensure_precondition
from devcamper.services.bootcamps import BootcampService, refresh_average_rating
from devcamper.services.pagination import Page, PaginationExecutor, PopulateSpec

logger = logging.getLogger(__name__)

REVIEW_BOOTCAMP = PopulateSpec(
    path="bootcamp",
    collection="bootcamps",
    local_field="bootcamp_id",
    select=("name", "description"),
)


class ReviewService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_reviews(self, descriptor: QueryDescriptor) -> Page[dict[str, Any]]:
        return PaginationExecutor(self._store).execute(descriptor, self._store.reviews, populate=(REVIEW_BOOTCAMP,))

    def list_bootcamp_reviews(self, bootcamp_id: str) -> list[Review]:
        return [Review.model_validate(document) for document in self._store.reviews.find({"bootcamp_id": bootcamp_id})]

    def get_review(self, review_id: str) -> Review:
        review = self._load(review_id)
        bootcamp = self._store.bootcamps.get(review.bootcamp_id)
        if bootcamp is None:
            return review
        summary = BootcampSummary(id=bootcamp["id"], name=bootcamp.get("name"), description=bootcamp.get("description"))
        return review.model_copy(update={"bootcamp": summary})

    def add_review(self, *, principal: Principal, bootcamp_id: str, payload: CreateReviewRequest) -> Review:
        bootcamp = BootcampService(self._store).get_bootcamp(bootcamp_id)
        existing = self._store.reviews.find_one({"bootcamp_id": bootcamp.id, "owner_id": principal.id})
        ensure_precondition(
            require_single_per_owner(
                principal,
                Review.model_validate(existing) if existing is not None else None,
                kind="review for this bootcamp",
            )
        )

        document = payload.model_dump(mode="json")
        document.update(owner_id=principal.id, bootcamp_id=bootcamp.id)
        record = self._store.reviews.insert(document)
        refresh_average_rating(self._store, bootcamp.id)
        logger.info(
            "review.created review_id=%s bootcamp_id=%s owner_id=%s",
            record["id"],
            bootcamp.id,
            safe_log_identifier(principal.id, prefix="pid"),
        )
        return Review.model_validate(record)

    def update_review(self, *, principal: Principal, review_id: str, payload: UpdateReviewRequest) -> Review:
        review = self._load(review_id)
        ensure_allowed(authorize(principal, review, Action.UPDATE))

        changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        record = self._store.reviews.update(review.id, changes)
        if record is None:
            raise not_found(review_id)
        if "rating" in changes:
            refresh_average_rating(self._store, review.bootcamp_id)
        return Review.model_validate(record)

    def delete_review(self, *, principal: Principal, review_id: str) -> None:
        review = self._load(review_id)
        ensure_allowed(authorize(principal, review, Action.DELETE))

        self._store.reviews.delete(review.id)
        refresh_average_rating(self._store, review.bootcamp_id)
        logger.info("review.deleted review_id=%s bootcamp_id=%s", review.id, review.bootcamp_id)

    def _load(self, review_id: str) -> Review:
        document = self._store.reviews.get(review_id)
        if document is None:
            raise not_found(review_id)
        return Review.model_validate(document)


__all__ = ["REVIEW_BOOTCAMP", "ReviewService"]
