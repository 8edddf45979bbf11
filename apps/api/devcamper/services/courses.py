"""Course service layer."""

from __future__ import annotations

import logging
from typing import Any

from devcamper.core.logging_safety import safe_log_identifier
from devcamper.domain.authorization import Action, authorize
from devcamper.domain.query import QueryDescriptor
from devcamper.errors import not_found
from devcamper.repositories.memory import InMemoryStore
from devcamper.schemas.auth import Principal
from devcamper.schemas.course import Course, CreateCourseRequest, UpdateCourseRequest
from devcamper.services.access import ensure_allowed
from devcamper.services.bootcamps import BootcampService, refresh_average_cost
from devcamper.services.pagination import Page, PaginationExecutor, PopulateSpec

logger = logging.getLogger(__name__)

COURSE_BOOTCAMP = PopulateSpec(
    path="bootcamp",
    collection="bootcamps",
    local_field="bootcamp_id",
    select=("name", "description"),
)


class CourseService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_courses(self, descriptor: QueryDescriptor) -> Page[dict[str, Any]]:
        return PaginationExecutor(self._store).execute(descriptor, self._store.courses, populate=(COURSE_BOOTCAMP,))

    def list_bootcamp_courses(self, bootcamp_id: str) -> list[Course]:
        documents = self._store.courses.find({"bootcamp_id": bootcamp_id})
        return [Course.model_validate(document) for document in documents]

    def get_course(self, course_id: str) -> Course:
        document = self._store.courses.get(course_id)
        if document is None:
            raise not_found(course_id)
        bootcamp = self._store.bootcamps.get(document["bootcamp_id"])
        if bootcamp is not None:
            document["bootcamp"] = {key: bootcamp.get(key) for key in ("id", "name", "description")}
        return Course.model_validate(document)

    def add_course(self, *, principal: Principal, bootcamp_id: str, payload: CreateCourseRequest) -> Course:
        bootcamp = BootcampService(self._store).get_bootcamp(bootcamp_id)
        ensure_allowed(authorize(principal, bootcamp, Action.CREATE))

        document = payload.model_dump(mode="json")
        document.update(owner_id=principal.id, bootcamp_id=bootcamp.id)
        record = self._store.courses.insert(document)
        refresh_average_cost(self._store, bootcamp.id)
        logger.info(
            "course.created course_id=%s bootcamp_id=%s owner_id=%s",
            record["id"],
            bootcamp.id,
            safe_log_identifier(principal.id, prefix="pid"),
        )
        return Course.model_validate(record)

    def update_course(self, *, principal: Principal, course_id: str, payload: UpdateCourseRequest) -> Course:
        course = self._load(course_id)
        ensure_allowed(authorize(principal, course, Action.UPDATE))

        changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        record = self._store.courses.update(course.id, changes)
        if record is None:
            raise not_found(course_id)
        if "tuition" in changes:
            refresh_average_cost(self._store, course.bootcamp_id)
        logger.info("course.updated course_id=%s fields=%s", course.id, ",".join(sorted(changes)))
        return Course.model_validate(record)

    def delete_course(self, *, principal: Principal, course_id: str) -> None:
        course = self._load(course_id)
        ensure_allowed(authorize(principal, course, Action.DELETE))

        self._store.courses.delete(course.id)
        refresh_average_cost(self._store, course.bootcamp_id)
        logger.info("course.deleted course_id=%s bootcamp_id=%s", course.id, course.bootcamp_id)

    def _load(self, course_id: str) -> Course:
        document = self._store.courses.get(course_id)
        if document is None:
            raise not_found(course_id)
        return Course.model_validate(document)


__all__ = ["COURSE_BOOTCAMP", "CourseService"]
