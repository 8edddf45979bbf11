"""Pagination executor: runs a query descriptor against a document collection."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from devcamper.domain.query import QueryDescriptor
from devcamper.repositories.memory import DocumentCollection, InMemoryStore

T = TypeVar("T")
logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PageLink:
    page: int
    limit: int


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    previous: PageLink | None = None
    next: PageLink | None = None

    @property
    def count(self) -> int:
        return len(self.items)

    def pagination(self) -> dict[str, dict[str, int]]:
        """Links for adjacent pages; keys exist only when that page exists."""
        links: dict[str, dict[str, int]] = {}
        if self.previous is not None:
            links["previous"] = {"page": self.previous.page, "limit": self.previous.limit}
        if self.next is not None:
            links["next"] = {"page": self.next.page, "limit": self.next.limit}
        return links


@dataclass(frozen=True, slots=True)
class PopulateSpec:
    """Expands a related collection inline on each item.

    With ``many=False`` the item's ``local_field`` references one related
    document's ``foreign_field`` and the match (or ``None``) is written to
    ``path``. With ``many=True`` every related document whose
    ``foreign_field`` equals the item's ``local_field`` is written as a list.
    """

    path: str
    collection: str
    local_field: str
    foreign_field: str = "id"
    select: tuple[str, ...] = field(default=())
    many: bool = False


class PaginationExecutor:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def execute(
        self,
        descriptor: QueryDescriptor,
        collection: DocumentCollection,
        populate: Sequence[PopulateSpec] = (),
    ) -> Page[dict[str, Any]]:
        store_filter = descriptor.as_store_filter()
        total = collection.count(store_filter)
        items = collection.find(
            store_filter,
            projection=sorted(descriptor.select_fields) or None,
            sort=descriptor.as_store_sort(),
            skip=descriptor.skip,
            limit=descriptor.page_size,
        )
        for spec in populate:
            self._populate(items, spec)

        page, limit = descriptor.page_number, descriptor.page_size
        result = Page(
            items=items,
            total=total,
            page=page,
            limit=limit,
            previous=PageLink(page=page - 1, limit=limit) if page > 1 else None,
            next=PageLink(page=page + 1, limit=limit) if page * limit < total else None,
        )
        logger.debug(
            "pagination.executed collection=%s page=%s limit=%s count=%s total=%s",
            collection.name,
            page,
            limit,
            result.count,
            total,
        )
        return result

    def _populate(self, items: list[dict[str, Any]], spec: PopulateSpec) -> None:
        keys = sorted({item[spec.local_field] for item in items if item.get(spec.local_field) is not None})
        related_collection = self._store.collection(spec.collection)
        projection = sorted({*spec.select, spec.foreign_field}) if spec.select else None
        related = related_collection.find({spec.foreign_field: {"$in": keys}}, projection=projection) if keys else []

        if spec.many:
            grouped: dict[Any, list[dict[str, Any]]] = {}
            for document in related:
                grouped.setdefault(document.get(spec.foreign_field), []).append(document)
            for item in items:
                item[spec.path] = grouped.get(item.get(spec.local_field), [])
            return

        by_key = {document.get(spec.foreign_field): document for document in related}
        for item in items:
            if spec.local_field in item:
                item[spec.path] = by_key.get(item[spec.local_field])


__all__ = ["Page", "PageLink", "PaginationExecutor", "PopulateSpec"]
