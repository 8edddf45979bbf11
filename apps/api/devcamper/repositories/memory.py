"""In-memory document store used by the API and tests.

Collections hold plain ``dict`` documents keyed by ``id`` and understand the
small Mongo-style filter dialect the query pipeline renders: ``$eq``, ``$gt``,
``$gte``, ``$lt``, ``$lte``, ``$in`` and ``$geoWithin``/``$centerSphere``.
Query-string values arrive as text, so comparisons cast the filter value to the
type of the stored value the way an ODM casts against its schema.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from devcamper.errors import UpstreamFailure

_MISSING = object()


class StorageError(UpstreamFailure):
    """Raised when a store operation fails."""

    collaborator = "storage"


def _new_document_id() -> str:
    return uuid4().hex[:24]


def _resolve_path(document: Mapping[str, Any], path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _cast_like(value: Any, reference: Any) -> Any:
    """Cast a filter value to the type of the stored value it is compared with."""
    if isinstance(reference, bool):
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"true", "1"}:
                return True
            if lowered in {"false", "0"}:
                return False
        return value
    if isinstance(reference, (int, float)) and isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return value
        return int(number) if isinstance(reference, int) and number.is_integer() else number
    if isinstance(reference, datetime) and isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return value


def _compare(stored: Any, operator: str, expected: Any) -> bool:
    if operator == "$in":
        candidates = expected if isinstance(expected, (list, tuple, set, frozenset)) else [expected]
        return any(_compare(stored, "$eq", candidate) for candidate in candidates)
    if isinstance(stored, list):
        # Array fields match when any element matches.
        return any(_compare(element, operator, expected) for element in stored)

    expected = _cast_like(expected, stored)
    if operator == "$eq":
        return stored == expected
    try:
        if operator == "$gt":
            return stored > expected
        if operator == "$gte":
            return stored >= expected
        if operator == "$lt":
            return stored < expected
        if operator == "$lte":
            return stored <= expected
    except TypeError:
        return False
    raise StorageError(f"Unsupported filter operator {operator}")


def _angular_distance(lng1: float, lat1: float, lng2: float, lat2: float) -> float:
    """Great-circle distance in radians (haversine)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * math.asin(min(1.0, math.sqrt(a)))


def _within_center_sphere(stored: Any, spec: Mapping[str, Any]) -> bool:
    try:
        (center_lng, center_lat), radius = spec["$centerSphere"]
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError("Malformed $geoWithin filter") from exc
    if not isinstance(stored, Mapping):
        return False
    coordinates = stored.get("coordinates")
    if not coordinates or len(coordinates) != 2:
        return False
    lng, lat = coordinates
    return _angular_distance(center_lng, center_lat, lng, lat) <= radius


def _matches(document: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    for path, condition in filters.items():
        stored = _resolve_path(document, path)
        if isinstance(condition, Mapping) and any(str(key).startswith("$") for key in condition):
            for operator, expected in condition.items():
                if operator == "$geoWithin":
                    if not _within_center_sphere(stored, expected):
                        return False
                    continue
                if stored is _MISSING or stored is None:
                    return False
                if not _compare(stored, operator, expected):
                    return False
            continue
        if stored is _MISSING or not _compare(stored, "$eq", condition):
            return False
    return True


def _sort_key(value: Any) -> tuple[int, Any]:
    """Total ordering across value types, ranked the way Mongo orders BSON types.

    null < numbers < strings < objects < arrays < booleans < dates. Objects and
    arrays compare element by element.
    """
    if value is _MISSING or value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (5, value)
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, Mapping):
        return (3, tuple((str(key), _sort_key(item)) for key, item in value.items()))
    if isinstance(value, (list, tuple)):
        return (4, tuple(_sort_key(item) for item in value))
    if isinstance(value, datetime):
        return (6, value.timestamp())
    return (7, (type(value).__name__, repr(value)))


def _sorted(documents: list[dict[str, Any]], sort: Sequence[tuple[str, int]]) -> list[dict[str, Any]]:
    ordered = list(documents)
    # Stable sorts applied from the least significant key keep ties in insertion order.
    for path, direction in reversed(list(sort)):
        ordered.sort(key=lambda document: _sort_key(_resolve_path(document, path)), reverse=direction < 0)
    return ordered


def _project(document: Mapping[str, Any], projection: Iterable[str] | None) -> dict[str, Any]:
    if not projection:
        return copy.deepcopy(dict(document))
    selected: dict[str, Any] = {"id": document["id"]}
    for path in projection:
        value = _resolve_path(document, path)
        if value is _MISSING:
            continue
        head, *rest = path.split(".")
        if not rest:
            selected[head] = copy.deepcopy(value)
            continue
        target = selected.setdefault(head, {})
        for part in rest[:-1]:
            target = target.setdefault(part, {})
        target[rest[-1]] = copy.deepcopy(value)
    return selected


@dataclass(slots=True)
class DocumentCollection:
    """A named set of documents with deterministic (insertion) base order."""

    name: str
    documents: dict[str, dict[str, Any]] = field(default_factory=dict)
    write_count: int = 0
    # Failpoint for tests: the next read raises StorageError with this message.
    read_failure_message: str | None = None

    def insert(self, document: Mapping[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(dict(document))
        stored.setdefault("id", _new_document_id())
        stored.setdefault("created_at", datetime.now(UTC))
        if stored["id"] in self.documents:
            raise StorageError(f"Duplicate id {stored['id']} in {self.name}")
        self.documents[stored["id"]] = stored
        self.write_count += 1
        return copy.deepcopy(stored)

    def get(self, document_id: str) -> dict[str, Any] | None:
        self._maybe_fail()
        document = self.documents.get(document_id)
        return copy.deepcopy(document) if document is not None else None

    def find(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        projection: Iterable[str] | None = None,
        sort: Sequence[tuple[str, int]] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self._maybe_fail()
        matched = [document for document in self.documents.values() if _matches(document, filters or {})]
        ordered = _sorted(matched, sort)
        end = None if limit is None else skip + limit
        return [_project(document, projection) for document in ordered[skip:end]]

    def find_one(self, filters: Mapping[str, Any]) -> dict[str, Any] | None:
        found = self.find(filters, limit=1)
        return found[0] if found else None

    def count(self, filters: Mapping[str, Any] | None = None) -> int:
        self._maybe_fail()
        return sum(1 for document in self.documents.values() if _matches(document, filters or {}))

    def average(self, path: str, filters: Mapping[str, Any] | None = None) -> float | None:
        """Mean of a numeric field over matching documents, ``None`` when nothing matches."""
        self._maybe_fail()
        values = [
            value
            for document in self.documents.values()
            if _matches(document, filters or {})
            for value in [_resolve_path(document, path)]
            if isinstance(value, (int, float)) and not isinstance(value, bool)
        ]
        if not values:
            return None
        return sum(values) / len(values)

    def update(self, document_id: str, changes: Mapping[str, Any]) -> dict[str, Any] | None:
        document = self.documents.get(document_id)
        if document is None:
            return None
        for key, value in changes.items():
            if key in {"id", "created_at"}:
                continue
            document[key] = copy.deepcopy(value)
        self.write_count += 1
        return copy.deepcopy(document)

    def delete(self, document_id: str) -> bool:
        if self.documents.pop(document_id, None) is None:
            return False
        self.write_count += 1
        return True

    def delete_many(self, filters: Mapping[str, Any]) -> int:
        doomed = [document_id for document_id, document in self.documents.items() if _matches(document, filters)]
        for document_id in doomed:
            del self.documents[document_id]
        self.write_count += len(doomed)
        return len(doomed)

    def _maybe_fail(self) -> None:
        if self.read_failure_message is None:
            return
        message = self.read_failure_message
        self.read_failure_message = None
        raise StorageError(message, details={"collection": self.name})


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic document store for the API and tests."""

    bootcamps: DocumentCollection = field(default_factory=lambda: DocumentCollection("bootcamps"))
    courses: DocumentCollection = field(default_factory=lambda: DocumentCollection("courses"))
    reviews: DocumentCollection = field(default_factory=lambda: DocumentCollection("reviews"))
    users: DocumentCollection = field(default_factory=lambda: DocumentCollection("users"))

    def collection(self, name: str) -> DocumentCollection:
        found = getattr(self, name, None)
        if not isinstance(found, DocumentCollection):
            raise StorageError(f"Unknown collection {name}")
        return found


__all__ = ["DocumentCollection", "InMemoryStore", "StorageError"]
