"""Translation of raw query-string parameters into store query descriptors.

Read endpoints are permissive: malformed paging or sorting input degrades to
the defaults instead of failing the request. Degraded values are kept as
``Defaulted`` (with the rejected raw text) so callers can still tell them apart
from values the client actually supplied.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

RESERVED_KEYS = frozenset({"select", "sort", "page", "limit"})

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100
DEFAULT_SORT_FIELD = "created_at"

_FILTER_KEY = re.compile(r"^(?P<field>[A-Za-z_][A-Za-z0-9_.]*)(?:\[(?P<operator>[a-z]+)\])?$")
# Longer digit runs are treated as malformed paging input.
_POSITIVE_INT = re.compile(r"[0-9]{1,18}")
_SORT_TOKEN = re.compile(r"^(?P<descending>-?)(?P<field>[A-Za-z_][A-Za-z0-9_.]*)$")


class FilterOperator(str, Enum):
    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"

    @property
    def store_operator(self) -> str:
        return f"${self.value}"


class SortDirection(int, Enum):
    ASCENDING = 1
    DESCENDING = -1


@dataclass(frozen=True, slots=True)
class SortField:
    field: str
    direction: SortDirection = SortDirection.ASCENDING

    @classmethod
    def parse(cls, token: str) -> SortField | None:
        match = _SORT_TOKEN.match(token.strip())
        if match is None:
            return None
        direction = SortDirection.DESCENDING if match.group("descending") else SortDirection.ASCENDING
        return cls(field=match.group("field"), direction=direction)

    def render(self) -> str:
        prefix = "-" if self.direction is SortDirection.DESCENDING else ""
        return f"{prefix}{self.field}"


DEFAULT_SORT = (SortField(DEFAULT_SORT_FIELD, SortDirection.DESCENDING),)


@dataclass(frozen=True, slots=True)
class Provided(Generic[T]):
    """A parameter the client supplied and that parsed cleanly."""

    value: T


@dataclass(frozen=True, slots=True)
class Defaulted(Generic[T]):
    """A parameter that fell back to a default.

    ``rejected`` holds the raw client input that failed to parse, or ``None``
    when the client omitted the parameter.
    """

    value: T
    rejected: str | None = None

    @property
    def omitted(self) -> bool:
        return self.rejected is None


@dataclass(frozen=True, slots=True)
class QueryDescriptor:
    filters: Mapping[str, Mapping[FilterOperator, Any]] = field(default_factory=dict)
    sort_fields: Provided[tuple[SortField, ...]] | Defaulted[tuple[SortField, ...]] = Defaulted(DEFAULT_SORT)
    select_fields: frozenset[str] = frozenset()
    page: Provided[int] | Defaulted[int] = Defaulted(DEFAULT_PAGE)
    limit: Provided[int] | Defaulted[int] = Defaulted(DEFAULT_LIMIT)

    @property
    def page_number(self) -> int:
        return self.page.value

    @property
    def page_size(self) -> int:
        return self.limit.value

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def sort(self) -> tuple[SortField, ...]:
        return self.sort_fields.value

    def as_store_filter(self) -> dict[str, dict[str, Any]]:
        """Render filters in the store's ``{"field": {"$op": value}}`` dialect."""
        return {
            field_name: {operator.store_operator: value for operator, value in conditions.items()}
            for field_name, conditions in self.filters.items()
        }

    def as_store_sort(self) -> list[tuple[str, int]]:
        return [(sort_field.field, sort_field.direction.value) for sort_field in self.sort]

    def with_filter(self, field_name: str, value: Any, operator: FilterOperator = FilterOperator.EQ) -> QueryDescriptor:
        """Return a copy with one extra filter slot, e.g. a route-scoped parent id."""
        filters = {name: dict(conditions) for name, conditions in self.filters.items()}
        filters.setdefault(field_name, {})[operator] = value
        return QueryDescriptor(
            filters=filters,
            sort_fields=self.sort_fields,
            select_fields=self.select_fields,
            page=self.page,
            limit=self.limit,
        )

    def to_params(self) -> list[tuple[str, str]]:
        """Re-derive query-string pairs that parse back into this descriptor."""
        params: list[tuple[str, str]] = []
        for field_name, conditions in self.filters.items():
            for operator, value in conditions.items():
                key = field_name if operator is FilterOperator.EQ else f"{field_name}[{operator.value}]"
                rendered = ",".join(value) if operator is FilterOperator.IN else str(value)
                params.append((key, rendered))
        if self.select_fields:
            params.append(("select", ",".join(sorted(self.select_fields))))
        params.extend(_setting_param("sort", self.sort_fields, lambda fields: ",".join(f.render() for f in fields)))
        params.extend(_setting_param("page", self.page, str))
        params.extend(_setting_param("limit", self.limit, str))
        return params


def _setting_param(
    key: str,
    setting: Provided[Any] | Defaulted[Any],
    render: Callable[[Any], str],
) -> list[tuple[str, str]]:
    if isinstance(setting, Provided):
        return [(key, render(setting.value))]
    if setting.rejected is not None:
        return [(key, setting.rejected)]
    return []


def _items(params: Mapping[str, str] | Iterable[tuple[str, str]]) -> Iterable[tuple[str, str]]:
    if isinstance(params, Mapping):
        return params.items()
    return params


def _parse_positive_int(raw: str | None, default: int) -> Provided[int] | Defaulted[int]:
    if raw is None:
        return Defaulted(default)
    text = raw.strip()
    if not _POSITIVE_INT.fullmatch(text) or int(text) < 1:
        return Defaulted(default, rejected=raw)
    return Provided(int(text))


def _parse_sort(raw: str | None) -> Provided[tuple[SortField, ...]] | Defaulted[tuple[SortField, ...]]:
    if raw is None:
        return Defaulted(DEFAULT_SORT)
    tokens = [token for token in raw.split(",") if token.strip()]
    fields = [SortField.parse(token) for token in tokens]
    if not fields or any(sort_field is None for sort_field in fields):
        return Defaulted(DEFAULT_SORT, rejected=raw)
    return Provided(tuple(fields))


def _parse_select(raw: str | None) -> frozenset[str]:
    if raw is None:
        return frozenset()
    return frozenset(name.strip() for name in raw.split(",") if name.strip())


def _cap_limit(
    limit: Provided[int] | Defaulted[int],
    raw: str | None,
    max_limit: int | None,
) -> Provided[int] | Defaulted[int]:
    if max_limit is None or limit.value <= max_limit:
        return limit
    return Defaulted(max_limit, rejected=raw)


def parse_query(
    params: Mapping[str, str] | Iterable[tuple[str, str]],
    *,
    reserved: Iterable[str] = (),
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int | None = None,
) -> QueryDescriptor:
    """Build a descriptor from raw query-string pairs. Never raises.

    ``select``, ``sort``, ``page`` and ``limit`` are control keys. Extra keys in
    ``reserved`` are dropped; neither kind ever becomes a filter. Repeated keys
    keep the last value for each (field, operator) slot.
    """
    excluded = frozenset(reserved)
    controls: dict[str, str] = {}
    filters: dict[str, dict[FilterOperator, Any]] = {}

    for key, value in _items(params):
        if key in RESERVED_KEYS:
            controls[key] = value
            continue
        if key in excluded:
            continue
        match = _FILTER_KEY.match(key)
        if match is None:
            continue
        try:
            operator = FilterOperator(match.group("operator") or FilterOperator.EQ.value)
        except ValueError:
            continue
        filters.setdefault(match.group("field"), {})[operator] = (
            tuple(value.split(",")) if operator is FilterOperator.IN else value
        )

    raw_limit = controls.get("limit")
    limit = _cap_limit(_parse_positive_int(raw_limit, default_limit), raw_limit, max_limit)
    return QueryDescriptor(
        filters=filters,
        sort_fields=_parse_sort(controls.get("sort")),
        select_fields=_parse_select(controls.get("select")),
        page=_parse_positive_int(controls.get("page"), DEFAULT_PAGE),
        limit=limit,
    )


__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "DEFAULT_SORT",
    "RESERVED_KEYS",
    "Defaulted",
    "FilterOperator",
    "Provided",
    "QueryDescriptor",
    "SortDirection",
    "SortField",
    "parse_query",
]
