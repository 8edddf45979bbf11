"""Response envelopes shared by resource routes."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from devcamper.services.pagination import Page

ItemT = TypeVar("ItemT")


class DataResponse(BaseModel, Generic[ItemT]):
    success: bool = True
    data: ItemT


class ListResponse(BaseModel, Generic[ItemT]):
    success: bool = True
    count: int
    data: list[ItemT]


class PageLinkModel(BaseModel):
    page: int = Field(ge=1)
    limit: int = Field(ge=1)


class PageResponse(BaseModel):
    """Paginated list; ``data`` items may be partial when ``select`` was used."""

    success: bool = True
    count: int
    total: int
    pagination: dict[str, PageLinkModel]
    data: list[dict[str, Any]]

    @classmethod
    def from_page(cls, page: Page[dict[str, Any]]) -> "PageResponse":
        return cls(
            count=page.count,
            total=page.total,
            pagination={key: PageLinkModel(**link) for key, link in page.pagination().items()},
            data=page.items,
        )


class DeletedResponse(BaseModel):
    success: bool = True
    data: dict[str, Any] = Field(default_factory=dict)
