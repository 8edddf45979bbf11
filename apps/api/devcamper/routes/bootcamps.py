"""Bootcamp routes."""

import os
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status

from devcamper.adapters.storage import FileStorage
from devcamper.core.config import Settings, get_settings
from devcamper.domain.geo import DistanceUnit
from devcamper.domain.query import QueryDescriptor
from devcamper.domain.uploads import UploadedAsset
from devcamper.routes.dependencies import (
    PublisherPrincipal,
    get_bootcamp_service,
    get_file_storage,
    get_query_descriptor,
)
from devcamper.schemas.bootcamp import Bootcamp, CreateBootcampRequest, UpdateBootcampRequest
from devcamper.schemas.common import DataResponse, DeletedResponse, ListResponse, PageResponse
from devcamper.schemas.error import ErrorResponse, ForbiddenError, NotFoundError, UpstreamFailureError
from devcamper.services.bootcamps import BootcampService

router = APIRouter(prefix="/bootcamps", tags=["Bootcamps"])


@router.get("", response_model=PageResponse)
async def list_bootcamps(
    descriptor: Annotated[QueryDescriptor, Depends(get_query_descriptor)],
    service: Annotated[BootcampService, Depends(get_bootcamp_service)],
) -> PageResponse:
    return PageResponse.from_page(service.list_bootcamps(descriptor))


@router.get(
    "/radius/{zipcode}/{distance}",
    response_model=ListResponse[Bootcamp],
    responses={400: {"model": ErrorResponse}, 502: {"model": UpstreamFailureError}},
)
async def list_bootcamps_in_radius(
    zipcode: str,
    distance: str,
    service: Annotated[BootcampService, Depends(get_bootcamp_service)],
    unit: Annotated[DistanceUnit, Query()] = DistanceUnit.MILES,
) -> ListResponse[Bootcamp]:
    bootcamps = await service.find_within_radius(zipcode=zipcode, distance=distance, unit=unit)
    return ListResponse[Bootcamp](count=len(bootcamps), data=bootcamps)


@router.get(
    "/{bootcampId}",
    response_model=DataResponse[Bootcamp],
    responses={404: {"model": NotFoundError}},
)
async def get_bootcamp(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    service: Annotated[BootcampService, Depends(get_bootcamp_service)],
) -> DataResponse[Bootcamp]:
    return DataResponse[Bootcamp](data=service.get_bootcamp(bootcamp_id))


@router.post(
    "",
    response_model=DataResponse[Bootcamp],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 403: {"model": ForbiddenError}},
)
async def create_bootcamp(
    payload: CreateBootcampRequest,
    principal: PublisherPrincipal,
    service: Annotated[BootcampService, Depends(get_bootcamp_service)],
) -> DataResponse[Bootcamp]:
    bootcamp = await service.create_bootcamp(principal=principal, payload=payload)
    return DataResponse[Bootcamp](data=bootcamp)


@router.put(
    "/{bootcampId}",
    response_model=DataResponse[Bootcamp],
    responses={401: {"model": ErrorResponse}, 403: {"model": ForbiddenError}, 404: {"model": NotFoundError}},
)
async def update_bootcamp(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    payload: UpdateBootcampRequest,
    principal: PublisherPrincipal,
    service: Annotated[BootcampService, Depends(get_bootcamp_service)],
) -> DataResponse[Bootcamp]:
    bootcamp = await service.update_bootcamp(principal=principal, bootcamp_id=bootcamp_id, payload=payload)
    return DataResponse[Bootcamp](data=bootcamp)


@router.delete(
    "/{bootcampId}",
    response_model=DeletedResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ForbiddenError}, 404: {"model": NotFoundError}},
)
async def delete_bootcamp(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    principal: PublisherPrincipal,
    service: Annotated[BootcampService, Depends(get_bootcamp_service)],
) -> DeletedResponse:
    service.delete_bootcamp(principal=principal, bootcamp_id=bootcamp_id)
    return DeletedResponse()


def _upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    # Measure the spooled upload without reading it.
    position = file.file.tell()
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(position)
    return size


@router.put(
    "/{bootcampId}/photo",
    response_model=DataResponse[str],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ForbiddenError},
        404: {"model": NotFoundError},
        502: {"model": UpstreamFailureError},
    },
)
async def upload_bootcamp_photo(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    principal: PublisherPrincipal,
    service: Annotated[BootcampService, Depends(get_bootcamp_service)],
    storage: Annotated[FileStorage, Depends(get_file_storage)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[str]:
    asset: UploadedAsset | None = None
    if file is not None:
        asset = UploadedAsset(
            original_name=file.filename or "",
            mime_type=file.content_type or "",
            size_bytes=_upload_size(file),
        )
        await file.seek(0)

    stored_name = service.upload_photo(
        principal=principal,
        bootcamp_id=bootcamp_id,
        asset=asset,
        source=file.file if file is not None else None,
        storage=storage,
        max_size_bytes=settings.max_file_upload_bytes,
    )
    return DataResponse[str](data=stored_name)
