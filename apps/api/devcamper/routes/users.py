"""User administration routes (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from devcamper.domain.query import QueryDescriptor
from devcamper.routes.dependencies import AdminPrincipal, get_query_descriptor, get_user_service
from devcamper.schemas.common import DataResponse, DeletedResponse, PageResponse
from devcamper.schemas.error import ErrorResponse, ForbiddenError, NotFoundError
from devcamper.schemas.user import CreateUserRequest, UpdateUserRequest, User
from devcamper.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])

_ADMIN_RESPONSES = {401: {"model": ErrorResponse}, 403: {"model": ForbiddenError}}


@router.get("", response_model=PageResponse, responses=_ADMIN_RESPONSES)
async def list_users(
    _: AdminPrincipal,
    descriptor: Annotated[QueryDescriptor, Depends(get_query_descriptor)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> PageResponse:
    return PageResponse.from_page(service.list_users(descriptor))


@router.post("", response_model=DataResponse[User], status_code=status.HTTP_201_CREATED, responses=_ADMIN_RESPONSES)
async def create_user(
    payload: CreateUserRequest,
    _: AdminPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> DataResponse[User]:
    return DataResponse[User](data=service.create_user(payload))


@router.get("/{userId}", response_model=DataResponse[User], responses={**_ADMIN_RESPONSES, 404: {"model": NotFoundError}})
async def get_user(
    user_id: Annotated[str, Path(alias="userId")],
    _: AdminPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> DataResponse[User]:
    return DataResponse[User](data=service.get_user(user_id))


@router.put("/{userId}", response_model=DataResponse[User], responses={**_ADMIN_RESPONSES, 404: {"model": NotFoundError}})
async def update_user(
    user_id: Annotated[str, Path(alias="userId")],
    payload: UpdateUserRequest,
    _: AdminPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> DataResponse[User]:
    return DataResponse[User](data=service.update_user(user_id=user_id, payload=payload))


@router.delete("/{userId}", response_model=DeletedResponse, responses={**_ADMIN_RESPONSES, 404: {"model": NotFoundError}})
async def delete_user(
    user_id: Annotated[str, Path(alias="userId")],
    _: AdminPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> DeletedResponse:
    service.delete_user(user_id)
    return DeletedResponse()
