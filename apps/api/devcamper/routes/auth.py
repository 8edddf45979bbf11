"""Auth routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from devcamper.routes.dependencies import get_authenticated_principal
from devcamper.schemas.auth import Principal
from devcamper.schemas.common import DataResponse
from devcamper.schemas.error import ErrorResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=DataResponse[Principal], responses={401: {"model": ErrorResponse}})
async def get_me(
    principal: Annotated[Principal, Depends(get_authenticated_principal)],
) -> DataResponse[Principal]:
    return DataResponse[Principal](data=principal)
