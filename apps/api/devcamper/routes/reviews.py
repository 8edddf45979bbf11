"""Review routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from devcamper.domain.query import QueryDescriptor
from devcamper.routes.dependencies import ReviewerPrincipal, get_query_descriptor, get_review_service
from devcamper.schemas.common import DataResponse, DeletedResponse, ListResponse, PageResponse
from devcamper.schemas.error import ErrorResponse, ForbiddenError, NotFoundError
from devcamper.schemas.review import CreateReviewRequest, Review, UpdateReviewRequest
from devcamper.services.reviews import ReviewService

router = APIRouter(tags=["Reviews"])

_WRITE_RESPONSES = {401: {"model": ErrorResponse}, 403: {"model": ForbiddenError}, 404: {"model": NotFoundError}}


@router.get("/reviews", response_model=PageResponse)
async def list_reviews(
    descriptor: Annotated[QueryDescriptor, Depends(get_query_descriptor)],
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> PageResponse:
    return PageResponse.from_page(service.list_reviews(descriptor))


@router.get("/bootcamps/{bootcampId}/reviews", response_model=ListResponse[Review])
async def list_bootcamp_reviews(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> ListResponse[Review]:
    reviews = service.list_bootcamp_reviews(bootcamp_id)
    return ListResponse[Review](count=len(reviews), data=reviews)


@router.post(
    "/bootcamps/{bootcampId}/reviews",
    response_model=DataResponse[Review],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, **_WRITE_RESPONSES},
)
async def add_review(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    payload: CreateReviewRequest,
    principal: ReviewerPrincipal,
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> DataResponse[Review]:
    review = service.add_review(principal=principal, bootcamp_id=bootcamp_id, payload=payload)
    return DataResponse[Review](data=review)


@router.get("/reviews/{reviewId}", response_model=DataResponse[Review], responses={404: {"model": NotFoundError}})
async def get_review(
    review_id: Annotated[str, Path(alias="reviewId")],
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> DataResponse[Review]:
    return DataResponse[Review](data=service.get_review(review_id))


@router.put("/reviews/{reviewId}", response_model=DataResponse[Review], responses=_WRITE_RESPONSES)
async def update_review(
    review_id: Annotated[str, Path(alias="reviewId")],
    payload: UpdateReviewRequest,
    principal: ReviewerPrincipal,
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> DataResponse[Review]:
    review = service.update_review(principal=principal, review_id=review_id, payload=payload)
    return DataResponse[Review](data=review)


@router.delete("/reviews/{reviewId}", response_model=DeletedResponse, responses=_WRITE_RESPONSES)
async def delete_review(
    review_id: Annotated[str, Path(alias="reviewId")],
    principal: ReviewerPrincipal,
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> DeletedResponse:
    service.delete_review(principal=principal, review_id=review_id)
    return DeletedResponse()
