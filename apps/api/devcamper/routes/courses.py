"""Course routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from devcamper.domain.query import QueryDescriptor
from devcamper.routes.dependencies import PublisherPrincipal, get_course_service, get_query_descriptor
from devcamper.schemas.common import DataResponse, DeletedResponse, ListResponse, PageResponse
from devcamper.schemas.course import Course, CreateCourseRequest, UpdateCourseRequest
from devcamper.schemas.error import ErrorResponse, ForbiddenError, NotFoundError
from devcamper.services.courses import CourseService

router = APIRouter(tags=["Courses"])

_WRITE_RESPONSES = {401: {"model": ErrorResponse}, 403: {"model": ForbiddenError}, 404: {"model": NotFoundError}}


@router.get("/courses", response_model=PageResponse)
async def list_courses(
    descriptor: Annotated[QueryDescriptor, Depends(get_query_descriptor)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> PageResponse:
    return PageResponse.from_page(service.list_courses(descriptor))


@router.get("/bootcamps/{bootcampId}/courses", response_model=ListResponse[Course])
async def list_bootcamp_courses(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> ListResponse[Course]:
    courses = service.list_bootcamp_courses(bootcamp_id)
    return ListResponse[Course](count=len(courses), data=courses)


@router.post(
    "/bootcamps/{bootcampId}/courses",
    response_model=DataResponse[Course],
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_RESPONSES,
)
async def add_course(
    bootcamp_id: Annotated[str, Path(alias="bootcampId")],
    payload: CreateCourseRequest,
    principal: PublisherPrincipal,
    service: Annotated[CourseService, Depends(get_course_service)],
) -> DataResponse[Course]:
    course = service.add_course(principal=principal, bootcamp_id=bootcamp_id, payload=payload)
    return DataResponse[Course](data=course)


@router.get("/courses/{courseId}", response_model=DataResponse[Course], responses={404: {"model": NotFoundError}})
async def get_course(
    course_id: Annotated[str, Path(alias="courseId")],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> DataResponse[Course]:
    return DataResponse[Course](data=service.get_course(course_id))


@router.put("/courses/{courseId}", response_model=DataResponse[Course], responses=_WRITE_RESPONSES)
async def update_course(
    course_id: Annotated[str, Path(alias="courseId")],
    payload: UpdateCourseRequest,
    principal: PublisherPrincipal,
    service: Annotated[CourseService, Depends(get_course_service)],
) -> DataResponse[Course]:
    course = service.update_course(principal=principal, course_id=course_id, payload=payload)
    return DataResponse[Course](data=course)


@router.delete("/courses/{courseId}", response_model=DeletedResponse, responses=_WRITE_RESPONSES)
async def delete_course(
    course_id: Annotated[str, Path(alias="courseId")],
    principal: PublisherPrincipal,
    service: Annotated[CourseService, Depends(get_course_service)],
) -> DeletedResponse:
    service.delete_course(principal=principal, course_id=course_id)
    return DeletedResponse()
