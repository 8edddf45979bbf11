"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from devcamper.errors import ApiError, UpstreamFailure
from devcamper.repositories.memory import InMemoryStore
from devcamper.routes import auth_router, bootcamps_router, courses_router, reviews_router, users_router
from devcamper.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="DevCamper API", version="1.0.0")
    app.state.store = InMemoryStore()

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(UpstreamFailure)
    async def handle_upstream_failure(request: Request, exc: UpstreamFailure) -> JSONResponse:
        logger.error(
            "upstream.failed collaborator=%s method=%s path=%s error=%s",
            exc.collaborator,
            request.method,
            request.url.path,
            exc,
        )
        payload = ErrorResponse(
            code="UPSTREAM_FAILURE",
            message=str(exc) or "Upstream collaborator failed",
            details={"collaborator": exc.collaborator, **(exc.details or {})},
        )
        return JSONResponse(status_code=502, content=payload.model_dump(mode="json"))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_, exc: RequestValidationError) -> JSONResponse:
        payload = ErrorResponse(
            code="VALIDATION_ERROR",
            message="Invalid request payload",
            details={"errors": jsonable_encoder(exc.errors())},
        )
        return JSONResponse(status_code=400, content=payload.model_dump(mode="json"))

    api_prefix = "/api/v1"
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(bootcamps_router, prefix=api_prefix)
    app.include_router(courses_router, prefix=api_prefix)
    app.include_router(reviews_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)

    return app


app = create_app()
