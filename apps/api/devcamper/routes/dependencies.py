"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Annotated, Any
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from devcamper.adapters.auth import (
    AuthVerificationError,
    FirebaseTokenVerifier,
    MockTokenVerifier,
    TokenVerifier,
)
from devcamper.adapters.geocoding import Geocoder, MapQuestGeocoder, StaticGeocoder
from devcamper.adapters.storage import FileStorage, LocalFileStorage
from devcamper.core.config import Settings, get_settings
from devcamper.core.logging_safety import safe_log_identifier
from devcamper.domain.authorization import require_role
from devcamper.domain.query import QueryDescriptor, parse_query
from devcamper.errors import unauthorized
from devcamper.repositories.memory import InMemoryStore
from devcamper.schemas.auth import Principal, Role
from devcamper.services.access import ensure_allowed
from devcamper.services.bootcamps import BootcampService
from devcamper.services.courses import CourseService
from devcamper.services.reviews import ReviewService
from devcamper.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id") or f"req-{uuid4()}"
    request.state.correlation_id = correlation_id
    return correlation_id


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "firebase":
        return FirebaseTokenVerifier(
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
        )
    return MockTokenVerifier()


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> Principal:
    """Validate bearer token and attach the principal to request context."""
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise unauthorized("Invalid or missing bearer token")

    try:
        principal = verifier.verify_token(credentials.credentials)
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise unauthorized(str(exc) or "Invalid bearer token") from exc

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.id, prefix="pid"),
        principal.role.value,
    )
    request.state.auth_principal = principal
    return principal


def require_roles(*roles: Role) -> Callable[..., Coroutine[Any, Any, Principal]]:
    """Route guard: authenticated principal whose role is one of ``roles``."""

    async def _guard(principal: Annotated[Principal, Depends(get_authenticated_principal)]) -> Principal:
        ensure_allowed(require_role(principal, roles))
        return principal

    return _guard


PublisherPrincipal = Annotated[Principal, Depends(require_roles(Role.PUBLISHER, Role.ADMIN))]
ReviewerPrincipal = Annotated[Principal, Depends(require_roles(Role.USER, Role.ADMIN))]
AdminPrincipal = Annotated[Principal, Depends(require_roles(Role.ADMIN))]


def get_query_descriptor(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> QueryDescriptor:
    return parse_query(
        request.query_params.multi_items(),
        default_limit=settings.default_page_limit,
        max_limit=settings.max_page_limit,
    )


def get_geocoder(settings: Annotated[Settings, Depends(get_settings)]) -> Geocoder:
    if settings.geocoder_provider == "static":
        if settings.geocoder_static_table is None:
            return StaticGeocoder()
        return StaticGeocoder.from_file(settings.geocoder_static_table)
    return MapQuestGeocoder(
        api_key=settings.geocoder_api_key,
        base_url=settings.geocoder_base_url,
        timeout=settings.geocoder_timeout_seconds,
    )


def get_file_storage(settings: Annotated[Settings, Depends(get_settings)]) -> FileStorage:
    return LocalFileStorage(settings.file_upload_path)


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_bootcamp_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    geocoder: Annotated[Geocoder, Depends(get_geocoder)],
) -> BootcampService:
    return BootcampService(store, geocoder)


def get_course_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> CourseService:
    return CourseService(store)


def get_review_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ReviewService:
    return ReviewService(store)


def get_user_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> UserService:
    return UserService(store)
