"""Application exception types."""

from typing import Any

from devcamper.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class UpstreamFailure(Exception):
    """Raised by an external collaborator (store, geocoder, file sink).

    These propagate untouched through services and are mapped to a 502 by the
    app-level handler.
    """

    collaborator = "upstream"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.details = details
        super().__init__(message)


def not_found(resource_id: str | None = None) -> ApiError:
    message = f"Resource not found with id of {resource_id}" if resource_id else "Resource not found"
    return ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message=message)


def unauthorized(message: str = "Not authorized to access this route") -> ApiError:
    return ApiError(status_code=401, code="UNAUTHORIZED", message=message)


def forbidden(message: str, details: dict | None = None) -> ApiError:
    return ApiError(status_code=403, code="FORBIDDEN", message=message, details=details)


def bad_request(message: str = "Bad request", details: dict | None = None) -> ApiError:
    return ApiError(status_code=400, code="BAD_REQUEST", message=message, details=details)


__all__ = ["ApiError", "UpstreamFailure", "bad_request", "forbidden", "not_found", "unauthorized"]
