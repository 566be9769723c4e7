"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..errors import (
    AuthenticationError,
    BackendUnavailableError,
    ChecklistError,
    GeocodingError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

_STATUS_BY_ERROR: tuple[tuple[type[ChecklistError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (BackendUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (GeocodingError, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(exc: ChecklistError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)
