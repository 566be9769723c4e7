"""Domain exceptions raised by services and translated to HTTP errors by the routes."""

from __future__ import annotations


class ChecklistError(Exception):
    """Base class for every error the service raises on purpose."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ChecklistError):
    """Input accepted by the schema but rejected by a business rule."""


class NotFoundError(ChecklistError):
    pass


class PermissionDeniedError(ChecklistError):
    pass


class AuthenticationError(ChecklistError):
    pass


class BackendUnavailableError(ChecklistError):
    """The storage backend is not configured or did not answer."""


class GeocodingError(ChecklistError):
    pass
