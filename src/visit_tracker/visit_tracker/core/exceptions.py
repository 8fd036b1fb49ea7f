from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"
    http_status = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_error"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "authorization_error"
    http_status = 403


class NotFoundError(DomainError):
    """Raised when a referenced visit, user or client does not exist."""

    kind = "not_found"
    http_status = 404


class ConflictError(DomainError):
    """Raised when a write collides with existing state (e.g. a second open visit)."""

    kind = "conflict"
    http_status = 409


class InvalidStateError(DomainError):
    """Raised when a transition is attempted outside its source state."""

    kind = "invalid_state"
    http_status = 409


class ExternalServiceError(DomainError):
    """Raised when a remote collaborator (geocoding, SMTP) fails."""

    kind = "external_service_error"
    http_status = 502

    def __init__(self, message: str, *, upstream_status: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.details = details


class GeocodingNoResultError(ExternalServiceError):
    """The geocoder answered but had nothing for the query."""

    kind = "no_result"
    http_status = 404
