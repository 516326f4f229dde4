"""
Base exception classes for the payments portal backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps them to HTTP responses through ``status_code``.
"""

from typing import Optional, Any


class PortalError(Exception):
    """
    Base exception for all portal errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging and internal APIs."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PortalError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(PortalError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(PortalError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class NotFoundError(PortalError):
    """Resource not found."""

    status_code = 404


class ConflictError(PortalError):
    """A uniqueness constraint was violated."""

    status_code = 409


class RateLimitError(PortalError):
    """Too many requests from a client or for an identity."""

    status_code = 429


class InternalError(PortalError):
    """Unexpected failure that must not leak details to the client."""

    status_code = 500


class ExternalServiceError(PortalError):
    """Error communicating with an external service."""

    status_code = 500

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
