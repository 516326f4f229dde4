"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from datetime import datetime
from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    RateLimitError,
)


class MissingTokenError(AuthenticationError):
    """Raised when no bearer token is provided."""

    def __init__(self, message: str = "Access denied, token missing"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidTokenError(AuthenticationError):
    """Raised when a token is malformed or its signature does not verify."""

    status_code = 403

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a token's expiry has elapsed."""

    status_code = 403

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class AccountNotFoundError(NotFoundError):
    """Raised when login names an account that doesn't exist."""

    def __init__(self, message: str = "Account not found"):
        super().__init__(message, code="ACCOUNT_NOT_FOUND")


class InvalidPasswordError(AuthenticationError):
    """Raised when the password doesn't match the stored hash."""

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message, code="INVALID_PASSWORD")


class InvalidCredentialsError(AuthenticationError):
    """Raised instead of the two errors above when login errors are unified."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class UserNotFoundError(NotFoundError):
    """Raised when the authenticated user no longer exists in the store."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user lacks the required role."""

    def __init__(self, required_role: str, user_role: str):
        super().__init__(
            f"Access denied: {required_role} role required",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_role": required_role, "user_role": user_role},
        )


class RegistrationDisabledError(AuthorizationError):
    """Raised when self-service registration is turned off."""

    def __init__(self):
        super().__init__(
            "Registration is disabled. Please contact your administrator for account access.",
            code="REGISTRATION_DISABLED",
        )


class DuplicateUsernameError(ConflictError):
    """Raised when the username is already taken."""

    def __init__(self, username: str):
        super().__init__(
            "Username already taken",
            code="DUPLICATE_USERNAME",
            details={"username": username},
        )


class DuplicateAccountNumberError(ConflictError):
    """Raised when the account number is already taken."""

    def __init__(self, account_number: str):
        super().__init__(
            "Account number already in use",
            code="DUPLICATE_ACCOUNT_NUMBER",
            details={"account_number": account_number},
        )


class AccountNumberGenerationError(InternalError):
    """Raised when no unique account number was found within the retry bound."""

    def __init__(self, attempts: int):
        super().__init__(
            "Unable to generate a unique account number",
            code="ACCOUNT_NUMBER_EXHAUSTED",
            details={"attempts": attempts},
        )


class TooManyAttemptsError(RateLimitError):
    """Raised when a key is locked out after repeated failed logins."""

    def __init__(self, message: str, next_valid_request_date: datetime, key: Optional[str] = None):
        super().__init__(
            message,
            code="TOO_MANY_ATTEMPTS",
            details={"key": key} if key else None,
        )
        self.next_valid_request_date = next_valid_request_date
