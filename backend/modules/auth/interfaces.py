"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. This lets the credential store be swapped between the
in-memory and Supabase backends and makes the service easy to test.
"""

from datetime import timedelta
from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    LoginRequest,
    LoginResponse,
    NewUserRecord,
    RegisterRequest,
    RegisterResponse,
    TokenClaims,
    TokenSubject,
    UserIdentity,
    UserProfile,
)


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Lookup and creation of user identities.

    Lookups return None on a miss. ``create`` must enforce username and
    account number uniqueness atomically and raise
    DuplicateUsernameError / DuplicateAccountNumberError on violation.
    """

    def find_by_id(self, user_id: str) -> Optional[UserIdentity]:
        ...

    def find_by_username(self, username: str) -> Optional[UserIdentity]:
        ...

    def find_by_account_number(self, account_number: str) -> Optional[UserIdentity]:
        ...

    def exists_by_account_number(self, account_number: str) -> bool:
        ...

    def create(self, record: NewUserRecord) -> UserIdentity:
        ...


@runtime_checkable
class IPasswordHasher(Protocol):
    """Salted, peppered one-way password hashing."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...


@runtime_checkable
class ITokenService(Protocol):
    """Issue and verify signed, time-bound session tokens."""

    def issue(self, subject: TokenSubject, ttl: Optional[timedelta] = None) -> str:
        ...

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a token's signature and expiry.

        Raises:
            InvalidTokenError: Signature mismatch, parse failure or bad claims
            ExpiredTokenError: The token's expiry has elapsed
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to the API layer. Implementations must provide all these methods.
    """

    async def login(self, request: LoginRequest, client_ip: str) -> LoginResponse:
        """
        Verify credentials and issue a session token.

        Raises:
            ValidationError: Malformed input
            TooManyAttemptsError: The IP or identity is locked out
            AccountNotFoundError: No such username / account number
            InvalidPasswordError: Password mismatch
        """
        ...

    async def register(self, request: RegisterRequest, client_ip: str) -> RegisterResponse:
        """
        Register a new customer with a generated account number.

        Raises:
            RegistrationDisabledError: Registration is turned off
            ValidationError: Malformed input or password mismatch
            DuplicateUsernameError: Username already taken
            AccountNumberGenerationError: No unique account number found
            TooManyAttemptsError: The IP is locked out
        """
        ...

    def authenticate(self, token: str) -> AuthenticatedUser:
        """Verify a bearer token and build the request context."""
        ...

    def get_profile(self, user_id: str) -> UserProfile:
        ...
