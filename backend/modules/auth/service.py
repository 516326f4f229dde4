"""
Authentication service implementation.

Orchestrates the credential store, password hasher, token service and
brute-force limiters into the login, registration and token
authentication flows.
"""

import asyncio
import logging
import secrets
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from shared.exceptions import InternalError, PortalError, ValidationError
from shared.models import AuthenticatedUser

from .brute_force import BruteForceLimiter
from .exceptions import (
    AccountNotFoundError,
    AccountNumberGenerationError,
    DuplicateAccountNumberError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidPasswordError,
    RegistrationDisabledError,
    UserNotFoundError,
)
from .interfaces import ICredentialStore, IPasswordHasher, ITokenService
from .models import (
    LoginRequest,
    LoginResponse,
    NewUserRecord,
    RegisterRequest,
    RegisterResponse,
    Role,
    TokenSubject,
    UserIdentity,
    UserProfile,
)
from .validation import validate_login, validate_registration

logger = logging.getLogger(__name__)


def generate_account_number(length: int = 10) -> str:
    """Random account number of ``length`` digits with no leading zero."""
    first = str(secrets.randbelow(9) + 1)
    rest = "".join(str(secrets.randbelow(10)) for _ in range(length - 1))
    return first + rest


class AuthService:
    """
    Implementation of the authentication service.

    All collaborators are injected; the service holds no global state.
    """

    def __init__(
        self,
        store: ICredentialStore,
        hasher: IPasswordHasher,
        tokens: ITokenService,
        ip_limiter: Optional[BruteForceLimiter] = None,
        identity_limiter: Optional[BruteForceLimiter] = None,
        registration_enabled: bool = True,
        generic_login_errors: bool = False,
        account_number_length: int = 10,
        account_number_max_attempts: int = 10,
        account_number_factory: Optional[Callable[[], str]] = None,
    ):
        if not 8 <= account_number_length <= 20:
            raise ValueError("Account numbers must be 8-20 digits")
        if account_number_max_attempts < 1:
            raise ValueError("Need at least one account number attempt")

        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        self._ip_limiter = ip_limiter
        self._identity_limiter = identity_limiter
        self._registration_enabled = registration_enabled
        self._generic_login_errors = generic_login_errors
        self._max_attempts = account_number_max_attempts
        self._new_account_number = account_number_factory or (
            lambda: generate_account_number(account_number_length)
        )

    @contextmanager
    def _store_errors(self) -> Iterator[None]:
        """Turn unexpected store failures into an opaque InternalError."""
        try:
            yield
        except PortalError:
            raise
        except Exception as e:
            logger.exception("Credential store operation failed")
            raise InternalError("Internal server error") from e

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    async def login(self, request: LoginRequest, client_ip: str = "unknown") -> LoginResponse:
        """
        Verify credentials and issue a session token.

        The per-identity counter is keyed by user id once the account is
        found, so username and account number logins share one budget.
        """
        field, value = validate_login(request)

        if self._ip_limiter:
            self._ip_limiter.check(client_ip)

        with self._store_errors():
            if field == "username":
                user = self._store.find_by_username(value)
            else:
                user = self._store.find_by_account_number(value)

        identity_key = f"user:{user.id}" if user else f"{field}:{value}"
        if self._identity_limiter:
            self._identity_limiter.check(identity_key)

        if user is None:
            self._record_failure(client_ip, identity_key)
            logger.info(f"Login failed: no account for {field}")
            if self._generic_login_errors:
                raise InvalidCredentialsError()
            raise AccountNotFoundError()

        matched = await asyncio.to_thread(self._hasher.verify, request.password, user.password_hash)
        if not matched:
            self._record_failure(client_ip, identity_key)
            logger.info(f"Login failed: wrong password for user {user.id}")
            if self._generic_login_errors:
                raise InvalidCredentialsError()
            raise InvalidPasswordError()

        if self._ip_limiter:
            self._ip_limiter.reset(client_ip)
        if self._identity_limiter:
            self._identity_limiter.reset(identity_key)

        token = self._tokens.issue(
            TokenSubject(
                id=user.id,
                username=user.username,
                account_number=user.account_number,
                role=user.role.value,
            )
        )
        logger.info(f"Login succeeded for user {user.id} ({user.role.value})")

        return LoginResponse(
            token=token,
            role=user.role.value,
            username=user.username,
            account_number=user.account_number,
        )

    def _record_failure(self, client_ip: str, identity_key: Optional[str] = None) -> None:
        if self._ip_limiter:
            self._ip_limiter.record_failure(client_ip)
        if self._identity_limiter and identity_key:
            self._identity_limiter.record_failure(identity_key)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    async def register(self, request: RegisterRequest, client_ip: str = "unknown") -> RegisterResponse:
        """
        Register a new customer with a generated account number.

        Rejected registrations count against the client's IP in the same
        limiter as failed logins.
        """
        if not self._registration_enabled:
            raise RegistrationDisabledError()

        if self._ip_limiter:
            self._ip_limiter.check(client_ip)

        try:
            validate_registration(request)
            with self._store_errors():
                if self._store.find_by_username(request.username) is not None:
                    raise DuplicateUsernameError(request.username)
        except (ValidationError, DuplicateUsernameError):
            self._record_failure(client_ip)
            raise

        password_hash = await asyncio.to_thread(self._hasher.hash, request.password)

        identity = self._create_with_unique_account_number(request, password_hash)
        logger.info(f"Registered user {identity.id} with a new account number")
        return RegisterResponse(account_number=identity.account_number)

    def _create_with_unique_account_number(
        self,
        request: RegisterRequest,
        password_hash: str,
    ) -> UserIdentity:
        for attempt in range(1, self._max_attempts + 1):
            candidate = self._new_account_number()

            with self._store_errors():
                if self._store.exists_by_account_number(candidate):
                    continue
                try:
                    return self._store.create(
                        NewUserRecord(
                            name=request.name,
                            id_number=request.id_number,
                            username=request.username,
                            account_number=candidate,
                            password_hash=password_hash,
                            role=Role.CUSTOMER,
                        )
                    )
                except DuplicateAccountNumberError:
                    # Lost a race with a concurrent registration
                    logger.debug(f"Account number collision on attempt {attempt}, retrying")

        logger.error(f"No unique account number after {self._max_attempts} attempts")
        raise AccountNumberGenerationError(self._max_attempts)

    # -------------------------------------------------------------------------
    # Tokens and profiles
    # -------------------------------------------------------------------------

    def authenticate(self, token: str) -> AuthenticatedUser:
        """
        Verify a bearer token and build the request context.

        The store is not consulted: role changes apply once the token
        expires and a new one is issued.
        """
        claims = self._tokens.verify(token)
        return AuthenticatedUser(
            id=claims.id,
            username=claims.username,
            account_number=claims.account_number,
            role=claims.role,
            issued_at=claims.issued_at,
            expires_at=claims.expires_at,
        )

    def get_profile(self, user_id: str) -> UserProfile:
        """Get the profile of a user, without the password hash."""
        with self._store_errors():
            identity = self._store.find_by_id(user_id)
        if identity is None:
            raise UserNotFoundError(user_id)
        return UserProfile.from_identity(identity)
