"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

One container is created per application by ``create_app`` and kept on
``app.state``; route dependencies read it from the request, so nothing
here is a module-level singleton.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from fastapi import Depends, Request

from shared.config import Settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.brute_force import BruteForceLimiter
    from modules.auth.interfaces import (
        IAuthService,
        ICredentialStore,
        IPasswordHasher,
        ITokenService,
    )
    from modules.payments.interfaces import IPaymentService


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached for the
    lifetime of the container.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._db: Any = None
        self._credential_store: "ICredentialStore | None" = None
        self._password_hasher: "IPasswordHasher | None" = None
        self._token_service: "ITokenService | None" = None
        self._ip_limiter: "BruteForceLimiter | None" = None
        self._identity_limiter: "BruteForceLimiter | None" = None
        self._auth_service: "IAuthService | None" = None
        self._payment_service: "IPaymentService | None" = None

    @property
    def db(self):
        """Get the Supabase client (only created for the supabase store)."""
        if self._db is None:
            from shared.database import create_supabase_client
            self._db = create_supabase_client(self.settings)
        return self._db

    @property
    def credential_store(self) -> "ICredentialStore":
        """Get the configured credential store."""
        if self._credential_store is None:
            from modules.auth.store import create_credential_store
            backend = self.settings.credential_store
            self._credential_store = create_credential_store(
                backend,
                db=self.db if backend == "supabase" else None,
            )
        return self._credential_store

    @property
    def password_hasher(self) -> "IPasswordHasher":
        """Get the password hasher."""
        if self._password_hasher is None:
            from modules.auth.passwords import PasswordHasher
            self._password_hasher = PasswordHasher(
                pepper=self.settings.password_pepper,
                rounds=self.settings.bcrypt_rounds,
            )
        return self._password_hasher

    @property
    def token_service(self) -> "ITokenService":
        """Get the token service."""
        if self._token_service is None:
            from modules.auth.tokens import TokenService
            self._token_service = TokenService(
                secret=self.settings.jwt_secret,
                ttl=timedelta(seconds=self.settings.token_ttl_seconds),
                algorithm=self.settings.jwt_algorithm,
            )
        return self._token_service

    @property
    def ip_limiter(self) -> "BruteForceLimiter":
        """Get the per-IP brute-force limiter."""
        if self._ip_limiter is None:
            from modules.auth.brute_force import BruteForceLimiter
            s = self.settings
            self._ip_limiter = BruteForceLimiter(
                free_retries=s.brute_force_ip_free_retries,
                min_wait=timedelta(seconds=s.brute_force_ip_min_wait),
                max_wait=timedelta(seconds=s.brute_force_ip_max_wait),
                lifetime=timedelta(seconds=s.brute_force_lifetime),
                message="Too many failed attempts. Please try again later.",
            )
        return self._ip_limiter

    @property
    def identity_limiter(self) -> "BruteForceLimiter":
        """Get the per-username / account number brute-force limiter."""
        if self._identity_limiter is None:
            from modules.auth.brute_force import BruteForceLimiter
            s = self.settings
            self._identity_limiter = BruteForceLimiter(
                free_retries=s.brute_force_identity_free_retries,
                min_wait=timedelta(seconds=s.brute_force_identity_min_wait),
                max_wait=timedelta(seconds=s.brute_force_identity_max_wait),
                lifetime=timedelta(seconds=s.brute_force_lifetime),
                message="Account temporarily locked due to too many failed login attempts.",
            )
        return self._identity_limiter

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            s = self.settings
            self._auth_service = AuthService(
                store=self.credential_store,
                hasher=self.password_hasher,
                tokens=self.token_service,
                ip_limiter=self.ip_limiter,
                identity_limiter=self.identity_limiter,
                registration_enabled=s.registration_enabled,
                generic_login_errors=s.generic_login_errors,
                account_number_length=s.account_number_length,
                account_number_max_attempts=s.account_number_max_attempts,
            )
        return self._auth_service

    @property
    def payments(self) -> "IPaymentService":
        """Get the payment service instance."""
        if self._payment_service is None:
            from modules.payments.service import PaymentService
            self._payment_service = PaymentService()
        return self._payment_service


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency for the application's service container."""
    return request.app.state.container


def get_auth_service(
    container: ServiceContainer = Depends(get_container),
) -> "IAuthService":
    """FastAPI dependency for auth service."""
    return container.auth


def get_payment_service(
    container: ServiceContainer = Depends(get_container),
) -> "IPaymentService":
    """FastAPI dependency for payment service."""
    return container.payments
