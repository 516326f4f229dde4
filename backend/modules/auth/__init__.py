"""
Authentication module.

Handles credential verification, token issuance/verification, role
guards and brute-force protection.

Public API:
- IAuthService / ICredentialStore / IPasswordHasher / ITokenService
- AuthService, TokenService, PasswordHasher, BruteForceLimiter
- Credential stores: InMemoryCredentialStore, SupabaseCredentialStore
- require_role guard
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService, ICredentialStore, IPasswordHasher, ITokenService
from .models import (
    Role,
    UserIdentity,
    NewUserRecord,
    TokenSubject,
    TokenClaims,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserProfile,
)
from .exceptions import (
    MissingTokenError,
    InvalidTokenError,
    ExpiredTokenError,
    AccountNotFoundError,
    InvalidPasswordError,
    InvalidCredentialsError,
    UserNotFoundError,
    InsufficientPermissionsError,
    RegistrationDisabledError,
    DuplicateUsernameError,
    DuplicateAccountNumberError,
    AccountNumberGenerationError,
    TooManyAttemptsError,
)
from .brute_force import BruteForceLimiter, BruteForceCounter
from .guards import require_role
from .passwords import PasswordHasher
from .service import AuthService, generate_account_number
from .store import InMemoryCredentialStore, SupabaseCredentialStore, create_credential_store
from .tokens import TokenService

__all__ = [
    # Interfaces
    "IAuthService",
    "ICredentialStore",
    "IPasswordHasher",
    "ITokenService",
    # Models
    "Role",
    "UserIdentity",
    "NewUserRecord",
    "TokenSubject",
    "TokenClaims",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "UserProfile",
    # Exceptions
    "MissingTokenError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "AccountNotFoundError",
    "InvalidPasswordError",
    "InvalidCredentialsError",
    "UserNotFoundError",
    "InsufficientPermissionsError",
    "RegistrationDisabledError",
    "DuplicateUsernameError",
    "DuplicateAccountNumberError",
    "AccountNumberGenerationError",
    "TooManyAttemptsError",
    # Services
    "AuthService",
    "TokenService",
    "PasswordHasher",
    "BruteForceLimiter",
    "BruteForceCounter",
    "require_role",
    "generate_account_number",
    # Stores
    "InMemoryCredentialStore",
    "SupabaseCredentialStore",
    "create_credential_store",
]
