"""
Session token service.

Issues and verifies HMAC-signed JWTs carrying the identity and role
claims. Tokens are not stored server-side; every request re-verifies them.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ExpiredTokenError, InvalidTokenError
from .models import TokenClaims, TokenSubject

logger = logging.getLogger(__name__)


class TokenService:
    """
    Service for session token creation and verification.

    The signing secret is fixed for the lifetime of the instance.
    """

    DEFAULT_TTL = timedelta(hours=8)
    REQUIRED_CLAIMS = ["sub", "username", "account_number", "role", "iat", "exp"]

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        algorithm: str = "HS256",
    ):
        """
        Initialize the token service.

        Args:
            secret: Secret key for signing tokens
            ttl: Default token lifetime
            algorithm: HMAC algorithm used for signing

        Raises:
            ValueError: If the secret is empty
        """
        if not secret:
            raise ValueError("JWT secret cannot be empty")

        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, subject: TokenSubject, ttl: Optional[timedelta] = None) -> str:
        """
        Issue a signed token for a subject.

        Args:
            subject: Identity claims to embed
            ttl: Lifetime override; defaults to the service's TTL

        Returns:
            The encoded token string
        """
        now = datetime.now(timezone.utc)
        expires = now + (ttl if ttl is not None else self._ttl)

        payload = {
            "sub": subject.id,
            "username": subject.username,
            "account_number": subject.account_number,
            "role": subject.role,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a token and return its claims.

        Raises:
            ExpiredTokenError: If the expiry has elapsed
            InvalidTokenError: If the token is malformed, tampered with,
                signed with another secret, or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": self.REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidTokenError()

        try:
            return TokenClaims(
                id=payload["sub"],
                username=payload["username"],
                account_number=payload["account_number"],
                role=payload["role"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (PydanticValidationError, TypeError, ValueError, OverflowError) as e:
            logger.debug(f"Token claims rejected: {e}")
            raise InvalidTokenError()
