"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Every test gets its own settings, service container and app, so no state
leaks between tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt  # PyJWT
import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer
from modules.auth.models import UserIdentity
from modules.auth.seed import seed_users
from shared.config import Settings

# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"
TEST_PEPPER = "test-pepper"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from .env, with cheap bcrypt and generous rate limits."""
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        password_pepper=TEST_PEPPER,
        bcrypt_rounds=4,
        rate_limit_requests=1000,
        auth_rate_limit_requests=1000,
    )


@pytest.fixture
def container(settings: Settings) -> ServiceContainer:
    """Fresh service container per test."""
    return ServiceContainer(settings)


@pytest.fixture
def app(settings: Settings, container: ServiceContainer):
    """Application wired to the test container."""
    return create_app(settings, container)


@pytest.fixture
def client(app) -> TestClient:
    """Test client; 500s are returned as responses, not raised."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def seeded_users(container: ServiceContainer) -> dict[str, UserIdentity]:
    """Demo users in the container's store, keyed by username."""
    created = seed_users(container.credential_store, container.password_hasher)
    return {identity.username: identity for identity in created}


@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Factory for hand-built tokens.

    Usage:
        token = make_token(role="employee", expired=True)
    """

    def _make_token(
        user_id: str = "test-user-123",
        username: str = "test_user",
        account_number: str = "1234567890",
        role: str = "customer",
        expired: bool = False,
        secret: str = TEST_JWT_SECRET,
        extra: Optional[dict] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)
        payload = {
            "sub": user_id,
            "username": username,
            "account_number": account_number,
            "role": role,
            "iat": int((now - timedelta(hours=2)).timestamp()) if expired else int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        payload.update(extra or {})
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make_token


@pytest.fixture
def customer_headers(seeded_users, make_token) -> dict[str, str]:
    """Authorization headers for the seeded customer john_customer."""
    user = seeded_users["john_customer"]
    token = make_token(
        user_id=user.id,
        username=user.username,
        account_number=user.account_number,
        role="customer",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee_headers(seeded_users, make_token) -> dict[str, str]:
    """Authorization headers for the seeded employee alice_employee."""
    user = seeded_users["alice_employee"]
    token = make_token(
        user_id=user.id,
        username=user.username,
        account_number=user.account_number,
        role="employee",
    )
    return {"Authorization": f"Bearer {token}"}
