"""Tests for the session token service."""

from datetime import timedelta

import jwt
import pytest

from modules.auth.exceptions import ExpiredTokenError, InvalidTokenError
from modules.auth.models import TokenSubject
from modules.auth.tokens import TokenService

SECRET = "token-service-test-secret-0123456789abcdef"


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret=SECRET)


@pytest.fixture
def subject() -> TokenSubject:
    return TokenSubject(
        id="user-1",
        username="jane_d",
        account_number="6200000001",
        role="customer",
    )


class TestIssueAndVerify:

    def test_round_trip_preserves_claims(self, tokens, subject):
        """Verifying a fresh token should return the issued claims."""
        claims = tokens.verify(tokens.issue(subject))
        assert claims.id == subject.id
        assert claims.username == subject.username
        assert claims.account_number == subject.account_number
        assert claims.role == subject.role

    def test_default_ttl_is_eight_hours(self, tokens, subject):
        claims = tokens.verify(tokens.issue(subject))
        assert tokens.ttl == timedelta(hours=8)
        assert claims.expires_at - claims.issued_at == timedelta(hours=8)

    def test_ttl_override(self, tokens, subject):
        claims = tokens.verify(tokens.issue(subject, ttl=timedelta(minutes=5)))
        assert claims.expires_at - claims.issued_at == timedelta(minutes=5)

    def test_expired_token(self, tokens, subject):
        """A token past its expiry should be reported as expired."""
        token = tokens.issue(subject, ttl=timedelta(seconds=-10))
        with pytest.raises(ExpiredTokenError) as exc_info:
            tokens.verify(token)
        assert exc_info.value.status_code == 403

    def test_wrong_secret_is_invalid(self, subject):
        """Tokens signed with another secret should fail verification."""
        other = TokenService(secret="a-completely-different-secret-0123456789")
        token = other.issue(subject)
        with pytest.raises(InvalidTokenError):
            TokenService(secret=SECRET).verify(token)

    def test_tampered_payload_is_invalid(self, tokens, subject):
        header, payload, signature = tokens.issue(subject).split(".")
        forged = jwt.encode(
            {"sub": "user-1", "username": "jane_d", "account_number": "6200000001",
             "role": "employee", "iat": 1, "exp": 9999999999},
            "guessed-secret-guessed-secret-guessed",
            algorithm="HS256",
        ).split(".")[1]
        with pytest.raises(InvalidTokenError):
            tokens.verify(f"{header}.{forged}.{signature}")

    def test_garbage_is_invalid(self, tokens):
        with pytest.raises(InvalidTokenError) as exc_info:
            tokens.verify("not-a-token")
        assert exc_info.value.message == "Invalid token"

    def test_missing_claims_are_invalid(self, tokens):
        """A correctly signed token without the identity claims is rejected."""
        token = jwt.encode({"sub": "user-1", "iat": 1, "exp": 9999999999}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_algorithm_none_is_rejected(self, tokens):
        token = jwt.encode(
            {"sub": "user-1", "username": "x", "account_number": "1", "role": "employee",
             "iat": 1, "exp": 9999999999},
            None,
            algorithm="none",
        )
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)


class TestConstruction:

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenService(secret="")
