"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface. Request and response
bodies use camelCase on the wire to match the frontend.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    """User roles. There is no hierarchy between them."""

    CUSTOMER = "customer"
    EMPLOYEE = "employee"


class CamelModel(BaseModel):
    """Base for API bodies serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Stored identity
# -----------------------------------------------------------------------------


class NewUserRecord(BaseModel):
    """A user identity about to be persisted (no ID yet)."""

    name: str
    id_number: str
    username: str
    account_number: str
    password_hash: str
    role: Role = Role.CUSTOMER


class UserIdentity(NewUserRecord):
    """
    A persisted user identity.

    The password hash is bcrypt output over password + pepper; the salt is
    embedded in the hash, the pepper is not stored anywhere.
    """

    id: str = Field(..., description="User ID")
    created_at: datetime = Field(..., description="Creation time")

    model_config = {"frozen": True}


# -----------------------------------------------------------------------------
# Token claims
# -----------------------------------------------------------------------------


class TokenSubject(BaseModel):
    """Identity claims carried inside a session token."""

    id: str
    username: str
    account_number: str
    role: str

    model_config = {"frozen": True}


class TokenClaims(TokenSubject):
    """Verified token claims, including the timing fields."""

    issued_at: datetime
    expires_at: datetime


# -----------------------------------------------------------------------------
# API bodies
# -----------------------------------------------------------------------------


class LoginRequest(CamelModel):
    """Login with exactly one of username / account number, plus password."""

    username: Optional[str] = None
    account_number: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(CamelModel):
    """Successful login: the token plus minimal profile fields."""

    message: str = "Login successful"
    token: str
    role: str
    username: str
    account_number: str


class RegisterRequest(CamelModel):
    """Self-service registration. New users always get the customer role."""

    name: Optional[str] = None
    id_number: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class RegisterResponse(CamelModel):
    """Successful registration with the generated account number."""

    message: str = "User registered successfully"
    account_number: str


class UserProfile(CamelModel):
    """Profile returned to the owner; never includes the password hash."""

    id: str
    name: str
    id_number: str
    username: str
    account_number: str
    role: Role
    created_at: datetime

    @classmethod
    def from_identity(cls, identity: UserIdentity) -> "UserProfile":
        return cls(
            id=identity.id,
            name=identity.name,
            id_number=identity.id_number,
            username=identity.username,
            account_number=identity.account_number,
            role=identity.role,
            created_at=identity.created_at,
        )
