"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from verified token claims and made available
    to route handlers via dependency injection. It is never re-read from
    the credential store, so a role change only takes effect once the
    holder's token expires and a new one is issued.
    """

    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Unique username")
    account_number: str = Field(..., description="Unique account number")
    role: str = Field(..., description="Role claim (customer or employee)")

    issued_at: Optional[datetime] = Field(None, description="Token issue time")
    expires_at: Optional[datetime] = Field(None, description="Token expiry time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
