"""
Error response models.

Every failure is a JSON object with a single human-readable ``error``
field; throttling responses also say when to retry.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    detail: Optional[str] = None  # only populated in debug mode


class RateLimitedResponse(BaseModel):
    """Error response for 429s."""

    error: str
    next_valid_request_date: datetime = Field(..., alias="nextValidRequestDate")
