"""API models package."""

from .errors import ErrorResponse, RateLimitedResponse

__all__ = [
    "ErrorResponse",
    "RateLimitedResponse",
]
