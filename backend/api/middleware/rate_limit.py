"""
Request rate limiting middleware.

Fixed-window limits per client IP: a global limit for every request and a
stricter one for the login and registration endpoints. Runs before any
route, so throttled requests never reach the auth core.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from ..models.errors import RateLimitedResponse

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    """Result of rate limit check."""

    allowed: bool
    remaining: int
    limit: int
    reset: float  # Unix timestamp
    retry_after: Optional[int] = None


class FixedWindowLimiter:
    """
    Fixed window rate limiter.

    Counts requests per key in windows of ``window`` seconds that start at
    the key's first request. Finished windows are swept at most once per
    window length, so idle keys do not accumulate.
    """

    def __init__(
        self,
        requests: int,
        window: int,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize fixed window limiter.

        Args:
            requests: Maximum requests per window
            window: Window size in seconds
        """
        self.requests = requests
        self.window = window
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = asyncio.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.window:
            return
        expired = [key for key, (start, _) in self._windows.items() if now - start >= self.window]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    async def check(self, key: str) -> RateLimitResult:
        """Count a request for the key and report whether it is allowed."""
        async with self._lock:
            now = self._clock()
            self._sweep(now)
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self.window:
                start, count = now, 0

            reset = start + self.window
            if count >= self.requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    limit=self.requests,
                    reset=reset,
                    retry_after=max(1, int(reset - now)),
                )

            count += 1
            self._windows[key] = (start, count)
            return RateLimitResult(
                allowed=True,
                remaining=self.requests - count,
                limit=self.requests,
                reset=reset,
            )


def client_ip(request: Request) -> str:
    """Best-effort client address for keying limits."""
    return request.client.host if request.client else "unknown"


def too_many_requests(message: str, next_valid: datetime, retry_after: Optional[int] = None) -> JSONResponse:
    """429 response in the API's error format."""
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
    body = RateLimitedResponse(error=message, nextValidRequestDate=next_valid)
    return JSONResponse(
        status_code=429,
        content=body.model_dump(mode="json", by_alias=True),
        headers=headers,
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply the global and auth-endpoint limits by client IP."""

    AUTH_SUFFIXES = ("/login", "/register")

    def __init__(
        self,
        app,
        global_limiter: FixedWindowLimiter,
        auth_limiter: FixedWindowLimiter,
    ):
        super().__init__(app)
        self.global_limiter = global_limiter
        self.auth_limiter = auth_limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        key = client_ip(request)

        result = await self.global_limiter.check(key)
        if result.allowed and request.url.path.rstrip("/").endswith(self.AUTH_SUFFIXES):
            result = await self.auth_limiter.check(key)

        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {key} on {request.url.path}")
            return too_many_requests(
                "Too many requests, please try again later.",
                datetime.fromtimestamp(result.reset, tz=timezone.utc),
                result.retry_after,
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return response
