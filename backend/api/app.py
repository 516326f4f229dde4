"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from modules.auth.exceptions import TooManyAttemptsError
from modules.auth.routes import router as auth_router
from modules.payments.routes import router as payments_router
from shared.config import Settings, get_settings
from shared.exceptions import PortalError

from .dependencies import ServiceContainer
from .middleware.rate_limit import FixedWindowLimiter, RateLimitMiddleware, too_many_requests
from .middleware.security import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from .models.errors import ErrorResponse
from .routes import health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings: Settings = app.state.settings
    container: ServiceContainer = app.state.container
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")

    if settings.seed_demo_users:
        from modules.auth.seed import seed_users
        created = seed_users(container.credential_store, container.password_hasher)
        logger.info(f"Seeded {len(created)} demo users")

    yield
    logger.info(f"Shutting down {settings.app_name}")


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(exclude_none=True),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Render every failure as ``{"error": ...}`` with the right status code."""

    @app.exception_handler(TooManyAttemptsError)
    async def handle_too_many_attempts(request: Request, exc: TooManyAttemptsError):
        return too_many_requests(exc.message, exc.next_valid_request_date)

    @app.exception_handler(PortalError)
    async def handle_portal_error(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return _error(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        content = ErrorResponse(
            error="Internal server error",
            detail=str(exc) if debug else None,
        )
        return JSONResponse(status_code=500, content=content.model_dump(exclude_none=True))


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the environment
        container: Pre-built service container (tests)

    Returns:
        Configured FastAPI instance

    Raises:
        RuntimeError: If no JWT secret is configured
    """
    settings = settings or get_settings()
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set before starting the API")

    app = FastAPI(
        title=settings.app_name,
        description="International payments portal API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.container = container or ServiceContainer(settings)

    app.add_middleware(
        RateLimitMiddleware,
        global_limiter=FixedWindowLimiter(settings.rate_limit_requests, settings.rate_limit_window),
        auth_limiter=FixedWindowLimiter(
            settings.auth_rate_limit_requests, settings.auth_rate_limit_window
        ),
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        SecurityHeadersMiddleware,
        hsts_max_age=settings.hsts_max_age,
        csp_exempt_paths=("/api/docs", "/api/redoc") if settings.debug else (),
    )

    # Added last so it wraps the rest and 413s and 429s carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app, debug=settings.debug)

    # Register routes; /user mirrors /api/user for dev proxies without the prefix
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_router, prefix="/api/user", tags=["user"])
    app.include_router(auth_router, prefix="/user", tags=["user"], include_in_schema=False)
    app.include_router(payments_router, prefix="/api/payment", tags=["payment"])

    return app
