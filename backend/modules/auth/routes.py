"""
User API endpoints.

Registration, login and the caller's own profile. Mounted under
``/api/user`` (and ``/user``).
"""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_auth_service
from api.models.errors import ErrorResponse, RateLimitedResponse
from api.middleware.auth import get_current_user
from api.middleware.rate_limit import client_ip
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserProfile,
)

router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        429: {"model": RateLimitedResponse},
    },
)
async def register(
    body: RegisterRequest,
    request: Request,
    auth: IAuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """
    Register a new customer.

    The account number is generated server-side and returned once.
    Rejected attempts count towards the client IP's lockout.
    """
    return await auth.register(body, client_ip=client_ip(request))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        429: {"model": RateLimitedResponse},
    },
)
async def login(
    body: LoginRequest,
    request: Request,
    auth: IAuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Log in with a username or account number and a password.

    Repeated failures from one IP or against one identity are locked out
    with a 429.
    """
    return await auth.login(body, client_ip=client_ip(request))


@router.get("/profile", response_model=UserProfile)
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    auth: IAuthService = Depends(get_auth_service),
) -> UserProfile:
    """Get the authenticated user's profile."""
    return auth.get_profile(user.id)
