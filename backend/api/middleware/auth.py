"""
Bearer token authentication and role guards.

Extracts the token from ``Authorization: Bearer <token>``, verifies it,
and exposes the caller's identity to route handlers.
"""

from typing import Optional, Union
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import MissingTokenError
from modules.auth.guards import require_role
from modules.auth.interfaces import IAuthService
from modules.auth.models import Role
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service

# Bearer token extractor; a missing or non-Bearer header yields None
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Missing or malformed header -> 401; invalid or expired token -> 403.
    The verified identity is also attached to ``request.state.user``.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    user = auth.authenticate(credentials.credentials)
    request.state.user = user
    return user


def role_required(role: Union[Role, str]):
    """
    Build a dependency that authenticates and then requires a role.

    Usage:
        @router.get("/pending")
        async def pending(user: AuthenticatedUser = Depends(role_required(Role.EMPLOYEE))):
            ...
    """

    async def dependency(
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        return require_role(user, role)

    return dependency


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
RequireCustomer = Depends(role_required(Role.CUSTOMER))
RequireEmployee = Depends(role_required(Role.EMPLOYEE))
