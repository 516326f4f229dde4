"""
Role-based authorization guard.

Applied after authentication. Roles are compared by exact string match:
an employee is not implicitly a customer, and nothing is allowed by default.
"""

from typing import Union

from shared.models import AuthenticatedUser

from .exceptions import InsufficientPermissionsError
from .models import Role


def require_role(user: AuthenticatedUser, role: Union[Role, str]) -> AuthenticatedUser:
    """
    Check that the authenticated user holds exactly the given role.

    Returns:
        The same user, so the guard can be chained

    Raises:
        InsufficientPermissionsError: If the role claim differs
    """
    required = role.value if isinstance(role, Role) else role
    if user.role != required:
        raise InsufficientPermissionsError(required_role=required, user_role=user.role)
    return user
