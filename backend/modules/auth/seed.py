"""
Pre-provisioned demo users.

Customers and employees with fixed account numbers, for deployments where
self-service registration is disabled.
"""

import logging
from dataclasses import dataclass

from .exceptions import DuplicateAccountNumberError, DuplicateUsernameError
from .interfaces import ICredentialStore, IPasswordHasher
from .models import NewUserRecord, Role, UserIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemoUser:
    name: str
    id_number: str
    username: str
    account_number: str
    password: str
    role: Role


DEMO_USERS: tuple[DemoUser, ...] = (
    DemoUser("John Customer", "9001015800081", "john_customer", "6200000001", "Customer@123", Role.CUSTOMER),
    DemoUser("Sarah Client", "8505125800082", "sarah_client", "6200000002", "Client@456", Role.CUSTOMER),
    DemoUser("Mike Payer", "9203145800083", "mike_payer", "6200000003", "Payer@789", Role.CUSTOMER),
    DemoUser("Alice Employee", "8807085800084", "alice_employee", "6200000101", "Employee@123", Role.EMPLOYEE),
    DemoUser("Bob Staff", "9112155800085", "bob_staff", "6200000102", "Staff@456", Role.EMPLOYEE),
)


def seed_users(
    store: ICredentialStore,
    hasher: IPasswordHasher,
    users: tuple[DemoUser, ...] = DEMO_USERS,
) -> list[UserIdentity]:
    """
    Create the given users, skipping any that already exist.

    Returns:
        The identities that were created by this call
    """
    created: list[UserIdentity] = []
    for user in users:
        try:
            identity = store.create(
                NewUserRecord(
                    name=user.name,
                    id_number=user.id_number,
                    username=user.username,
                    account_number=user.account_number,
                    password_hash=hasher.hash(user.password),
                    role=user.role,
                )
            )
        except (DuplicateUsernameError, DuplicateAccountNumberError):
            logger.info(f"Skipping existing user {user.username}")
            continue
        logger.info(f"Created {user.role.value}: {user.username} (account {user.account_number})")
        created.append(identity)
    return created
