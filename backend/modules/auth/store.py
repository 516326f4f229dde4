"""
Credential store implementations.

Provides an in-memory store (single instance, tests, demos) and a
Supabase-backed store (the ``users`` table) behind ICredentialStore.
Both enforce username and account number uniqueness on create.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.exceptions import ExternalServiceError
from shared.repository import BaseRepository

from .exceptions import DuplicateAccountNumberError, DuplicateUsernameError
from .models import NewUserRecord, Role, UserIdentity

logger = logging.getLogger(__name__)

# Postgres error code for unique_violation
UNIQUE_VIOLATION = "23505"


class InMemoryCredentialStore:
    """
    Credential store backed by dictionaries.

    Reads and writes go through one lock, so the uniqueness check and the
    insert in ``create`` are a single atomic step.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[str, UserIdentity] = {}
        self._id_by_username: dict[str, str] = {}
        self._id_by_account: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    def find_by_id(self, user_id: str) -> Optional[UserIdentity]:
        with self._lock:
            return self._by_id.get(user_id)

    def find_by_username(self, username: str) -> Optional[UserIdentity]:
        with self._lock:
            user_id = self._id_by_username.get(username)
            return self._by_id.get(user_id) if user_id else None

    def find_by_account_number(self, account_number: str) -> Optional[UserIdentity]:
        with self._lock:
            user_id = self._id_by_account.get(account_number)
            return self._by_id.get(user_id) if user_id else None

    def exists_by_account_number(self, account_number: str) -> bool:
        with self._lock:
            return account_number in self._id_by_account

    def create(self, record: NewUserRecord) -> UserIdentity:
        with self._lock:
            if record.username in self._id_by_username:
                raise DuplicateUsernameError(record.username)
            if record.account_number in self._id_by_account:
                raise DuplicateAccountNumberError(record.account_number)

            identity = UserIdentity(
                id=str(uuid.uuid4()),
                created_at=datetime.now(timezone.utc),
                **record.model_dump(),
            )
            self._by_id[identity.id] = identity
            self._id_by_username[identity.username] = identity.id
            self._id_by_account[identity.account_number] = identity.id
            return identity


class SupabaseCredentialStore(BaseRepository[UserIdentity]):
    """
    Credential store backed by the Supabase ``users`` table.

    The table carries unique constraints on ``username`` and
    ``account_number``; a violation on insert is reported as a conflict so
    the caller can retry with another account number.
    """

    TABLE = "users"

    def find_by_id(self, user_id: str) -> Optional[UserIdentity]:
        return self._find_one("id", user_id)

    def find_by_username(self, username: str) -> Optional[UserIdentity]:
        return self._find_one("username", username)

    def find_by_account_number(self, account_number: str) -> Optional[UserIdentity]:
        return self._find_one("account_number", account_number)

    def exists_by_account_number(self, account_number: str) -> bool:
        try:
            result = (
                self._db.table(self.TABLE)
                .select("id")
                .eq("account_number", account_number)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise self._service_error(e)
        return bool(result.data)

    def create(self, record: NewUserRecord) -> UserIdentity:
        data = record.model_dump(mode="json")
        try:
            result = self._db.table(self.TABLE).insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                if "account_number" in (e.message or ""):
                    raise DuplicateAccountNumberError(record.account_number)
                raise DuplicateUsernameError(record.username)
            raise self._service_error(e)

        row = self._first(result)
        if row is None:
            raise ExternalServiceError("Insert returned no row", service="supabase")
        return self._map_to_identity(row)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find_one(self, column: str, value: str) -> Optional[UserIdentity]:
        try:
            result = (
                self._db.table(self.TABLE)
                .select("*")
                .eq(column, value)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise self._service_error(e)

        row = self._first(result)
        return self._map_to_identity(row) if row else None

    @staticmethod
    def _service_error(error: APIError) -> ExternalServiceError:
        logger.error(f"Supabase users query failed: {error.code} {error.message}")
        return ExternalServiceError(
            "Credential store unavailable",
            service="supabase",
            details={"code": error.code},
        )

    @staticmethod
    def _map_to_identity(row: dict[str, Any]) -> UserIdentity:
        return UserIdentity(
            id=str(row["id"]),
            name=row["name"],
            id_number=row["id_number"],
            username=row["username"],
            account_number=row["account_number"],
            password_hash=row["password_hash"],
            role=Role(row.get("role") or Role.CUSTOMER.value),
            created_at=row["created_at"],
        )


def create_credential_store(backend: str, db: Optional[Client] = None):
    """
    Create the configured credential store.

    Args:
        backend: "memory" or "supabase"
        db: Supabase client, required for the supabase backend
    """
    if backend == "memory":
        return InMemoryCredentialStore()
    if backend == "supabase":
        if db is None:
            raise ValueError("The supabase credential store needs a client")
        return SupabaseCredentialStore(db)
    raise ValueError(f"Unknown credential store backend: {backend}")
