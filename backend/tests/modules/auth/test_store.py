"""Tests for the in-memory and Supabase credential stores."""

import threading
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from modules.auth.exceptions import DuplicateAccountNumberError, DuplicateUsernameError
from modules.auth.interfaces import ICredentialStore
from modules.auth.models import NewUserRecord, Role
from modules.auth.store import (
    InMemoryCredentialStore,
    SupabaseCredentialStore,
    create_credential_store,
)
from shared.exceptions import ExternalServiceError


def make_record(username: str = "jane_d", account_number: str = "6200000009", **overrides):
    fields = dict(
        name="Jane Doe",
        id_number="123",
        username=username,
        account_number=account_number,
        password_hash="$2b$04$hash",
    )
    fields.update(overrides)
    return NewUserRecord(**fields)


class TestInMemoryCredentialStore:

    @pytest.fixture
    def store(self) -> InMemoryCredentialStore:
        return InMemoryCredentialStore()

    def test_implements_interface(self, store):
        assert isinstance(store, ICredentialStore)

    def test_create_assigns_id_and_timestamp(self, store):
        identity = store.create(make_record())
        assert identity.id
        assert identity.created_at.tzinfo is not None
        assert identity.role == Role.CUSTOMER

    def test_lookups(self, store):
        identity = store.create(make_record())
        assert store.find_by_id(identity.id) == identity
        assert store.find_by_username("jane_d") == identity
        assert store.find_by_account_number("6200000009") == identity
        assert store.exists_by_account_number("6200000009") is True

    def test_lookup_misses_return_none(self, store):
        assert store.find_by_id("missing") is None
        assert store.find_by_username("nobody") is None
        assert store.find_by_account_number("0000000000") is None
        assert store.exists_by_account_number("0000000000") is False

    def test_duplicate_username_rejected(self, store):
        store.create(make_record())
        with pytest.raises(DuplicateUsernameError):
            store.create(make_record(account_number="6200000010"))
        assert len(store) == 1

    def test_duplicate_account_number_rejected(self, store):
        store.create(make_record())
        with pytest.raises(DuplicateAccountNumberError) as exc_info:
            store.create(make_record(username="john_d"))
        assert exc_info.value.status_code == 409
        assert len(store) == 1

    def test_concurrent_creates_with_same_account_number(self, store):
        """Exactly one of many racing creates should win an account number."""
        barrier = threading.Barrier(8)
        results: list[str] = []
        results_lock = threading.Lock()

        def register(i: int):
            barrier.wait()
            try:
                store.create(make_record(username=f"user_{i}", account_number="6200000099"))
                outcome = "created"
            except DuplicateAccountNumberError:
                outcome = "conflict"
            with results_lock:
                results.append(outcome)

        threads = [threading.Thread(target=register, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("created") == 1
        assert results.count("conflict") == 7
        assert len(store) == 1


class TestSupabaseCredentialStore:

    ROW = {
        "id": "0b6f4c1e-0000-4000-8000-000000000001",
        "name": "Jane Doe",
        "id_number": "123",
        "username": "jane_d",
        "account_number": "6200000009",
        "password_hash": "$2b$04$hash",
        "role": "employee",
        "created_at": "2024-01-01T00:00:00+00:00",
    }

    @pytest.fixture
    def mock_db(self):
        return MagicMock()

    @pytest.fixture
    def store(self, mock_db) -> SupabaseCredentialStore:
        return SupabaseCredentialStore(mock_db)

    def _select_chain(self, mock_db):
        return mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value

    def test_implements_interface(self, store):
        assert isinstance(store, ICredentialStore)

    def test_find_by_username_maps_row(self, store, mock_db):
        self._select_chain(mock_db).execute.return_value.data = [self.ROW]

        identity = store.find_by_username("jane_d")

        assert identity.id == self.ROW["id"]
        assert identity.role == Role.EMPLOYEE
        assert identity.created_at.year == 2024
        mock_db.table.assert_called_with("users")
        mock_db.table.return_value.select.return_value.eq.assert_called_with("username", "jane_d")

    def test_find_miss_returns_none(self, store, mock_db):
        self._select_chain(mock_db).execute.return_value.data = []
        assert store.find_by_account_number("6200000009") is None

    def test_exists_by_account_number(self, store, mock_db):
        self._select_chain(mock_db).execute.return_value.data = [{"id": "x"}]
        assert store.exists_by_account_number("6200000009") is True

    def test_create_returns_identity(self, store, mock_db):
        mock_db.table.return_value.insert.return_value.execute.return_value.data = [self.ROW]

        identity = store.create(make_record())

        assert identity.username == "jane_d"
        inserted = mock_db.table.return_value.insert.call_args[0][0]
        assert inserted["role"] == "customer"
        assert "id" not in inserted

    def test_unique_violation_on_account_number(self, store, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = APIError({
            "code": "23505",
            "message": 'duplicate key value violates unique constraint "users_account_number_key"',
        })
        with pytest.raises(DuplicateAccountNumberError):
            store.create(make_record())

    def test_unique_violation_on_username(self, store, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = APIError({
            "code": "23505",
            "message": 'duplicate key value violates unique constraint "users_username_key"',
        })
        with pytest.raises(DuplicateUsernameError):
            store.create(make_record())

    def test_other_errors_become_external_service_error(self, store, mock_db):
        self._select_chain(mock_db).execute.side_effect = APIError({
            "code": "PGRST301",
            "message": "JWT expired",
        })
        with pytest.raises(ExternalServiceError) as exc_info:
            store.find_by_id("x")
        assert exc_info.value.details["service"] == "supabase"
        assert "JWT" not in exc_info.value.message


class TestCreateCredentialStore:

    def test_memory_backend(self):
        assert isinstance(create_credential_store("memory"), InMemoryCredentialStore)

    def test_supabase_backend(self):
        store = create_credential_store("supabase", db=MagicMock())
        assert isinstance(store, SupabaseCredentialStore)

    def test_supabase_requires_client(self):
        with pytest.raises(ValueError):
            create_credential_store("supabase")

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_credential_store("redis")
