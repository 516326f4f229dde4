"""Tests that the concrete auth classes satisfy their protocols."""

from modules.auth.interfaces import (
    IAuthService,
    ICredentialStore,
    IPasswordHasher,
    ITokenService,
)
from modules.auth.passwords import PasswordHasher
from modules.auth.service import AuthService
from modules.auth.store import InMemoryCredentialStore, SupabaseCredentialStore
from modules.auth.tokens import TokenService


class TestAuthInterfaces:

    def test_interface_methods_exist(self):
        """IAuthService should define the login, register and token methods."""
        for method in ["login", "register", "authenticate", "get_profile"]:
            assert hasattr(IAuthService, method)

    def test_auth_service_has_interface_methods(self):
        for method in ["login", "register", "authenticate", "get_profile"]:
            assert callable(getattr(AuthService, method))

    def test_store_methods(self):
        methods = [
            "find_by_id",
            "find_by_username",
            "find_by_account_number",
            "exists_by_account_number",
            "create",
        ]
        for store_class in (InMemoryCredentialStore, SupabaseCredentialStore):
            for method in methods:
                assert callable(getattr(store_class, method))

    def test_runtime_checks(self):
        hasher = PasswordHasher(rounds=4)
        tokens = TokenService(secret="interface-test-secret-0123456789abcdef")
        store = InMemoryCredentialStore()

        assert isinstance(hasher, IPasswordHasher)
        assert isinstance(tokens, ITokenService)
        assert isinstance(store, ICredentialStore)
        assert isinstance(AuthService(store, hasher, tokens), IAuthService)
