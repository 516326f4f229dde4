"""
End-to-end tests for the /api/user endpoints.
"""

import re

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer

JANE = {
    "name": "Jane Doe",
    "idNumber": "123",
    "username": "jane_d",
    "password": "Abc12345!",
    "confirmPassword": "Abc12345!",
}


class TestRegister:

    def test_register_returns_account_number(self, client):
        """Scenario: a valid registration returns 201 and an account number."""
        response = client.post("/api/user/register", json=JANE)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User registered successfully"
        assert re.fullmatch(r"[0-9]{8,20}", data["accountNumber"])

    def test_registered_user_can_log_in(self, client):
        account_number = client.post("/api/user/register", json=JANE).json()["accountNumber"]

        response = client.post(
            "/api/user/login",
            json={"accountNumber": account_number, "password": "Abc12345!"},
        )

        assert response.status_code == 200
        assert response.json()["username"] == "jane_d"
        assert response.json()["role"] == "customer"

    def test_duplicate_username(self, client, seeded_users):
        response = client.post("/api/user/register", json={**JANE, "username": "john_customer"})
        assert response.status_code == 409
        assert response.json() == {"error": "Username already taken"}

    def test_missing_fields(self, client):
        response = client.post("/api/user/register", json={"username": "jane_d"})
        assert response.status_code == 400
        assert response.json() == {"error": "All fields are required"}

    def test_weak_password(self, client):
        response = client.post(
            "/api/user/register",
            json={**JANE, "password": "password", "confirmPassword": "password"},
        )
        assert response.status_code == 400
        assert "Password must be" in response.json()["error"]

    def test_malformed_json(self, client):
        response = client.post(
            "/api/user/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_rejected_registrations_are_locked_out(self, client, seeded_users):
        """The fourth registration after three rejected ones from one IP gets a 429."""
        taken = {**JANE, "username": "john_customer"}
        for _ in range(3):
            assert client.post("/api/user/register", json=taken).status_code == 409

        response = client.post("/api/user/register", json=JANE)

        assert response.status_code == 429
        data = response.json()
        assert data["error"] == "Too many failed attempts. Please try again later."
        assert "nextValidRequestDate" in data

    def test_registration_disabled(self, settings):
        settings = settings.model_copy(update={"registration_enabled": False})
        client = TestClient(create_app(settings, ServiceContainer(settings)))

        response = client.post("/api/user/register", json=JANE)

        assert response.status_code == 403
        assert "Registration is disabled" in response.json()["error"]


class TestLogin:

    def test_login_with_username(self, client, seeded_users, container):
        response = client.post(
            "/api/user/login",
            json={"username": "john_customer", "password": "Customer@123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["role"] == "customer"
        assert data["accountNumber"] == "6200000001"
        claims = container.token_service.verify(data["token"])
        assert claims.id == seeded_users["john_customer"].id

    def test_login_with_account_number(self, client, seeded_users):
        response = client.post(
            "/api/user/login",
            json={"accountNumber": "6200000101", "password": "Employee@123"},
        )
        assert response.status_code == 200
        assert response.json()["role"] == "employee"

    def test_wrong_password(self, client, seeded_users):
        """Scenario: correct username, wrong password -> 401."""
        response = client.post(
            "/api/user/login",
            json={"username": "john_customer", "password": "Wrong@1234"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid password"}

    def test_unknown_username(self, client, seeded_users):
        """Scenario: unknown username -> 404."""
        response = client.post(
            "/api/user/login",
            json={"username": "nobody_here", "password": "Abc12345!"},
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Account not found"}

    def test_generic_login_errors(self, settings):
        settings = settings.model_copy(update={"generic_login_errors": True})
        container = ServiceContainer(settings)
        client = TestClient(create_app(settings, container))

        response = client.post(
            "/api/user/login",
            json={"username": "nobody_here", "password": "Abc12345!"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_both_identities_rejected(self, client):
        response = client.post(
            "/api/user/login",
            json={"username": "jane_d", "accountNumber": "6200000001", "password": "Abc12345!"},
        )
        assert response.status_code == 400

    def test_brute_force_lockout(self, client, seeded_users):
        """The fourth failed attempt from one IP is locked out."""
        bad = {"username": "john_customer", "password": "Wrong@1234"}
        for _ in range(3):
            assert client.post("/api/user/login", json=bad).status_code == 401

        response = client.post(
            "/api/user/login",
            json={"username": "john_customer", "password": "Customer@123"},
        )

        assert response.status_code == 429
        data = response.json()
        assert "error" in data
        assert "nextValidRequestDate" in data

    def test_user_alias_prefix(self, client, seeded_users):
        response = client.post(
            "/user/login",
            json={"username": "john_customer", "password": "Customer@123"},
        )
        assert response.status_code == 200


class TestProfile:

    def test_profile_with_login_token(self, client, seeded_users):
        token = client.post(
            "/api/user/login",
            json={"username": "john_customer", "password": "Customer@123"},
        ).json()["token"]

        response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "john_customer"
        assert data["accountNumber"] == "6200000001"
        assert data["role"] == "customer"
        assert "passwordHash" not in data
        assert "password_hash" not in data

    def test_profile_without_token(self, client):
        """Scenario: no Authorization header -> 401."""
        response = client.get("/api/user/profile")
        assert response.status_code == 401

    def test_profile_with_expired_token(self, client, seeded_users, make_token):
        """Scenario: expired token -> 403."""
        user = seeded_users["john_customer"]
        token = make_token(user_id=user.id, username=user.username, expired=True)

        response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_profile_for_deleted_user(self, client, make_token):
        token = make_token(user_id="no-such-user")
        response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
