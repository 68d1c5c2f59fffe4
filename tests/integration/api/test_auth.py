"""Integration tests for auth endpoints."""

import pytest
from httpx import AsyncClient

from gatehouse.core.permissions.types import EntitySet, PermissionType
from tests.factories.user import TEST_PASSWORD


pytestmark = pytest.mark.integration


def registration(email: str = "newuser@example.com", **overrides: str) -> dict:
    return {
        "email": email,
        "name": "New User",
        "password": TEST_PASSWORD,
        **overrides,
    }


class TestRegistration:
    """Tests for the registration endpoint."""

    async def test_register_success(self, client: AsyncClient):
        """POST /api/v1/auth/register should create the user and return a token."""
        response = await client.post("/api/v1/auth/register", json=registration())

        assert response.status_code == 201
        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"]["email"] == "newuser@example.com"
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    async def test_register_grants_self_access(self, client: AsyncClient):
        """The new user can read and update their own account, nothing more."""
        response = await client.post("/api/v1/auth/register", json=registration())
        data = response.json()
        user_id = data["user"]["id"]
        headers = {"Authorization": f"Bearer {data['access_token']}"}

        response = await client.get(
            f"/api/v1/users/{user_id}", params={"authorization": "true"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["authorization"] == ["read", "update"]
        assert response.json()["metadata"] == {"authorization": []}

    async def test_register_duplicate_email(self, client: AsyncClient, create_user):
        """POST /api/v1/auth/register should reject a taken email."""
        await create_user(email="existing@example.com")

        response = await client.post(
            "/api/v1/auth/register", json=registration("existing@example.com")
        )

        assert response.status_code == 409
        assert response.json()["type"].endswith("/errors/email_exists")

    async def test_register_weak_password(self, client: AsyncClient):
        """POST /api/v1/auth/register should reject a weak password."""
        response = await client.post(
            "/api/v1/auth/register", json=registration(password="weakpassword")
        )

        assert response.status_code == 422
        fields = [error["field"] for error in response.json()["errors"]]
        assert "password" in fields

    async def test_register_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register", json=registration("not-an-email")
        )

        assert response.status_code == 422


class TestLogin:
    """Tests for the login endpoint."""

    async def test_login_success(self, client: AsyncClient, create_user, grant):
        """Login returns a token and the authorization summary."""
        user = await create_user(email="login@example.com")
        await grant(user, EntitySet.ITEM, PermissionType.READ)

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "login@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["authorization"] == {"set_level": ["item"], "instance_level": []}

    async def test_login_token_authenticates(self, client: AsyncClient, user):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": TEST_PASSWORD},
        )
        token = response.json()["access_token"]

        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["id"] == user.id

    async def test_login_wrong_password(self, client: AsyncClient, user):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": "Wrong-Password-1"},
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/invalid_credentials")

    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 401


class TestTokens:
    """Tests for bearer token handling."""

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/missing_token")

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/invalid_token")
