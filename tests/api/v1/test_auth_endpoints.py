"""
Tests for authentication endpoints.

These tests cover /api/v1/auth:
- Registration
- Login via JSON credentials (token in body and cookie)
- Session resolution from header and cookie
"""

import pytest
from httpx import AsyncClient

from catalog.config import UserRole
from catalog.core.security import create_access_token, hash_password
from catalog.models.user import Users


@pytest.fixture
async def member(db_session) -> Users:
    """A user with a real bcrypt password."""
    member = Users(
        username="member",
        email="member@example.com",
        password=hash_password("Figures2025"),
        role=UserRole.USER,
    )
    db_session.add(member)
    await db_session.commit()
    await db_session.refresh(member)
    return member


@pytest.mark.api
class TestRegister:
    """Tests for POST /api/v1/auth/register."""

    async def test_register(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": "newcollector", "email": "new@example.com", "password": "Figures2025"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "USER"
        assert "password" not in data

    async def test_duplicate_username(self, client: AsyncClient, user):
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": user.username, "email": "other@example.com", "password": "Figures2025"},
        )
        assert response.status_code == 409

    async def test_weak_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": "weakling", "email": "weak@example.com", "password": "password"},
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.api
class TestLogin:
    """Tests for POST /api/v1/auth/login."""

    async def test_login(self, client: AsyncClient, member):
        response = await client.post(
            "/api/v1/auth/login", json={"username": "member", "password": "Figures2025"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert "access_token" in response.cookies

        me = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.json()["username"] == "member"

    async def test_wrong_password(self, client: AsyncClient, member):
        response = await client.post(
            "/api/v1/auth/login", json={"username": "member", "password": "nope"}
        )
        assert response.status_code == 401


@pytest.mark.api
class TestSession:
    """Tests for GET /api/v1/auth/me."""

    async def test_anonymous(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401

    async def test_cookie_session(self, client: AsyncClient, user):
        client.cookies.set("access_token", create_access_token(user.user_id))
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 200
        assert response.json()["user_id"] == user.user_id

    async def test_token_for_deleted_user(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {create_access_token(9999)}"}
        )
        assert response.status_code == 401

    async def test_inactive_user(self, client: AsyncClient, db_session, user, user_headers):
        user.active = False
        await db_session.commit()
        response = await client.get("/api/v1/auth/me", headers=user_headers)
        assert response.status_code == 401
