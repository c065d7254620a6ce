"""
Tests for admin API endpoints.

These tests cover:
- POST /api/v1/admin/approve
- GET /api/v1/admin/pending
- GET /api/v1/admin/users
- PATCH /api/v1/admin/users/{user_id}/role
- DELETE /api/v1/admin/users/{user_id}
"""

import pytest
from httpx import AsyncClient


@pytest.mark.api
class TestApprove:
    """Tests for POST /api/v1/admin/approve."""

    async def test_approve_figure(self, client: AsyncClient, user, admin, admin_headers, make_figure):
        figure = await make_figure(user)

        response = await client.post(
            "/api/v1/admin/approve",
            json={"kind": "figure", "id": figure.id, "approved": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["approved_by_id"] == admin.user_id
        assert data["message"] == "Figure approved"
        assert (await client.get(f"/api/v1/figures/{figure.id}")).status_code == 200

    async def test_unapprove_figure(self, client: AsyncClient, admin, admin_headers, make_figure):
        figure = await make_figure(admin)

        response = await client.post(
            "/api/v1/admin/approve",
            json={"kind": "figure", "id": figure.id, "approved": False},
            headers=admin_headers,
        )

        data = response.json()
        assert data["status"] == "PENDING"
        assert data["approved_by_id"] is None
        assert data["approved_at"] is None
        assert data["message"] == "Figure moved back to pending"

    async def test_approve_brand(self, client: AsyncClient, user_headers, admin_headers):
        created = await client.post("/api/v1/brands/", json={"name": "Alter"}, headers=user_headers)

        response = await client.post(
            "/api/v1/admin/approve",
            json={"kind": "brand", "id": created.json()["id"], "approved": True},
            headers=admin_headers,
        )

        assert response.json()["status"] == "APPROVED"
        assert response.json()["approved_by_id"] is None

    async def test_user_is_forbidden(self, client: AsyncClient, user, user_headers, make_figure):
        figure = await make_figure(user)
        response = await client.post(
            "/api/v1/admin/approve",
            json={"kind": "figure", "id": figure.id, "approved": True},
            headers=user_headers,
        )
        assert response.status_code == 403

    async def test_unknown_kind_is_invalid(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/v1/admin/approve",
            json={"kind": "vehicle", "id": 1, "approved": True},
            headers=admin_headers,
        )
        assert response.status_code == 422


@pytest.mark.api
class TestPending:
    """Tests for GET /api/v1/admin/pending."""

    async def test_counts(self, client: AsyncClient, user, admin_headers, make_figure):
        await make_figure(user)
        response = await client.get("/api/v1/admin/pending", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["figures"] == 1
        assert response.json()["total"] == 1

    async def test_anonymous(self, client: AsyncClient):
        response = await client.get("/api/v1/admin/pending")
        assert response.status_code == 401


@pytest.mark.api
class TestUserAdministration:
    """Tests for the /api/v1/admin/users endpoints."""

    async def test_admin_lists_users(self, client: AsyncClient, user, admin_headers):
        response = await client.get("/api/v1/admin/users", headers=admin_headers)
        assert response.status_code == 200
        usernames = {u["username"] for u in response.json()["users"]}
        assert {"collector", "moderator"} <= usernames

    async def test_user_cannot_list_users(self, client: AsyncClient, user_headers):
        response = await client.get("/api/v1/admin/users", headers=user_headers)
        assert response.status_code == 403

    async def test_superadmin_changes_role(self, client: AsyncClient, user, superadmin_headers):
        response = await client.patch(
            f"/api/v1/admin/users/{user.user_id}/role", json={"role": "ADMIN"}, headers=superadmin_headers
        )
        assert response.status_code == 200
        assert response.json()["role"] == "ADMIN"

    async def test_role_change_applies_to_next_request(
        self, client: AsyncClient, user, user_headers, superadmin_headers
    ):
        """Roles are looked up per request, so an existing token gains the new role."""
        await client.patch(
            f"/api/v1/admin/users/{user.user_id}/role", json={"role": "ADMIN"}, headers=superadmin_headers
        )
        response = await client.get("/api/v1/admin/pending", headers=user_headers)
        assert response.status_code == 200

    async def test_own_role_is_rejected(self, client: AsyncClient, superadmin, superadmin_headers):
        response = await client.patch(
            f"/api/v1/admin/users/{superadmin.user_id}/role", json={"role": "USER"}, headers=superadmin_headers
        )
        assert response.status_code == 422

    async def test_admin_cannot_change_role(self, client: AsyncClient, user, admin_headers):
        response = await client.patch(
            f"/api/v1/admin/users/{user.user_id}/role", json={"role": "ADMIN"}, headers=admin_headers
        )
        assert response.status_code == 403

    async def test_delete_user(self, client: AsyncClient, user, superadmin_headers):
        response = await client.delete(f"/api/v1/admin/users/{user.user_id}", headers=superadmin_headers)
        assert response.status_code == 204
