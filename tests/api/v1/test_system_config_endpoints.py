"""
Tests for system configuration endpoints.

These tests cover /api/v1/admin/system-config:
- Public reads of known and unknown keys
- SUPERADMIN-only writes
- Boolean validation of SHOW_PENDING_FIGURES
"""

import pytest
from httpx import AsyncClient

URL = "/api/v1/admin/system-config"


@pytest.mark.api
class TestReadConfig:
    """Tests for GET /api/v1/admin/system-config/."""

    async def test_unset_key_reads_null(self, client: AsyncClient):
        response = await client.get(f"{URL}/SHOW_PENDING_FIGURES")
        assert response.status_code == 200
        assert response.json() == {"key": "SHOW_PENDING_FIGURES", "value": None, "updated_at": None}

    async def test_unknown_key(self, client: AsyncClient):
        response = await client.get(f"{URL}/NOPE")
        assert response.status_code == 404

    async def test_empty_listing(self, client: AsyncClient):
        response = await client.get(f"{URL}/")
        assert response.json() == {"configs": []}


@pytest.mark.api
class TestWriteConfig:
    """Tests for PUT /api/v1/admin/system-config/{key}."""

    async def test_superadmin_sets_flag(self, client: AsyncClient, superadmin_headers):
        response = await client.put(
            f"{URL}/SHOW_PENDING_FIGURES", json={"value": True}, headers=superadmin_headers
        )
        assert response.status_code == 200
        assert response.json()["value"] is True

        listing = await client.get(f"{URL}/")
        assert [c["key"] for c in listing.json()["configs"]] == ["SHOW_PENDING_FIGURES"]

    async def test_admin_is_forbidden(self, client: AsyncClient, admin_headers):
        response = await client.put(f"{URL}/SHOW_PENDING_FIGURES", json={"value": True}, headers=admin_headers)
        assert response.status_code == 403

    async def test_anonymous_is_unauthenticated(self, client: AsyncClient):
        response = await client.put(f"{URL}/SHOW_PENDING_FIGURES", json={"value": True})
        assert response.status_code == 401

    async def test_string_value_is_invalid(self, client: AsyncClient, superadmin_headers):
        response = await client.put(
            f"{URL}/SHOW_PENDING_FIGURES", json={"value": "true"}, headers=superadmin_headers
        )
        assert response.status_code == 422

    async def test_unknown_key_is_invalid(self, client: AsyncClient, superadmin_headers):
        response = await client.put(f"{URL}/NOPE", json={"value": True}, headers=superadmin_headers)
        assert response.status_code == 422
