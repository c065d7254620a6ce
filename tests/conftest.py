"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests. Every test gets its own
in-memory SQLite database built from SQLModel.metadata, so tests never share
rows and need no external database server.
"""

import os

# Settings are read at import time; configure them before importing catalog
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production-use")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import catalog.models  # noqa: F401  registers every table
from catalog.config import UserRole
from catalog.core.database import get_db
from catalog.core.security import create_access_token
from catalog.main import app as main_app
from catalog.models.user import Users

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="function")
async def engine():
    """
    Create a fresh in-memory database for each test function.

    StaticPool keeps the single connection alive, otherwise every new
    connection would see an empty database.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for each test.

    Configured like the application's session factory (no autoflush, no
    expiry on commit) so services behave the same as in production.
    """
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> FastAPI:
    """
    Create FastAPI app with test database session.

    This overrides the database dependency to use the test session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/v1/figures/")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Users
# =============================================================================
# Stored passwords are placeholders; tests authenticate with tokens minted by
# create_access_token. Only the login tests hash real passwords.


async def _make_user(db_session: AsyncSession, username: str, role: UserRole) -> Users:
    user = Users(
        username=username,
        email=f"{username}@example.com",
        password="not-a-bcrypt-hash",
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def user(db_session: AsyncSession) -> Users:
    """An ordinary USER."""
    return await _make_user(db_session, "collector", UserRole.USER)


@pytest.fixture
async def other_user(db_session: AsyncSession) -> Users:
    """A second ordinary USER, for ownership checks."""
    return await _make_user(db_session, "rival", UserRole.USER)


@pytest.fixture
async def admin(db_session: AsyncSession) -> Users:
    return await _make_user(db_session, "moderator", UserRole.ADMIN)


@pytest.fixture
async def superadmin(db_session: AsyncSession) -> Users:
    return await _make_user(db_session, "owner", UserRole.SUPERADMIN)


def auth_headers_for(user: Users) -> dict[str, str]:
    """Authorization header carrying a valid token for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}


@pytest.fixture
def user_headers(user: Users) -> dict[str, str]:
    return auth_headers_for(user)


@pytest.fixture
def other_user_headers(other_user: Users) -> dict[str, str]:
    return auth_headers_for(other_user)


@pytest.fixture
def admin_headers(admin: Users) -> dict[str, str]:
    return auth_headers_for(admin)


@pytest.fixture
def superadmin_headers(superadmin: Users) -> dict[str, str]:
    return auth_headers_for(superadmin)


# =============================================================================
# Catalog data
# =============================================================================


@pytest.fixture
async def catalog_rows(db_session: AsyncSession, admin: Users) -> dict:
    """
    An approved brand, line, series and character created by the admin.

    Returned as a dict of ids for building figure payloads.
    """
    from catalog.config import EntityKind
    from catalog.services import moderation

    brand = await moderation.create_entity(
        db_session, admin, EntityKind.BRAND, {"name": "Good Smile Company"}
    )
    line = await moderation.create_entity(
        db_session, admin, EntityKind.LINE, {"name": "Nendoroid", "brand_id": brand.id}
    )
    series = await moderation.create_entity(
        db_session, admin, EntityKind.SERIES, {"name": "Vocaloid"}
    )
    character = await moderation.create_entity(
        db_session,
        admin,
        EntityKind.CHARACTER,
        {"name": "Hatsune Miku", "series_id": series.id},
    )
    await db_session.commit()
    return {
        "brand_id": brand.id,
        "line_id": line.id,
        "series_id": series.id,
        "character_id": character.id,
    }


@pytest.fixture
def figure_payload(catalog_rows: dict):
    """Factory for figure create payloads pointing at the approved catalog rows."""

    def _payload(name: str = "Miku Snow 2025", **overrides) -> dict:
        payload = {
            "name": name,
            "brand_id": catalog_rows["brand_id"],
            "line_id": catalog_rows["line_id"],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def make_figure(db_session: AsyncSession, figure_payload):
    """Factory creating a figure through the moderation service and committing it."""
    from catalog.config import EntityKind
    from catalog.services import moderation

    async def _make(actor: Users, name: str = "Miku Snow 2025", **overrides):
        figure = await moderation.create_entity(
            db_session, actor, EntityKind.FIGURE, figure_payload(name, **overrides)
        )
        await db_session.commit()
        return figure

    return _make


# =============================================================================
# Concurrency
# =============================================================================


@pytest.fixture
def race_on_execute(db_session: AsyncSession, monkeypatch):
    """
    Let a competing request commit a row between a service's checks and its write.

    ``install(nth, make_row)`` wraps ``db_session.execute``: right after the
    nth call returns, ``make_row()`` is added and committed, as if another
    request had won the race after the duplicate check passed.
    """
    original = db_session.execute

    def install(nth: int, make_row):
        calls = 0

        async def execute(*args, **kwargs):
            nonlocal calls
            result = await original(*args, **kwargs)
            calls += 1
            if calls == nth:
                db_session.add(make_row())
                await db_session.commit()
            return result

        monkeypatch.setattr(db_session, "execute", execute)

    return install
