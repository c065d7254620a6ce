"""
Database configuration and session management
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from catalog.config import settings
from catalog.core.errors import ConflictError


def _engine_options(url: str) -> dict[str, Any]:
    """Pool options for the configured backend (SQLite pools take no sizing arguments)."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,
    }


# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    **_engine_options(settings.DATABASE_URL),
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    Each request runs in one transaction: committed when the handler returns,
    rolled back when anything raises (including domain errors), so a failed
    mutation is never observable half-applied.

    Usage in FastAPI:
        @app.get("/items")
        async def read_items(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all tables from SQLModel metadata (development and SQLite setups)."""
    import catalog.models  # noqa: F401  registers every table

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def flush_or_conflict(db: AsyncSession, message: str) -> None:
    """
    Flush pending writes, reporting a unique-constraint violation as ConflictError.

    Pre-checks catch the common duplicate; this catches the race where two
    requests pass the pre-check at the same time.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        raise ConflictError(message) from e
