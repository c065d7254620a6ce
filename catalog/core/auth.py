"""
Authentication dependencies for FastAPI route protection.

This module is the session resolver: it turns the opaque credential sent by the
client (``Authorization: Bearer`` header or ``access_token`` cookie) into a
loaded user whose role comes from the database, not from the token.
"""

from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.database import get_db
from catalog.core.errors import UnauthenticatedError
from catalog.core.logging import bind_user
from catalog.core.permissions import require_admin_role, require_superadmin_role
from catalog.core.security import SESSION_COOKIE, pick_session_token, verify_access_token
from catalog.models.user import Users

# Define the security scheme for OpenAPI documentation
bearer_scheme = HTTPBearer(auto_error=False)


async def resolve_session(db: AsyncSession, token: str | None) -> Users | None:
    """
    Decode a credential into an active user.

    Returns None when the token is missing, invalid, expired, or points at a
    missing or inactive user.
    """
    if not token:
        return None

    user_id = verify_access_token(token)
    if user_id is None:
        return None

    result = await db.execute(select(Users).where(Users.user_id == user_id))  # type: ignore[arg-type]
    user = result.scalar_one_or_none()
    if user is None or not user.active:
        return None
    return user


async def get_optional_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    session_cookie: Annotated[str | None, Cookie(alias=SESSION_COOKIE)] = None,
) -> Users | None:
    """
    Get current user if authenticated, otherwise return None.

    Used by read endpoints whose result depends on who is asking.
    """
    bearer = credentials.credentials if credentials else None
    user = await resolve_session(db, pick_session_token(bearer, session_cookie))
    if user is not None:
        bind_user(user.user_id)
    return user


async def get_current_user(
    user: Annotated[Users | None, Depends(get_optional_current_user)],
) -> Users:
    """
    Require an authenticated user.

    Raises:
        UnauthenticatedError: token missing, invalid or expired, or user inactive
    """
    if user is None:
        raise UnauthenticatedError("Not authenticated")
    return user


async def require_admin(
    current_user: Annotated[Users, Depends(get_current_user)],
) -> Users:
    """
    Require current user to be an admin (ADMIN or SUPERADMIN).

    Raises:
        ForbiddenError: user is not an admin
    """
    return require_admin_role(current_user)


async def require_superadmin(
    current_user: Annotated[Users, Depends(get_current_user)],
) -> Users:
    """Require current user to be a SUPERADMIN."""
    return require_superadmin_role(current_user)


# Type aliases for dependency injection
CurrentUser = Annotated[Users, Depends(get_current_user)]
OptionalCurrentUser = Annotated[Users | None, Depends(get_optional_current_user)]
AdminUser = Annotated[Users, Depends(require_admin)]
SuperAdminUser = Annotated[Users, Depends(require_superadmin)]
