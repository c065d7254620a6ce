"""
Authentication API endpoints.

This module provides endpoints for:
- User registration
- User login (JWT access token, also set as an HTTPOnly cookie)
- Current user information
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import settings
from catalog.core.auth import CurrentUser
from catalog.core.database import get_db
from catalog.core.errors import UnauthenticatedError
from catalog.core.logging import get_logger
from catalog.core.security import create_access_token, set_session_cookie
from catalog.schemas.auth import LoginRequest, TokenResponse, UserRegisterRequest
from catalog.schemas.user import UserAdminResponse
from catalog.services import users as user_service

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserAdminResponse, status_code=201)
async def register(
    payload: UserRegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserAdminResponse:
    """
    Create a new account with the USER role.

    Username and email must be unused (409 otherwise).
    """
    user = await user_service.register_user(
        db, payload.username, payload.email, payload.password, payload.name
    )
    await db.commit()
    return UserAdminResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate user and return a JWT access token.

    The token is returned in the body and set as the ``access_token`` cookie.
    """
    user = await user_service.authenticate(db, credentials.username, credentials.password)
    if user is None:
        raise UnauthenticatedError("Incorrect username or password")

    access_token = create_access_token(user.user_id)  # type: ignore[arg-type]
    set_session_cookie(response, access_token)
    logger.info("user_logged_in", user_id=user.user_id)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get("/me", response_model=UserAdminResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserAdminResponse:
    """Get current authenticated user information."""
    return UserAdminResponse.model_validate(current_user)
