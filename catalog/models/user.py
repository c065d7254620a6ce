"""
SQLModel-based User models with inheritance for security

UserBase (shared public fields)
    ├─> Users (database table, adds internal/sensitive fields)
    └─> UserResponse/UserAdminResponse (API schemas, defined in catalog/schemas)
"""

from datetime import UTC, datetime

from sqlmodel import Field, SQLModel

from catalog.config import UserRole


def utcnow() -> datetime:
    return datetime.now(UTC)


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.

    These fields are safe to expose via the API.
    """

    username: str = Field(max_length=30, unique=True, index=True)
    name: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=60)
    bio: str | None = Field(default=None, max_length=500)


class Users(UserBase, table=True):
    """
    Database table for users with internal and sensitive fields.

    Internal/sensitive fields (should NOT be exposed via public API):
    - password: bcrypt hash
    - email: Privacy-sensitive
    """

    __tablename__ = "users"

    user_id: int | None = Field(default=None, primary_key=True)

    email: str = Field(max_length=255, unique=True, index=True)
    password: str = Field(max_length=255)

    # Changed only by a SUPERADMIN acting on someone else
    role: UserRole = Field(default=UserRole.USER)
    active: bool = Field(default=True)

    date_joined: datetime = Field(default_factory=utcnow)
