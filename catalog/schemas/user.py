"""
Pydantic schemas for User endpoints
"""

from pydantic import BaseModel

from catalog.config import UserRole
from catalog.models.user import UserBase
from catalog.schemas.common import UTCDatetime


class UserResponse(UserBase):
    """Schema for user response - what API returns"""

    user_id: int
    role: UserRole
    date_joined: UTCDatetime

    model_config = {"from_attributes": True}


class UserAdminResponse(UserResponse):
    """User as seen by admins: adds contact and account state."""

    email: str
    active: bool


class UserListResponse(BaseModel):
    """Paginated user listing"""

    total: int
    page: int
    per_page: int
    users: list[UserAdminResponse]


class RoleUpdateRequest(BaseModel):
    """Role change requested by a superadmin"""

    role: UserRole
