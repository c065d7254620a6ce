"""
Pydantic schemas for notification endpoints
"""

from pydantic import BaseModel

from catalog.config import NotificationType
from catalog.schemas.common import UTCDatetime


class NotificationResponse(BaseModel):
    """Notification as returned by the API"""

    id: int
    type: NotificationType
    title: str
    message: str
    link: str | None = None
    figure_id: int | None = None
    is_read: bool
    created_at: UTCDatetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    """A user's notifications"""

    unread_count: int
    notifications: list[NotificationResponse]
