"""
SQLModel-based notification model
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from catalog.config import NotificationType
from catalog.models.user import utcnow


class Notifications(SQLModel, table=True):
    """Database table for per-user notifications."""

    __tablename__ = "notifications"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE", index=True)
    type: NotificationType
    title: str = Field(max_length=200)
    message: str = Field(max_length=500)
    link: str | None = Field(default=None, max_length=255)
    figure_id: int | None = Field(
        default=None, foreign_key="figures.id", ondelete="CASCADE", index=True
    )
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)
