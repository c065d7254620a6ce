"""
SQLModel-based system configuration model

A process-wide key/value table. Values are stored as JSON text and re-read on
every use; nothing caches them.
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from catalog.models.user import utcnow


class SystemConfiguration(SQLModel, table=True):
    """Database table for system configuration entries."""

    __tablename__ = "system_configuration"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(description="JSON-encoded value")
    updated_at: datetime = Field(default_factory=utcnow)
    updated_by_id: int | None = Field(
        default=None, foreign_key="users.user_id", ondelete="SET NULL"
    )
