"""
Shared columns for moderated content.

Figures, brands, lines, series and characters all carry the same moderation
columns. Each table class mixes this base in next to its own public base:

ModeratedBase (status, slug, attribution, timestamps)
    ├─> Figures, Brands, Lines, Series, Characters (database tables)
    └─> *Response schemas (catalog/schemas/entities.py)
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from catalog.config import ModerationStatus
from catalog.models.user import utcnow


class ModeratedBase(SQLModel):
    """Moderation state plus attribution, identical across the five kinds."""

    # Derived from name; unique per kind
    slug: str = Field(max_length=255, unique=True, index=True)

    status: ModerationStatus = Field(default=ModerationStatus.PENDING, index=True)

    # Attribution only; set at creation and never changed
    created_by_id: int | None = Field(
        default=None, foreign_key="users.user_id", ondelete="SET NULL", index=True
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
