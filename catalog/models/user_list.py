"""
SQLModel-based curated list models

Users curate shareable lists of figures. Admins may mark a list official and
superadmins may feature it.
"""

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from catalog.models.user import utcnow


class ListBase(SQLModel):
    """Public list fields."""

    name: str = Field(max_length=200)
    description: str | None = Field(default=None)


class Lists(ListBase, table=True):
    """Database table for curated lists."""

    __tablename__ = "lists"

    id: int | None = Field(default=None, primary_key=True)
    is_official: bool = Field(default=False)
    is_featured: bool = Field(default=False, index=True)
    created_by_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE", index=True)
    created_at: datetime = Field(default_factory=utcnow)


class ListItems(SQLModel, table=True):
    """Figures in a list, ordered by position."""

    __tablename__ = "list_items"
    __table_args__ = (UniqueConstraint("list_id", "figure_id", name="uq_list_items_list_figure"),)

    id: int | None = Field(default=None, primary_key=True)
    list_id: int = Field(foreign_key="lists.id", ondelete="CASCADE", index=True)
    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", index=True)
    order: int = Field(default=0)
    added_at: datetime = Field(default_factory=utcnow)
