"""
SQLModel-based collection entry models

UserFigureBase (shared public fields)
    ├─> UserFigures (database table)
    └─> CollectionEntryCreate/CollectionEntryUpdate/CollectionEntryResponse (catalog/schemas)

One row per (user, figure); changing status updates that row in place.
"""

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from catalog.config import CollectionStatus
from catalog.models.user import utcnow


class UserFigureBase(SQLModel):
    """Public collection entry fields."""

    status: CollectionStatus = Field(index=True)
    user_price: float | None = Field(default=None)
    preorder_month: str | None = Field(default=None, max_length=10)


class UserFigures(UserFigureBase, table=True):
    """
    Database table for collection entries.

    The unique constraint on (user_id, figure_id) is what settles concurrent
    track() calls: one insert succeeds, the other fails with IntegrityError.
    """

    __tablename__ = "user_figures"
    __table_args__ = (UniqueConstraint("user_id", "figure_id", name="uq_user_figures_user_figure"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE", index=True)
    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", index=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
