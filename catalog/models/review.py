"""
SQLModel-based Review models

ReviewBase (shared public fields)
    ├─> Reviews (database table)
    └─> ReviewCreate/ReviewUpdate/ReviewResponse (API schemas, defined in catalog/schemas)
"""

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from catalog.models.user import utcnow


class ReviewBase(SQLModel):
    """Public review fields."""

    rating: int = Field(description="1 to 5")
    title: str = Field(max_length=200)
    description: str


class Reviews(ReviewBase, table=True):
    """Database table for reviews. At most one per (user, figure)."""

    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "figure_id", name="uq_reviews_user_figure"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE", index=True)
    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", index=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ReviewImages(SQLModel, table=True):
    """Ordered image URLs attached to a review."""

    __tablename__ = "review_images"

    id: int | None = Field(default=None, primary_key=True)
    review_id: int = Field(foreign_key="reviews.id", ondelete="CASCADE", index=True)
    url: str = Field(max_length=500)
    order: int = Field(default=0)
