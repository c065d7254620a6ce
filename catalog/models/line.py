"""
SQLModel-based Line models

A line is a product line belonging to one brand.
"""

from sqlmodel import Field, SQLModel

from catalog.models.moderation import ModeratedBase


class LineBase(SQLModel):
    """Public line fields."""

    name: str = Field(max_length=255)
    description: str | None = Field(default=None)
    release_year: int | None = Field(default=None)


class Lines(LineBase, ModeratedBase, table=True):
    """Database table for product lines."""

    __tablename__ = "lines"

    id: int | None = Field(default=None, primary_key=True)

    brand_id: int = Field(foreign_key="brands.id", ondelete="CASCADE", index=True)
