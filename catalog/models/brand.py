"""
SQLModel-based Brand models

BrandBase (shared public fields)
    ├─> Brands (database table, adds moderation columns)
    └─> BrandCreate/BrandUpdate/BrandResponse (API schemas, defined in catalog/schemas)
"""

from sqlmodel import Field, SQLModel

from catalog.models.moderation import ModeratedBase


class BrandBase(SQLModel):
    """Public brand fields."""

    name: str = Field(max_length=255)
    description: str | None = Field(default=None)
    country: str | None = Field(default=None, max_length=60)


class Brands(BrandBase, ModeratedBase, table=True):
    """Database table for brands (figure manufacturers)."""

    __tablename__ = "brands"

    id: int | None = Field(default=None, primary_key=True)
