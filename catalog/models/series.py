"""
SQLModel-based Series models

A series is the franchise (anime, game, film) a figure or character comes from.
"""

from sqlmodel import Field, SQLModel

from catalog.models.moderation import ModeratedBase


class SeriesBase(SQLModel):
    """Public series fields."""

    name: str = Field(max_length=255)
    description: str | None = Field(default=None)


class Series(SeriesBase, ModeratedBase, table=True):
    """Database table for series."""

    __tablename__ = "series"

    id: int | None = Field(default=None, primary_key=True)
