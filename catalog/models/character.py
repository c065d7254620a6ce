"""
SQLModel-based Character models
"""

from sqlmodel import Field, SQLModel

from catalog.models.moderation import ModeratedBase


class CharacterBase(SQLModel):
    """Public character fields."""

    name: str = Field(max_length=255)
    description: str | None = Field(default=None)


class Characters(CharacterBase, ModeratedBase, table=True):
    """
    Database table for characters.

    Deleting a series keeps its characters and clears series_id.
    """

    __tablename__ = "characters"

    id: int | None = Field(default=None, primary_key=True)

    series_id: int | None = Field(
        default=None, foreign_key="series.id", ondelete="SET NULL", index=True
    )
