"""
SQLModel-based Tag models

Tags are admin-managed labels; they are not moderated.
"""

from sqlmodel import Field, SQLModel


class TagBase(SQLModel):
    """Public tag fields."""

    name: str = Field(max_length=100)


class Tags(TagBase, table=True):
    """Database table for tags."""

    __tablename__ = "tags"

    tag_id: int | None = Field(default=None, primary_key=True)
    slug: str = Field(max_length=100, unique=True, index=True)
