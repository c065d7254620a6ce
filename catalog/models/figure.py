"""
SQLModel-based Figure models

FigureBase (shared public fields)
    ├─> Figures (database table, adds moderation and approval columns)
    └─> FigureCreate/FigureUpdate/FigureResponse (API schemas, defined in catalog/schemas)

Dependent rows (images, variants, tag/series/character links) live in their own tables and
are always replaced as a whole set.
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from catalog.config import Currency
from catalog.models.moderation import ModeratedBase
from catalog.models.user import utcnow


class FigureBase(SQLModel):
    """
    Base model with shared public fields for Figures.

    These fields are safe to expose via the API and are shared between:
    - The database table (Figures)
    - API response schemas (FigureResponse)
    """

    name: str = Field(max_length=255)
    description: str | None = Field(default=None)
    sku: str | None = Field(default=None, max_length=100)

    # Dimensions
    height_cm: float | None = Field(default=None)
    width_cm: float | None = Field(default=None)
    depth_cm: float | None = Field(default=None)

    scale: str | None = Field(default=None, max_length=20)
    material: str | None = Field(default=None, max_length=100)
    maker: str | None = Field(default=None, max_length=100)

    # Pricing
    price_mxn: float | None = Field(default=None)
    price_usd: float | None = Field(default=None)
    price_yen: float | None = Field(default=None)
    original_price_currency: Currency | None = Field(default=None)

    # Release ("YYYY-MM" or "YYYY-MM-DD")
    release_date: str | None = Field(default=None, max_length=10, index=True)
    is_released: bool = Field(default=False)
    is_nsfw: bool = Field(default=False)


class Figures(FigureBase, ModeratedBase, table=True):
    """
    Database table for figures.

    Extends FigureBase with:
    - Primary key and brand/line foreign keys
    - Moderation columns (ModeratedBase)
    - Approval stamp, set only while APPROVED
    """

    __tablename__ = "figures"

    id: int | None = Field(default=None, primary_key=True)

    brand_id: int = Field(foreign_key="brands.id", ondelete="CASCADE", index=True)
    line_id: int = Field(foreign_key="lines.id", ondelete="CASCADE", index=True)

    approved_by_id: int | None = Field(
        default=None, foreign_key="users.user_id", ondelete="SET NULL"
    )
    approved_at: datetime | None = Field(default=None)


class FigureImages(SQLModel, table=True):
    """Ordered image URLs of a figure."""

    __tablename__ = "figure_images"

    id: int | None = Field(default=None, primary_key=True)
    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", index=True)
    url: str = Field(max_length=500)
    order: int = Field(default=0)


class FigureTags(SQLModel, table=True):
    """Figure ↔ tag link."""

    __tablename__ = "figure_tags"

    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", primary_key=True)
    tag_id: int = Field(foreign_key="tags.tag_id", ondelete="CASCADE", primary_key=True)


class FigureSeries(SQLModel, table=True):
    """Figure ↔ series link."""

    __tablename__ = "figure_series"

    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", primary_key=True)
    series_id: int = Field(foreign_key="series.id", ondelete="CASCADE", primary_key=True)


class FigureCharacters(SQLModel, table=True):
    """Figure ↔ character link."""

    __tablename__ = "figure_characters"

    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", primary_key=True)
    character_id: int = Field(
        foreign_key="characters.id", ondelete="CASCADE", primary_key=True
    )


class FigureVariants(SQLModel, table=True):
    """
    Alternate release of a figure (exclusive colorway, bonus part, reissue).

    Variants are not moderated on their own; they follow their parent figure
    and are removed with it.
    """

    __tablename__ = "figure_variants"

    id: int | None = Field(default=None, primary_key=True)
    figure_id: int = Field(foreign_key="figures.id", ondelete="CASCADE", index=True)
    name: str = Field(max_length=255)

    price_mxn: float | None = Field(default=None)
    price_usd: float | None = Field(default=None)
    price_yen: float | None = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow)


class FigureVariantImages(SQLModel, table=True):
    """Ordered image URLs of a variant."""

    __tablename__ = "figure_variant_images"

    id: int | None = Field(default=None, primary_key=True)
    variant_id: int = Field(foreign_key="figure_variants.id", ondelete="CASCADE", index=True)
    url: str = Field(max_length=500)
    order: int = Field(default=0)
