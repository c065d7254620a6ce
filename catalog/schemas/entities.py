"""
Pydantic schemas for the moderated catalog kinds.

Create schemas reuse the table base classes. Update schemas are plain models
whose fields all default to None; routes read them with
``model_dump(exclude_unset=True)`` so an omitted field and an explicit null are
told apart (omitted = keep, null or "" = clear).
"""

import re
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, field_validator

from catalog.config import Currency, EntityKind, ModerationStatus
from catalog.models.brand import BrandBase
from catalog.models.character import CharacterBase
from catalog.models.figure import FigureBase
from catalog.models.line import LineBase
from catalog.models.moderation import ModeratedBase
from catalog.models.series import SeriesBase
from catalog.models.tag import TagBase
from catalog.schemas.common import UTCDatetime, UTCDatetimeOptional

RELEASE_DATE_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])(-\d{2})?$")


def _check_release_date(v: str | None) -> str | None:
    if v is None or v.strip() == "":
        return v
    if not RELEASE_DATE_PATTERN.match(v.strip()):
        raise ValueError("release_date must look like YYYY-MM or YYYY-MM-DD")
    return v.strip()


# ===== Shared response fields =====


class ModeratedResponse(ModeratedBase):
    """Moderation columns as returned by the API"""

    id: int
    created_at: UTCDatetime
    updated_at: UTCDatetime

    model_config = {"from_attributes": True}


T = TypeVar("T")


class EntityListResponse(BaseModel, Generic[T]):
    """Paginated listing of one moderated kind"""

    total: int
    page: int
    per_page: int
    items: list[T]


# ===== Brands =====


class BrandCreate(BrandBase):
    """Schema for creating a brand"""


class BrandUpdate(BaseModel):
    """Partial brand update"""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    country: str | None = Field(default=None, max_length=60)


class BrandResponse(BrandBase, ModeratedResponse):
    """Brand as returned by the API"""


# ===== Lines =====


class LineCreate(LineBase):
    """Schema for creating a line"""

    brand_id: int


class LineUpdate(BaseModel):
    """Partial line update"""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    release_year: int | None = None
    brand_id: int | None = None


class LineResponse(LineBase, ModeratedResponse):
    """Line as returned by the API"""

    brand_id: int


# ===== Series =====


class SeriesCreate(SeriesBase):
    """Schema for creating a series"""


class SeriesUpdate(BaseModel):
    """Partial series update"""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None


class SeriesResponse(SeriesBase, ModeratedResponse):
    """Series as returned by the API"""


# ===== Characters =====


class CharacterCreate(CharacterBase):
    """Schema for creating a character"""

    series_id: int | None = None


class CharacterUpdate(BaseModel):
    """Partial character update"""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    series_id: int | None = None


class CharacterResponse(CharacterBase, ModeratedResponse):
    """Character as returned by the API"""

    series_id: int | None = None


# ===== Tags =====


class TagCreate(TagBase):
    """Schema for creating a tag"""


class TagResponse(TagBase):
    """Tag as returned by the API"""

    tag_id: int
    slug: str

    model_config = {"from_attributes": True}


# ===== Figures =====


class FigureCreate(FigureBase):
    """
    Schema for creating a figure.

    Image URLs and link ids are stored in dependent tables in the same
    transaction as the figure itself.
    """

    brand_id: int
    line_id: int
    images: list[str] = Field(default_factory=list)
    tag_ids: list[int] = Field(default_factory=list)
    series_ids: list[int] = Field(default_factory=list)
    character_ids: list[int] = Field(default_factory=list)

    @field_validator("release_date")
    @classmethod
    def validate_release_date(cls, v: str | None) -> str | None:
        return _check_release_date(v)


class FigureUpdate(BaseModel):
    """
    Partial figure update.

    List fields, when present, replace the whole previous set.
    """

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    sku: str | None = Field(default=None, max_length=100)
    height_cm: float | None = None
    width_cm: float | None = None
    depth_cm: float | None = None
    scale: str | None = Field(default=None, max_length=20)
    material: str | None = Field(default=None, max_length=100)
    maker: str | None = Field(default=None, max_length=100)
    price_mxn: float | None = None
    price_usd: float | None = None
    price_yen: float | None = None
    original_price_currency: Currency | None = None
    release_date: str | None = Field(default=None, max_length=10)
    is_released: bool | None = None
    is_nsfw: bool | None = None
    brand_id: int | None = None
    line_id: int | None = None
    images: list[str] | None = None
    tag_ids: list[int] | None = None
    series_ids: list[int] | None = None
    character_ids: list[int] | None = None

    @field_validator("release_date")
    @classmethod
    def validate_release_date(cls, v: str | None) -> str | None:
        return _check_release_date(v)


class FigureImageResponse(BaseModel):
    """One figure image"""

    url: str
    order: int

    model_config = {"from_attributes": True}


class FigureVariantCreate(BaseModel):
    """
    Add a variant to a figure.

    Image URLs keep the order they are sent in.
    """

    name: str = Field(..., min_length=1, max_length=255)
    price_mxn: float | None = Field(default=None, ge=0)
    price_usd: float | None = Field(default=None, ge=0)
    price_yen: float | None = Field(default=None, ge=0)
    images: list[str] = Field(default_factory=list)


class FigureVariantResponse(BaseModel):
    """Variant with its images"""

    id: int
    figure_id: int
    name: str
    price_mxn: float | None = None
    price_usd: float | None = None
    price_yen: float | None = None
    images: list[FigureImageResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class FigureResponse(FigureBase, ModeratedResponse):
    """Figure as returned in listings"""

    brand_id: int
    line_id: int
    approved_by_id: int | None = None
    approved_at: UTCDatetimeOptional = None


class FigureDetailResponse(FigureResponse):
    """Single figure with its dependent rows and review aggregate"""

    images: list[FigureImageResponse] = Field(default_factory=list)
    variants: list[FigureVariantResponse] = Field(default_factory=list)
    tags: list[TagResponse] = Field(default_factory=list)
    series_ids: list[int] = Field(default_factory=list)
    character_ids: list[int] = Field(default_factory=list)
    review_count: int = 0
    collector_count: int = 0
    avg_rating: float | None = Field(
        default=None, description="Mean review rating; null when there are no reviews"
    )


# ===== Moderation =====


class ApprovalRequest(BaseModel):
    """Approve (or send back to pending) one moderated row"""

    kind: EntityKind
    id: int
    approved: bool


class ApprovalResponse(BaseModel):
    """Result of an approval change"""

    kind: EntityKind
    id: int
    status: ModerationStatus
    approved_by_id: int | None = None
    approved_at: UTCDatetimeOptional = None
    message: str


class PendingCounts(BaseModel):
    """Number of PENDING rows per kind"""

    figures: int
    brands: int
    lines: int
    series: int
    characters: int
    total: int


# ===== Release calendar =====


class ReleaseFigure(FigureResponse):
    """Figure scheduled in the release calendar"""

    brand_name: str
    line_name: str
    cover_image: str | None = None


class ReleaseCalendarResponse(BaseModel):
    """Figures releasing in one month, earliest first"""

    month: str
    total: int
    figures: list[ReleaseFigure]
