"""
Pydantic schemas for the collection ledger and the preorder calendar
"""

from pydantic import BaseModel, Field

from catalog.config import CollectionStatus
from catalog.models.collection import UserFigureBase
from catalog.schemas.common import UTCDatetime


class CollectionEntryCreate(BaseModel):
    """Start tracking a figure"""

    figure_id: int
    status: CollectionStatus
    user_price: float | None = None
    preorder_month: str | None = Field(default=None, max_length=10)


class CollectionEntryUpdate(BaseModel):
    """Partial update of an entry; omitted fields keep their value"""

    status: CollectionStatus | None = None
    user_price: float | None = None
    preorder_month: str | None = Field(default=None, max_length=10)


class FigureSummary(BaseModel):
    """Figure fields needed next to a collection entry"""

    id: int
    name: str
    slug: str
    release_date: str | None = None
    price_mxn: float | None = None
    is_released: bool = False

    model_config = {"from_attributes": True}


class CollectionEntryResponse(UserFigureBase):
    """Collection entry as returned by the API"""

    id: int
    user_id: int
    figure_id: int
    created_at: UTCDatetime
    updated_at: UTCDatetime
    figure: FigureSummary | None = None

    model_config = {"from_attributes": True}


class CollectionListResponse(BaseModel):
    """A user's entries plus per-status counts"""

    entries: list[CollectionEntryResponse]
    totals: dict[CollectionStatus, int]


class CalendarEntry(BaseModel):
    """One preorder with its resolved month key and price"""

    entry: CollectionEntryResponse
    effective_month: str
    effective_price: float


class CalendarMonth(BaseModel):
    """Preorders falling in one month bucket"""

    month: str
    entries: list[CalendarEntry]
    total: float


class CalendarResponse(BaseModel):
    """Preorders grouped by month with per-month and grand totals"""

    months: list[CalendarMonth]
    total_value: float
    total_count: int
