"""
Pydantic schemas for curated list endpoints
"""

from pydantic import BaseModel, Field

from catalog.models.user_list import ListBase
from catalog.schemas.collection import FigureSummary
from catalog.schemas.common import UTCDatetime, UserSummary


class ListCreate(ListBase):
    """Create a list. is_official is honored for admins only."""

    is_official: bool = False


class ListUpdate(BaseModel):
    """Partial list update"""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    is_official: bool | None = None
    is_featured: bool | None = None


class ListItemCreate(BaseModel):
    """Add a figure to a list"""

    figure_id: int


class ListItemResponse(BaseModel):
    """A figure inside a list"""

    figure_id: int
    order: int
    added_at: UTCDatetime
    figure: FigureSummary | None = None

    model_config = {"from_attributes": True}


class ListResponse(ListBase):
    """List as returned by the API"""

    id: int
    is_official: bool
    is_featured: bool
    created_by_id: int
    created_at: UTCDatetime
    created_by: UserSummary | None = None
    item_count: int = 0
    items: list[ListItemResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ListListResponse(BaseModel):
    """Lists matching a filter"""

    lists: list[ListResponse]
