"""
Common query parameter models for API endpoints.

These Pydantic models are used with FastAPI's Depends() to provide reusable
query parameter sets, reducing code duplication across routes.
"""

from pydantic import BaseModel, Field, computed_field

from catalog.config import VisibilityScope, settings


class PaginationParams(BaseModel):
    """Common pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number")
    per_page: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def offset(self) -> int:
        """Calculate offset from page and per_page."""
        return (self.page - 1) * self.per_page


class ScopeParams(BaseModel):
    """Visibility scope; ``all`` only has an effect for admins."""

    scope: VisibilityScope = Field(default=VisibilityScope.DEFAULT, description="default or all")


class EntityFilterParams(BaseModel):
    """
    Listing filters for moderated kinds.

    Each kind honors its own subset (figures: all of them; lines: brand_id;
    characters: series_id) and ignores the rest.
    """

    brand_id: int | None = Field(default=None, description="Filter by brand")
    line_id: int | None = Field(default=None, description="Filter by line")
    series_id: int | None = Field(default=None, description="Filter by series")
    search: str | None = Field(default=None, max_length=100, description="Name substring")
    is_released: bool | None = Field(default=None, description="Filter by release state")
