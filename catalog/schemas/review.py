"""
Pydantic schemas for Review endpoints
"""

from pydantic import BaseModel, Field

from catalog.models.review import ReviewBase
from catalog.schemas.common import UTCDatetime, UserSummary


class ReviewCreate(BaseModel):
    """
    Create a review.

    Rating bounds are checked by the review service (422 on 0 or 6).
    """

    figure_id: int
    rating: int
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    images: list[str] = Field(default_factory=list)


class ReviewUpdate(BaseModel):
    """Partial review update"""

    rating: int | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    images: list[str] | None = None


class ReviewImageResponse(BaseModel):
    """One review image"""

    url: str
    order: int

    model_config = {"from_attributes": True}


class ReviewResponse(ReviewBase):
    """Review as returned by the API"""

    id: int
    user_id: int
    figure_id: int
    created_at: UTCDatetime
    updated_at: UTCDatetime
    user: UserSummary | None = None
    images: list[ReviewImageResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ReviewListResponse(BaseModel):
    """Reviews matching a filter"""

    total: int
    avg_rating: float | None = None
    reviews: list[ReviewResponse]
