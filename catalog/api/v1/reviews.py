"""
Review API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.auth import CurrentUser
from catalog.core.database import get_db
from catalog.models.review import Reviews
from catalog.models.user import Users
from catalog.schemas.common import UserSummary
from catalog.schemas.review import (
    ReviewCreate,
    ReviewImageResponse,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from catalog.services import reviews as review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


async def _build_responses(db: AsyncSession, reviews: list[Reviews]) -> list[ReviewResponse]:
    """Attach author summaries and images to reviews."""
    review_ids = [review.id for review in reviews if review.id is not None]
    images = await review_service.load_review_images(db, review_ids)

    user_ids = {review.user_id for review in reviews}
    authors: dict[int, Users] = {}
    if user_ids:
        result = await db.execute(select(Users).where(Users.user_id.in_(user_ids)))  # type: ignore[union-attr]
        authors = {user.user_id: user for user in result.scalars().all()}  # type: ignore[misc]

    responses = []
    for review in reviews:
        response = ReviewResponse.model_validate(review)
        author = authors.get(review.user_id)
        response.user = UserSummary.model_validate(author) if author else None
        response.images = [
            ReviewImageResponse.model_validate(image) for image in images.get(review.id, [])  # type: ignore[arg-type]
        ]
        responses.append(response)
    return responses


@router.get("/", response_model=ReviewListResponse)
async def list_reviews(
    db: Annotated[AsyncSession, Depends(get_db)],
    figure_id: Annotated[int | None, Query(description="Reviews of this figure")] = None,
    user_id: Annotated[int | None, Query(description="Reviews by this user")] = None,
) -> ReviewListResponse:
    """
    List reviews, newest first.

    ``avg_rating`` is the mean of the figure's ratings when ``figure_id`` is
    given, and null when there are none.
    """
    reviews = await review_service.list_reviews(db, figure_id=figure_id, user_id=user_id)
    avg_rating = (
        await review_service.average_rating(db, figure_id) if figure_id is not None else None
    )
    return ReviewListResponse(
        total=len(reviews),
        avg_rating=avg_rating,
        reviews=await _build_responses(db, reviews),
    )


@router.post("/", response_model=ReviewResponse, status_code=201)
async def create_review(
    payload: ReviewCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewResponse:
    """
    Review a figure you own.

    Images beyond the fifth are dropped.
    """
    review = await review_service.create_review(
        db,
        current_user,
        payload.figure_id,
        payload.rating,
        payload.title,
        payload.description,
        payload.images,
    )
    await db.commit()
    return (await _build_responses(db, [review]))[0]


@router.patch("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: Annotated[int, Path(description="Review ID")],
    payload: ReviewUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewResponse:
    review = await review_service.update_review(
        db, current_user, review_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return (await _build_responses(db, [review]))[0]


@router.delete("/{review_id}", status_code=204)
async def delete_review(
    review_id: Annotated[int, Path(description="Review ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await review_service.delete_review(db, current_user, review_id)
    await db.commit()
