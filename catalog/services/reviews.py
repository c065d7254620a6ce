"""
Review gate.

A review may only be written by someone who owns the figure (an OWNED
collection entry), at most once per figure, with a rating from 1 to 5.
Extra images beyond MAX_REVIEW_IMAGES are dropped without error.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import CollectionStatus, settings
from catalog.core.database import flush_or_conflict
from catalog.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import is_admin, require_user
from catalog.models.collection import UserFigures
from catalog.models.figure import Figures
from catalog.models.review import ReviewImages, Reviews
from catalog.models.user import Users, utcnow

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating: Any) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("rating must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


def truncate_images(images: Sequence[str] | None) -> list[str]:
    return list(images or [])[: settings.MAX_REVIEW_IMAGES]


async def _replace_images(db: AsyncSession, review_id: int, images: Sequence[str] | None) -> None:
    await db.execute(delete(ReviewImages).where(ReviewImages.review_id == review_id))  # type: ignore[arg-type]
    for order, url in enumerate(truncate_images(images)):
        db.add(ReviewImages(review_id=review_id, url=url, order=order))
    await db.flush()


async def _get_editable_review(db: AsyncSession, actor: Users | None, review_id: int) -> Reviews:
    actor = require_user(actor)
    review = await db.get(Reviews, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    if review.user_id != actor.user_id and not is_admin(actor):
        raise ForbiddenError("You can only modify your own reviews")
    return review


async def create_review(
    db: AsyncSession,
    user: Users | None,
    figure_id: int,
    rating: int,
    title: str,
    description: str,
    images: Sequence[str] | None = None,
) -> Reviews:
    """
    Write a review of an owned figure.

    Raises:
        ValidationError: rating outside 1..5
        NotFoundError: figure does not exist
        ForbiddenError: the user has no OWNED entry for the figure
        ConflictError: the user already reviewed the figure
    """
    user = require_user(user)
    validate_rating(rating)

    if await db.get(Figures, figure_id) is None:
        raise NotFoundError("Figure not found")

    owned = await db.execute(
        select(UserFigures.id).where(
            UserFigures.user_id == user.user_id,  # type: ignore[arg-type]
            UserFigures.figure_id == figure_id,  # type: ignore[arg-type]
            UserFigures.status == CollectionStatus.OWNED,  # type: ignore[arg-type]
        )
    )
    if owned.first() is None:
        raise ForbiddenError("You can only review figures you own")

    existing = await db.execute(
        select(Reviews.id).where(
            Reviews.user_id == user.user_id,  # type: ignore[arg-type]
            Reviews.figure_id == figure_id,  # type: ignore[arg-type]
        )
    )
    if existing.first() is not None:
        raise ConflictError("You have already reviewed this figure")

    review = Reviews(
        user_id=user.user_id,
        figure_id=figure_id,
        rating=rating,
        title=title,
        description=description,
    )
    db.add(review)
    await flush_or_conflict(db, "You have already reviewed this figure")
    await _replace_images(db, review.id, images)  # type: ignore[arg-type]

    logger.info(
        "review_created",
        review_id=review.id,
        figure_id=figure_id,
        user_id=user.user_id,
        rating=rating,
    )
    return review


async def update_review(
    db: AsyncSession, actor: Users | None, review_id: int, fields: dict[str, Any]
) -> Reviews:
    """Partially update a review (author or admin); images, when sent, replace the set."""
    review = await _get_editable_review(db, actor, review_id)

    values = dict(fields)
    replace_images = "images" in values
    images = values.pop("images", None)
    if "rating" in values:
        validate_rating(values["rating"])
    for key in ("title", "description"):
        if key in values and not values[key]:
            raise ValidationError(f"{key} cannot be empty")

    for key, value in values.items():
        setattr(review, key, value)
    review.updated_at = utcnow()
    await db.flush()

    if replace_images:
        await _replace_images(db, review.id, images)  # type: ignore[arg-type]

    logger.info("review_updated", review_id=review.id, fields=sorted(fields))
    return review


async def delete_review(db: AsyncSession, actor: Users | None, review_id: int) -> None:
    """Delete a review and its images (author or admin)."""
    review = await _get_editable_review(db, actor, review_id)
    await db.execute(delete(ReviewImages).where(ReviewImages.review_id == review_id))  # type: ignore[arg-type]
    await db.delete(review)
    await db.flush()
    logger.info("review_deleted", review_id=review_id, figure_id=review.figure_id)


async def list_reviews(
    db: AsyncSession, figure_id: int | None = None, user_id: int | None = None
) -> list[Reviews]:
    """Reviews filtered by figure and/or author, newest first."""
    query = select(Reviews)
    if figure_id is not None:
        query = query.where(Reviews.figure_id == figure_id)  # type: ignore[arg-type]
    if user_id is not None:
        query = query.where(Reviews.user_id == user_id)  # type: ignore[arg-type]
    result = await db.execute(query.order_by(Reviews.created_at.desc(), Reviews.id.desc()))  # type: ignore[attr-defined,union-attr]
    return list(result.scalars().all())


async def load_review_images(db: AsyncSession, review_ids: Sequence[int]) -> dict[int, list[ReviewImages]]:
    if not review_ids:
        return {}
    result = await db.execute(
        select(ReviewImages)
        .where(ReviewImages.review_id.in_(review_ids))  # type: ignore[attr-defined]
        .order_by(ReviewImages.review_id, ReviewImages.order)  # type: ignore[arg-type]
    )
    images: dict[int, list[ReviewImages]] = {review_id: [] for review_id in review_ids}
    for image in result.scalars().all():
        images[image.review_id].append(image)
    return images


async def average_rating(db: AsyncSession, figure_id: int) -> float | None:
    """Mean rating of a figure; None when it has no reviews."""
    result = await db.execute(
        select(func.avg(Reviews.rating)).where(Reviews.figure_id == figure_id)  # type: ignore[arg-type]
    )
    avg = result.scalar()
    return float(avg) if avg is not None else None
