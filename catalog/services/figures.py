"""
Figure dependent rows: images, variants, tag/series/character links, detail
aggregates and cascading deletion.
"""

from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import CollectionStatus
from catalog.core.errors import NotFoundError, ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import require_admin_role
from catalog.models.character import Characters
from catalog.models.collection import UserFigures
from catalog.models.figure import (
    FigureCharacters,
    FigureImages,
    Figures,
    FigureSeries,
    FigureTags,
    FigureVariantImages,
    FigureVariants,
)
from catalog.models.notification import Notifications
from catalog.models.review import ReviewImages, Reviews
from catalog.models.series import Series
from catalog.models.tag import Tags
from catalog.models.user import Users
from catalog.models.user_list import ListItems

logger = get_logger(__name__)

# Request field -> (link table, link column, target table, target primary key)
LINK_FIELDS: dict[str, tuple[Any, str, Any, str]] = {
    "tag_ids": (FigureTags, "tag_id", Tags, "tag_id"),
    "series_ids": (FigureSeries, "series_id", Series, "id"),
    "character_ids": (FigureCharacters, "character_id", Characters, "id"),
}

DEPENDENT_FIELDS = frozenset({"images", *LINK_FIELDS})


def _dedupe(ids: Sequence[int]) -> list[int]:
    return list(dict.fromkeys(ids))


async def check_link_targets(db: AsyncSession, links: dict[str, Any]) -> None:
    """
    Verify that every referenced tag, series and character exists.

    Raises:
        NotFoundError: naming the first missing id
    """
    for field_name, ids in links.items():
        if field_name not in LINK_FIELDS or not ids:
            continue
        _, _, target, pk = LINK_FIELDS[field_name]
        wanted = set(ids)
        result = await db.execute(select(getattr(target, pk)).where(getattr(target, pk).in_(wanted)))
        missing = wanted - set(result.scalars().all())
        if missing:
            label = field_name.removesuffix("_ids")
            raise NotFoundError(f"{label} {min(missing)} not found")


async def replace_figure_dependents(db: AsyncSession, figure_id: int, dependents: dict[str, Any]) -> None:
    """
    Replace the image list and link sets named in ``dependents``.

    Keys that are absent keep their current rows; a key with None or an empty
    list removes all rows of that set.
    """
    if "images" in dependents:
        await db.execute(delete(FigureImages).where(FigureImages.figure_id == figure_id))  # type: ignore[arg-type]
        for order, url in enumerate(dependents["images"] or []):
            db.add(FigureImages(figure_id=figure_id, url=url, order=order))

    for field_name, (link_model, column, _, _) in LINK_FIELDS.items():
        if field_name not in dependents:
            continue
        await db.execute(delete(link_model).where(link_model.figure_id == figure_id))
        for target_id in _dedupe(dependents[field_name] or []):
            db.add(link_model(figure_id=figure_id, **{column: target_id}))

    await db.flush()


async def load_variants(db: AsyncSession, figure_id: int) -> list[dict[str, Any]]:
    """Variants of a figure, oldest first, each with its ordered images."""
    result = await db.execute(
        select(FigureVariants)
        .where(FigureVariants.figure_id == figure_id)  # type: ignore[arg-type]
        .order_by(FigureVariants.id)  # type: ignore[arg-type]
    )
    variants = list(result.scalars().all())
    if not variants:
        return []

    images = await db.execute(
        select(FigureVariantImages)
        .where(FigureVariantImages.variant_id.in_([v.id for v in variants]))  # type: ignore[attr-defined]
        .order_by(FigureVariantImages.variant_id, FigureVariantImages.order)  # type: ignore[arg-type]
    )
    by_variant: dict[int, list[FigureVariantImages]] = defaultdict(list)
    for image in images.scalars().all():
        by_variant[image.variant_id].append(image)

    return [{**variant.model_dump(), "images": by_variant[variant.id]} for variant in variants]  # type: ignore[index]


async def create_variant(
    db: AsyncSession,
    actor: Users | None,
    figure_id: int,
    name: str,
    price_mxn: float | None = None,
    price_usd: float | None = None,
    price_yen: float | None = None,
    images: Sequence[str] | None = None,
) -> FigureVariants:
    """
    Add a variant to an existing figure (admin only).

    The parent figure may be in any moderation state.

    Raises:
        ForbiddenError: actor is not an admin
        NotFoundError: figure does not exist
        ValidationError: blank name or a negative price
    """
    actor = require_admin_role(actor)
    if await db.get(Figures, figure_id) is None:
        raise NotFoundError("Figure not found")
    if not name or not name.strip():
        raise ValidationError("Variant name is required")
    for currency, price in (("mxn", price_mxn), ("usd", price_usd), ("yen", price_yen)):
        if price is not None and price < 0:
            raise ValidationError(f"price_{currency} cannot be negative")

    variant = FigureVariants(
        figure_id=figure_id,
        name=name.strip(),
        price_mxn=price_mxn,
        price_usd=price_usd,
        price_yen=price_yen,
    )
    db.add(variant)
    await db.flush()
    for order, url in enumerate(images or []):
        db.add(FigureVariantImages(variant_id=variant.id, url=url, order=order))
    await db.flush()

    logger.info("figure_variant_created", figure_id=figure_id, variant_id=variant.id, by=actor.user_id)
    return variant


async def load_figure_detail(db: AsyncSession, figure: Figures) -> dict[str, Any]:
    """Dependent rows and review/collection aggregates for one figure."""
    images = await db.execute(
        select(FigureImages)
        .where(FigureImages.figure_id == figure.id)  # type: ignore[arg-type]
        .order_by(FigureImages.order)  # type: ignore[arg-type]
    )
    tags = await db.execute(
        select(Tags)
        .join(FigureTags, FigureTags.tag_id == Tags.tag_id)  # type: ignore[arg-type]
        .where(FigureTags.figure_id == figure.id)  # type: ignore[arg-type]
        .order_by(Tags.name)  # type: ignore[arg-type]
    )
    series_ids = await db.execute(
        select(FigureSeries.series_id).where(FigureSeries.figure_id == figure.id)  # type: ignore[arg-type]
    )
    character_ids = await db.execute(
        select(FigureCharacters.character_id).where(FigureCharacters.figure_id == figure.id)  # type: ignore[arg-type]
    )
    review_stats = await db.execute(
        select(func.count(Reviews.id), func.avg(Reviews.rating)).where(  # type: ignore[arg-type]
            Reviews.figure_id == figure.id  # type: ignore[arg-type]
        )
    )
    review_count, avg_rating = review_stats.one()
    collectors = await db.execute(
        select(func.count(UserFigures.id)).where(  # type: ignore[arg-type]
            UserFigures.figure_id == figure.id,  # type: ignore[arg-type]
            UserFigures.status == CollectionStatus.OWNED,  # type: ignore[arg-type]
        )
    )

    return {
        "images": list(images.scalars().all()),
        "variants": await load_variants(db, figure.id),  # type: ignore[arg-type]
        "tags": list(tags.scalars().all()),
        "series_ids": sorted(series_ids.scalars().all()),
        "character_ids": sorted(character_ids.scalars().all()),
        "review_count": review_count or 0,
        "collector_count": collectors.scalar() or 0,
        "avg_rating": float(avg_rating) if avg_rating is not None else None,
    }


async def delete_figures(db: AsyncSession, figure_ids: Sequence[int]) -> None:
    """
    Delete figures together with everything that hangs off them.

    Removes images, variants and their images, links, collection entries,
    reviews and their images, list items and notifications before the figure
    rows themselves.
    """
    if not figure_ids:
        return
    ids = list(figure_ids)

    review_ids = select(Reviews.id).where(Reviews.figure_id.in_(ids))  # type: ignore[union-attr,attr-defined]
    await db.execute(delete(ReviewImages).where(ReviewImages.review_id.in_(review_ids)))  # type: ignore[attr-defined]
    variant_ids = select(FigureVariants.id).where(FigureVariants.figure_id.in_(ids))  # type: ignore[union-attr,attr-defined]
    await db.execute(
        delete(FigureVariantImages).where(FigureVariantImages.variant_id.in_(variant_ids))  # type: ignore[attr-defined]
    )
    for model in (
        Reviews,
        UserFigures,
        ListItems,
        Notifications,
        FigureVariants,
        FigureImages,
        FigureTags,
        FigureSeries,
        FigureCharacters,
    ):
        await db.execute(delete(model).where(model.figure_id.in_(ids)))  # type: ignore[attr-defined]
    await db.execute(delete(Figures).where(Figures.id.in_(ids)))  # type: ignore[union-attr]
