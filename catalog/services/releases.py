"""
Public release calendar.

Lists the figures scheduled for one month, earliest release first. The same
visibility rule as the figure listing applies, so pending figures only show
up for their submitter, for admins asking for scope=all, or for everyone while
SHOW_PENDING_FIGURES is on.
"""

import re
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import EntityKind, VisibilityScope
from catalog.core.errors import ValidationError
from catalog.models.brand import Brands
from catalog.models.figure import FigureImages, Figures
from catalog.models.line import Lines
from catalog.models.user import Users
from catalog.services.system_config import show_pending_figures
from catalog.services.visibility import resolve_visible_set

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


async def _cover_images(db: AsyncSession, figure_ids: list[int]) -> dict[int, str]:
    """First image (lowest order) of each figure."""
    if not figure_ids:
        return {}
    result = await db.execute(
        select(FigureImages)
        .where(FigureImages.figure_id.in_(figure_ids))  # type: ignore[attr-defined]
        .order_by(FigureImages.figure_id, FigureImages.order)  # type: ignore[arg-type]
    )
    covers: dict[int, str] = {}
    for image in result.scalars().all():
        covers.setdefault(image.figure_id, image.url)
    return covers


async def release_calendar(
    db: AsyncSession,
    viewer: Users | None,
    month: str,
    brand_id: int | None = None,
    line_id: int | None = None,
    scope: VisibilityScope = VisibilityScope.DEFAULT,
) -> list[dict[str, Any]]:
    """
    Visible figures whose release date falls in ``month`` ("YYYY-MM").

    Release dates stored as "YYYY-MM" or "YYYY-MM-DD" both match. Figures
    without a release date never appear.

    Returns:
        One dict per figure: the figure's columns plus brand_name, line_name
        and cover_image

    Raises:
        ValidationError: month is not "YYYY-MM"
    """
    if not MONTH_PATTERN.match(month):
        raise ValidationError("month must look like YYYY-MM")

    flag = await show_pending_figures(db)
    visible = resolve_visible_set(viewer, scope, EntityKind.FIGURE, flag)

    query = (
        select(Figures, Brands.name, Lines.name)
        .join(Brands, Brands.id == Figures.brand_id)  # type: ignore[arg-type]
        .join(Lines, Lines.id == Figures.line_id)  # type: ignore[arg-type]
        .where(Figures.release_date.startswith(month, autoescape=True))  # type: ignore[union-attr]
    )
    clause = visible.clause(Figures)
    if clause is not None:
        query = query.where(clause)
    if brand_id is not None:
        query = query.where(Figures.brand_id == brand_id)  # type: ignore[arg-type]
    if line_id is not None:
        query = query.where(Figures.line_id == line_id)  # type: ignore[arg-type]

    result = await db.execute(query.order_by(Figures.release_date, Figures.id))  # type: ignore[arg-type]
    rows = result.all()
    covers = await _cover_images(db, [figure.id for figure, _, _ in rows])

    return [
        {
            **figure.model_dump(),
            "brand_name": brand_name,
            "line_name": line_name,
            "cover_image": covers.get(figure.id),
        }
        for figure, brand_name, line_name in rows
    ]
