"""
Collection ledger.

A user tracks a figure with exactly one entry (WISHLIST, PREORDER or OWNED);
moving between states updates that entry in place. Entries belong to their
user alone: nobody else, admins included, may change or remove them.

The preorder calendar groups PREORDER entries by month and sums their prices.
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import TBA_MONTH, CollectionStatus
from catalog.core.database import flush_or_conflict
from catalog.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import require_user
from catalog.models.collection import UserFigures
from catalog.models.figure import Figures
from catalog.models.user import Users, utcnow
from catalog.schemas.collection import (
    CalendarEntry,
    CalendarMonth,
    CalendarResponse,
    CollectionEntryResponse,
    FigureSummary,
)

logger = get_logger(__name__)


def _check_price(price: float | None) -> None:
    if price is not None and price < 0:
        raise ValidationError("user_price cannot be negative")


async def _get_owned_entry(db: AsyncSession, user: Users | None, entry_id: int) -> UserFigures:
    user = require_user(user)
    entry = await db.get(UserFigures, entry_id)
    if entry is None:
        raise NotFoundError("Collection entry not found")
    if entry.user_id != user.user_id:
        raise ForbiddenError("Collection entry belongs to another user")
    return entry


async def track(
    db: AsyncSession,
    user: Users | None,
    figure_id: int,
    status: CollectionStatus,
    user_price: float | None = None,
    preorder_month: str | None = None,
) -> UserFigures:
    """
    Start tracking a figure.

    The figure only has to exist; its moderation state does not matter. A
    PREORDER without a month takes the figure's release date.

    Raises:
        NotFoundError: figure does not exist
        ConflictError: the user already tracks this figure
        ValidationError: negative price
    """
    user = require_user(user)
    _check_price(user_price)

    figure = await db.get(Figures, figure_id)
    if figure is None:
        raise NotFoundError("Figure not found")

    existing = await db.execute(
        select(UserFigures.id).where(
            UserFigures.user_id == user.user_id,  # type: ignore[arg-type]
            UserFigures.figure_id == figure_id,  # type: ignore[arg-type]
        )
    )
    if existing.first() is not None:
        raise ConflictError("Figure is already in your collection")

    if status == CollectionStatus.PREORDER and not preorder_month:
        preorder_month = figure.release_date

    entry = UserFigures(
        user_id=user.user_id,
        figure_id=figure_id,
        status=status,
        user_price=user_price,
        preorder_month=preorder_month,
    )
    db.add(entry)
    await flush_or_conflict(db, "Figure is already in your collection")

    logger.info(
        "collection_entry_tracked",
        entry_id=entry.id,
        user_id=user.user_id,
        figure_id=figure_id,
        status=status,
    )
    return entry


async def retarget(
    db: AsyncSession, user: Users | None, entry_id: int, fields: dict[str, Any]
) -> UserFigures:
    """
    Partially update an entry (owner only).

    Omitted keys keep their values. When the result is a PREORDER with no
    month and the request did not mention the month, the figure's release
    date is used.
    """
    entry = await _get_owned_entry(db, user, entry_id)

    if fields.get("status", entry.status) is None:
        raise ValidationError("status cannot be cleared")
    _check_price(fields.get("user_price"))

    for key, value in fields.items():
        setattr(entry, key, None if value == "" else value)

    if (
        entry.status == CollectionStatus.PREORDER
        and not entry.preorder_month
        and "preorder_month" not in fields
    ):
        figure = await db.get(Figures, entry.figure_id)
        entry.preorder_month = figure.release_date if figure else None

    entry.updated_at = utcnow()
    await db.flush()

    logger.info(
        "collection_entry_retargeted",
        entry_id=entry.id,
        status=entry.status,
        fields=sorted(fields),
    )
    return entry


async def untrack(db: AsyncSession, user: Users | None, entry_id: int) -> None:
    """Delete an entry (owner only)."""
    entry = await _get_owned_entry(db, user, entry_id)
    await db.delete(entry)
    await db.flush()
    logger.info("collection_entry_untracked", entry_id=entry_id, figure_id=entry.figure_id)


async def load_entries(
    db: AsyncSession, user: Users, status: CollectionStatus | None = None
) -> list[tuple[UserFigures, Figures]]:
    """The user's entries joined with their figures, oldest first."""
    query = (
        select(UserFigures, Figures)
        .join(Figures, Figures.id == UserFigures.figure_id)  # type: ignore[arg-type]
        .where(UserFigures.user_id == user.user_id)  # type: ignore[arg-type]
    )
    if status is not None:
        query = query.where(UserFigures.status == status)  # type: ignore[arg-type]
    result = await db.execute(query.order_by(UserFigures.id))  # type: ignore[arg-type]
    return [(entry, figure) for entry, figure in result.all()]


def entry_response(entry: UserFigures, figure: Figures | None = None) -> CollectionEntryResponse:
    response = CollectionEntryResponse.model_validate(entry)
    if figure is not None:
        response.figure = FigureSummary.model_validate(figure)
    return response


def count_by_status(rows: Iterable[tuple[UserFigures, Figures]]) -> dict[CollectionStatus, int]:
    totals = dict.fromkeys(CollectionStatus, 0)
    for entry, _ in rows:
        totals[entry.status] += 1
    return totals


def effective_month(entry: UserFigures, figure: Figures | None) -> str:
    """preorder_month, else the figure's release date, else TBA."""
    if entry.preorder_month:
        return entry.preorder_month
    if figure is not None and figure.release_date:
        return figure.release_date
    return TBA_MONTH


def effective_price(entry: UserFigures, figure: Figures | None) -> float:
    """user_price, else the figure's MXN price, else 0."""
    if entry.user_price is not None:
        return float(entry.user_price)
    if figure is not None and figure.price_mxn is not None:
        return float(figure.price_mxn)
    return 0.0


def _month_sort_key(month: str) -> tuple[bool, str]:
    return (month == TBA_MONTH, month)


def aggregate_preorders(
    rows: Iterable[tuple[UserFigures, Figures | None]], month: str | None = None
) -> CalendarResponse:
    """
    Group PREORDER entries by effective month.

    Entries in any other state are skipped. Totals do not depend on input
    order; months come out ascending with TBA last, entries by id.

    Args:
        rows: (entry, figure) pairs
        month: keep only this effective month

    Returns:
        Per-month entries and sums, plus the grand total and count
    """
    buckets: dict[str, list[CalendarEntry]] = defaultdict(list)
    for entry, figure in rows:
        if entry.status != CollectionStatus.PREORDER:
            continue
        key = effective_month(entry, figure)
        if month is not None and key != month:
            continue
        buckets[key].append(
            CalendarEntry(
                entry=entry_response(entry, figure),
                effective_month=key,
                effective_price=effective_price(entry, figure),
            )
        )

    months = []
    for key in sorted(buckets, key=_month_sort_key):
        entries = sorted(buckets[key], key=lambda item: item.entry.id)
        months.append(
            CalendarMonth(
                month=key,
                entries=entries,
                total=sum(item.effective_price for item in entries),
            )
        )

    return CalendarResponse(
        months=months,
        total_value=sum(m.total for m in months),
        total_count=sum(len(m.entries) for m in months),
    )


async def preorder_calendar(
    db: AsyncSession, user: Users | None, month: str | None = None
) -> CalendarResponse:
    user = require_user(user)
    rows = await load_entries(db, user, CollectionStatus.PREORDER)
    return aggregate_preorders(rows, month)
