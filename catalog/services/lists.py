"""
Curated lists.

Any user may curate lists of figures. The creator or an admin edits them;
``is_official`` can only be set by admins and ``is_featured`` only by
superadmins. When someone without that right sends either flag, the stored
value is kept and the rest of the update still applies.
"""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.database import flush_or_conflict
from catalog.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import is_admin, is_superadmin, require_user
from catalog.models.figure import Figures
from catalog.models.user import Users
from catalog.models.user_list import ListItems, Lists

logger = get_logger(__name__)


async def get_list(db: AsyncSession, list_id: int) -> Lists:
    user_list = await db.get(Lists, list_id)
    if user_list is None:
        raise NotFoundError("List not found")
    return user_list


async def _get_editable_list(db: AsyncSession, actor: Users | None, list_id: int) -> tuple[Users, Lists]:
    actor = require_user(actor)
    user_list = await get_list(db, list_id)
    if user_list.created_by_id != actor.user_id and not is_admin(actor):
        raise ForbiddenError("You can only modify your own lists")
    return actor, user_list


async def create_list(
    db: AsyncSession,
    actor: Users | None,
    name: str,
    description: str | None = None,
    is_official: bool = False,
) -> Lists:
    """Create a list; ``is_official`` is dropped for non-admins."""
    actor = require_user(actor)
    if not name or not name.strip():
        raise ValidationError("name cannot be empty")

    user_list = Lists(
        name=name,
        description=description,
        is_official=is_official and is_admin(actor),
        created_by_id=actor.user_id,
    )
    db.add(user_list)
    await db.flush()
    logger.info("list_created", list_id=user_list.id, created_by=actor.user_id)
    return user_list


async def list_lists(
    db: AsyncSession,
    featured: bool | None = None,
    official: bool | None = None,
    user_id: int | None = None,
) -> list[Lists]:
    query = select(Lists)
    if featured is not None:
        query = query.where(Lists.is_featured == featured)  # type: ignore[arg-type]
    if official is not None:
        query = query.where(Lists.is_official == official)  # type: ignore[arg-type]
    if user_id is not None:
        query = query.where(Lists.created_by_id == user_id)  # type: ignore[arg-type]
    result = await db.execute(query.order_by(Lists.created_at.desc(), Lists.id.desc()))  # type: ignore[attr-defined,union-attr]
    return list(result.scalars().all())


async def update_list(
    db: AsyncSession, actor: Users | None, list_id: int, fields: dict[str, Any]
) -> Lists:
    """Partially update a list (creator or admin)."""
    actor, user_list = await _get_editable_list(db, actor, list_id)

    values = dict(fields)
    if "is_official" in values and not is_admin(actor):
        values.pop("is_official")
    if "is_featured" in values and not is_superadmin(actor):
        values.pop("is_featured")
    if "name" in values and not values["name"]:
        raise ValidationError("name cannot be empty")
    for flag in ("is_official", "is_featured"):
        if flag in values and values[flag] is None:
            values.pop(flag)

    for key, value in values.items():
        setattr(user_list, key, None if value == "" else value)
    await db.flush()

    logger.info("list_updated", list_id=list_id, fields=sorted(values), by=actor.user_id)
    return user_list


async def delete_list(db: AsyncSession, actor: Users | None, list_id: int) -> None:
    actor, user_list = await _get_editable_list(db, actor, list_id)
    await db.execute(delete(ListItems).where(ListItems.list_id == list_id))  # type: ignore[arg-type]
    await db.delete(user_list)
    await db.flush()
    logger.info("list_deleted", list_id=list_id, by=actor.user_id)


async def add_item(db: AsyncSession, actor: Users | None, list_id: int, figure_id: int) -> ListItems:
    """
    Append a figure to a list.

    Raises:
        NotFoundError: list or figure missing
        ForbiddenError: actor is neither the creator nor an admin
        ConflictError: figure already in the list
    """
    _, user_list = await _get_editable_list(db, actor, list_id)
    if await db.get(Figures, figure_id) is None:
        raise NotFoundError("Figure not found")

    existing = await db.execute(
        select(ListItems.id).where(
            ListItems.list_id == list_id,  # type: ignore[arg-type]
            ListItems.figure_id == figure_id,  # type: ignore[arg-type]
        )
    )
    if existing.first() is not None:
        raise ConflictError("Figure is already in this list")

    max_order = await db.execute(
        select(func.max(ListItems.order)).where(ListItems.list_id == list_id)  # type: ignore[arg-type]
    )
    current = max_order.scalar()
    item = ListItems(
        list_id=user_list.id,
        figure_id=figure_id,
        order=0 if current is None else current + 1,
    )
    db.add(item)
    await flush_or_conflict(db, "Figure is already in this list")
    logger.info("list_item_added", list_id=list_id, figure_id=figure_id, order=item.order)
    return item


async def remove_item(db: AsyncSession, actor: Users | None, list_id: int, figure_id: int) -> None:
    await _get_editable_list(db, actor, list_id)
    result = await db.execute(
        select(ListItems).where(
            ListItems.list_id == list_id,  # type: ignore[arg-type]
            ListItems.figure_id == figure_id,  # type: ignore[arg-type]
        )
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Figure is not in this list")
    await db.delete(item)
    await db.flush()
    logger.info("list_item_removed", list_id=list_id, figure_id=figure_id)


async def load_items(db: AsyncSession, list_ids: list[int]) -> dict[int, list[tuple[ListItems, Figures]]]:
    """Items of each list joined with their figures, in list order."""
    if not list_ids:
        return {}
    result = await db.execute(
        select(ListItems, Figures)
        .join(Figures, Figures.id == ListItems.figure_id)  # type: ignore[arg-type]
        .where(ListItems.list_id.in_(list_ids))  # type: ignore[attr-defined]
        .order_by(ListItems.list_id, ListItems.order)  # type: ignore[arg-type]
    )
    items: dict[int, list[tuple[ListItems, Figures]]] = {list_id: [] for list_id in list_ids}
    for item, figure in result.all():
        items[item.list_id].append((item, figure))
    return items
