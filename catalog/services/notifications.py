"""
Notification service.

Notifications are created by catalog events (currently only a figure being
marked released) and read by their recipient.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import CollectionStatus, NotificationType, settings
from catalog.core.errors import NotFoundError
from catalog.core.logging import get_logger
from catalog.models.collection import UserFigures
from catalog.models.figure import Figures
from catalog.models.notification import Notifications
from catalog.models.user import Users

logger = get_logger(__name__)

# Collection states whose owners still wait for the figure
WAITING_STATUSES = (CollectionStatus.WISHLIST, CollectionStatus.PREORDER)


async def notify_figure_released(db: AsyncSession, figure: Figures) -> int:
    """
    Notify every user tracking ``figure`` as WISHLIST or PREORDER.

    Returns:
        Number of notifications created
    """
    result = await db.execute(
        select(UserFigures.user_id).where(
            UserFigures.figure_id == figure.id,  # type: ignore[arg-type]
            UserFigures.status.in_(WAITING_STATUSES),  # type: ignore[attr-defined]
        )
    )
    user_ids = list(result.scalars().all())

    for user_id in user_ids:
        db.add(
            Notifications(
                user_id=user_id,
                type=NotificationType.FIGURE_RELEASED,
                title=f"{figure.name} is out",
                message=f"{figure.name} has been released.",
                link=f"/figures/{figure.id}",
                figure_id=figure.id,
            )
        )
    await db.flush()

    logger.info("figure_release_notified", figure_id=figure.id, recipients=len(user_ids))
    return len(user_ids)


async def list_notifications(
    db: AsyncSession, user: Users, unread_only: bool = False, limit: int | None = None
) -> tuple[list[Notifications], int]:
    """
    A user's notifications, newest first, plus their unread count.

    ``limit`` is capped at MAX_NOTIFICATIONS.
    """
    limit = min(limit or settings.MAX_NOTIFICATIONS, settings.MAX_NOTIFICATIONS)

    query = select(Notifications).where(Notifications.user_id == user.user_id)  # type: ignore[arg-type]
    if unread_only:
        query = query.where(Notifications.is_read == False)  # type: ignore[arg-type]  # noqa: E712
    query = query.order_by(Notifications.created_at.desc(), Notifications.id.desc()).limit(limit)  # type: ignore[attr-defined,union-attr]
    result = await db.execute(query)

    unread = await db.execute(
        select(func.count(Notifications.id)).where(  # type: ignore[arg-type]
            Notifications.user_id == user.user_id,  # type: ignore[arg-type]
            Notifications.is_read == False,  # type: ignore[arg-type]  # noqa: E712
        )
    )
    return list(result.scalars().all()), unread.scalar() or 0


async def mark_read(db: AsyncSession, user: Users, notification_id: int) -> Notifications:
    """
    Mark one of the user's notifications as read.

    Another user's notification is reported as not found.
    """
    notification = await db.get(Notifications, notification_id)
    if notification is None or notification.user_id != user.user_id:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    await db.flush()
    return notification
