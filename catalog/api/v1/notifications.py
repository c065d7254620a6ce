"""
Notification API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import settings
from catalog.core.auth import CurrentUser
from catalog.core.database import get_db
from catalog.schemas.notification import NotificationListResponse, NotificationResponse
from catalog.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    unread: Annotated[bool, Query(description="Only unread notifications")] = False,
    limit: Annotated[
        int, Query(ge=1, le=settings.MAX_NOTIFICATIONS, description="Maximum to return")
    ] = 50,
) -> NotificationListResponse:
    notifications, unread_count = await notification_service.list_notifications(
        db, current_user, unread_only=unread, limit=limit
    )
    return NotificationListResponse(
        unread_count=unread_count,
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: Annotated[int, Path(description="Notification ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationResponse:
    notification = await notification_service.mark_read(db, current_user, notification_id)
    await db.commit()
    return NotificationResponse.model_validate(notification)
