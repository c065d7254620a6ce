"""
Admin API endpoints.

- POST   /admin/approve               approve or un-approve a moderated row
- GET    /admin/pending               pending counts per kind
- GET    /admin/users                 account listing
- PATCH  /admin/users/{user_id}/role  role change (SUPERADMIN)
- DELETE /admin/users/{user_id}       account deletion (SUPERADMIN)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.dependencies import PaginationParams
from catalog.config import EntityKind
from catalog.core.auth import AdminUser, CurrentUser, SuperAdminUser
from catalog.core.database import get_db
from catalog.schemas.entities import ApprovalRequest, ApprovalResponse, PendingCounts
from catalog.schemas.user import RoleUpdateRequest, UserAdminResponse, UserListResponse
from catalog.services import moderation
from catalog.services import users as user_service
from catalog.services.entity_kinds import get_kind

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/approve", response_model=ApprovalResponse)
async def set_approval(
    payload: ApprovalRequest,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApprovalResponse:
    """
    Approve (``approved: true``) or send back to pending (``approved: false``).

    Figures also record the approving admin and time, cleared on demotion.
    """
    entity = await moderation.set_approval(
        db, current_user, payload.kind, payload.id, payload.approved
    )
    await db.commit()

    label = get_kind(payload.kind).label
    is_figure = payload.kind == EntityKind.FIGURE
    return ApprovalResponse(
        kind=payload.kind,
        id=payload.id,
        status=entity.status,
        approved_by_id=entity.approved_by_id if is_figure else None,
        approved_at=entity.approved_at if is_figure else None,
        message=f"{label} {'approved' if payload.approved else 'moved back to pending'}",
    )


@router.get("/pending", response_model=PendingCounts)
async def get_pending_counts(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PendingCounts:
    """Number of PENDING rows of each kind."""
    counts = await moderation.pending_summary(db, current_user)
    return PendingCounts(**counts)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    current_user: AdminUser,
    pagination: Annotated[PaginationParams, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserListResponse:
    users, total = await user_service.list_users(
        db, current_user, offset=pagination.offset, limit=pagination.per_page
    )
    return UserListResponse(
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        users=[UserAdminResponse.model_validate(user) for user in users],
    )


@router.patch("/users/{user_id}/role", response_model=UserAdminResponse)
async def change_user_role(
    user_id: Annotated[int, Path(description="User ID")],
    payload: RoleUpdateRequest,
    current_user: SuperAdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserAdminResponse:
    """
    Change another user's role.

    Only SUPERADMINs may do this, and never on their own account.
    """
    user = await user_service.change_role(db, current_user, user_id, payload.role)
    await db.commit()
    return UserAdminResponse.model_validate(user)


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: Annotated[int, Path(description="User ID")],
    current_user: SuperAdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await user_service.delete_user(db, current_user, user_id)
    await db.commit()
