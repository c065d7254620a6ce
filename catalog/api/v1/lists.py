"""
Curated list API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.auth import CurrentUser
from catalog.core.database import get_db
from catalog.models.user import Users
from catalog.models.user_list import Lists
from catalog.schemas.collection import FigureSummary
from catalog.schemas.common import UserSummary
from catalog.schemas.user_list import (
    ListCreate,
    ListItemCreate,
    ListItemResponse,
    ListListResponse,
    ListResponse,
    ListUpdate,
)
from catalog.services import lists as list_service

router = APIRouter(prefix="/lists", tags=["lists"])


async def _build_responses(
    db: AsyncSession, user_lists: list[Lists], include_items: bool = True
) -> list[ListResponse]:
    """Attach creators, item counts and (optionally) items."""
    list_ids = [user_list.id for user_list in user_lists if user_list.id is not None]
    items = await list_service.load_items(db, list_ids)

    creator_ids = {user_list.created_by_id for user_list in user_lists}
    creators: dict[int, Users] = {}
    if creator_ids:
        result = await db.execute(select(Users).where(Users.user_id.in_(creator_ids)))  # type: ignore[union-attr]
        creators = {user.user_id: user for user in result.scalars().all()}  # type: ignore[misc]

    responses = []
    for user_list in user_lists:
        rows = items.get(user_list.id, [])  # type: ignore[arg-type]
        response = ListResponse.model_validate(user_list)
        creator = creators.get(user_list.created_by_id)
        response.created_by = UserSummary.model_validate(creator) if creator else None
        response.item_count = len(rows)
        if include_items:
            response.items = [
                ListItemResponse(
                    figure_id=item.figure_id,
                    order=item.order,
                    added_at=item.added_at,
                    figure=FigureSummary.model_validate(figure),
                )
                for item, figure in rows
            ]
        responses.append(response)
    return responses


@router.get("/", response_model=ListListResponse)
async def list_lists(
    db: Annotated[AsyncSession, Depends(get_db)],
    featured: Annotated[bool | None, Query(description="Only featured lists")] = None,
    official: Annotated[bool | None, Query(description="Only official lists")] = None,
    user_id: Annotated[int | None, Query(description="Lists created by this user")] = None,
) -> ListListResponse:
    """Lists matching the filters, newest first, without their items."""
    user_lists = await list_service.list_lists(
        db, featured=featured, official=official, user_id=user_id
    )
    return ListListResponse(lists=await _build_responses(db, user_lists, include_items=False))


@router.get("/{list_id}", response_model=ListResponse)
async def get_list(
    list_id: Annotated[int, Path(description="List ID")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ListResponse:
    user_list = await list_service.get_list(db, list_id)
    return (await _build_responses(db, [user_list]))[0]


@router.post("/", response_model=ListResponse, status_code=201)
async def create_list(
    payload: ListCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ListResponse:
    """Create a list. ``is_official`` is ignored unless you are an admin."""
    user_list = await list_service.create_list(
        db, current_user, payload.name, payload.description, payload.is_official
    )
    await db.commit()
    return (await _build_responses(db, [user_list]))[0]


@router.patch("/{list_id}", response_model=ListResponse)
async def update_list(
    list_id: Annotated[int, Path(description="List ID")],
    payload: ListUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ListResponse:
    """
    Update a list you created (admins may update any).

    ``is_official`` needs ADMIN and ``is_featured`` needs SUPERADMIN; without
    them those flags keep their stored values.
    """
    user_list = await list_service.update_list(
        db, current_user, list_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return (await _build_responses(db, [user_list]))[0]


@router.delete("/{list_id}", status_code=204)
async def delete_list(
    list_id: Annotated[int, Path(description="List ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await list_service.delete_list(db, current_user, list_id)
    await db.commit()


@router.post("/{list_id}/items", response_model=ListResponse, status_code=201)
async def add_list_item(
    list_id: Annotated[int, Path(description="List ID")],
    payload: ListItemCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ListResponse:
    """Append a figure to the end of a list."""
    await list_service.add_item(db, current_user, list_id, payload.figure_id)
    await db.commit()
    user_list = await list_service.get_list(db, list_id)
    return (await _build_responses(db, [user_list]))[0]


@router.delete("/{list_id}/items/{figure_id}", status_code=204)
async def remove_list_item(
    list_id: Annotated[int, Path(description="List ID")],
    figure_id: Annotated[int, Path(description="Figure ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await list_service.remove_item(db, current_user, list_id, figure_id)
    await db.commit()
