"""
Collection API endpoints.

Every route acts on the current user's own entries.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import CollectionStatus
from catalog.core.auth import CurrentUser
from catalog.core.database import get_db
from catalog.models.figure import Figures
from catalog.schemas.collection import (
    CalendarResponse,
    CollectionEntryCreate,
    CollectionEntryResponse,
    CollectionEntryUpdate,
    CollectionListResponse,
)
from catalog.services import collection

router = APIRouter(prefix="/collection", tags=["collection"])


@router.get("/", response_model=CollectionListResponse)
async def list_collection(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    status: Annotated[CollectionStatus | None, Query(description="Only this state")] = None,
) -> CollectionListResponse:
    """
    The current user's entries with their figures.

    ``totals`` always counts every state, regardless of the status filter.
    """
    all_rows = await collection.load_entries(db, current_user)
    rows = [row for row in all_rows if status is None or row[0].status == status]
    return CollectionListResponse(
        entries=[collection.entry_response(entry, figure) for entry, figure in rows],
        totals=collection.count_by_status(all_rows),
    )


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    month: Annotated[str | None, Query(max_length=10, description="Only this month key")] = None,
) -> CalendarResponse:
    """Preorders grouped by month (preorder month, else release date, else TBA)."""
    return await collection.preorder_calendar(db, current_user, month)


@router.post("/", response_model=CollectionEntryResponse, status_code=201)
async def track_figure(
    payload: CollectionEntryCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CollectionEntryResponse:
    entry = await collection.track(
        db,
        current_user,
        payload.figure_id,
        payload.status,
        user_price=payload.user_price,
        preorder_month=payload.preorder_month,
    )
    await db.commit()
    return collection.entry_response(entry, await db.get(Figures, entry.figure_id))


@router.patch("/{entry_id}", response_model=CollectionEntryResponse)
async def retarget_entry(
    entry_id: Annotated[int, Path(description="Collection entry ID")],
    payload: CollectionEntryUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CollectionEntryResponse:
    """Change status, price or month; omitted fields keep their values."""
    entry = await collection.retarget(
        db, current_user, entry_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return collection.entry_response(entry, await db.get(Figures, entry.figure_id))


@router.delete("/{entry_id}", status_code=204)
async def untrack_figure(
    entry_id: Annotated[int, Path(description="Collection entry ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await collection.untrack(db, current_user, entry_id)
    await db.commit()
