"""
Release calendar endpoints.

Public: anonymous visitors see approved figures; signed-in users also see
their own pending submissions.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.dependencies import ScopeParams
from catalog.core.auth import OptionalCurrentUser
from catalog.core.database import get_db
from catalog.schemas.entities import ReleaseCalendarResponse, ReleaseFigure
from catalog.services.releases import release_calendar

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/releases", response_model=ReleaseCalendarResponse)
async def list_releases(
    month: Annotated[str, Query(max_length=7, description="Month as YYYY-MM")],
    current_user: OptionalCurrentUser,
    scope: Annotated[ScopeParams, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
    brand_id: Annotated[int | None, Query(description="Filter by brand")] = None,
    line_id: Annotated[int | None, Query(description="Filter by line")] = None,
) -> ReleaseCalendarResponse:
    """Figures whose release date falls in ``month``, earliest first."""
    rows = await release_calendar(
        db, current_user, month, brand_id=brand_id, line_id=line_id, scope=scope.scope
    )
    return ReleaseCalendarResponse(
        month=month,
        total=len(rows),
        figures=[ReleaseFigure.model_validate(row) for row in rows],
    )
