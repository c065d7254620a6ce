"""
Tags API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.auth import CurrentUser
from catalog.core.database import get_db
from catalog.schemas.entities import TagCreate, TagResponse
from catalog.services import tags as tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[TagResponse])
async def list_tags(
    db: Annotated[AsyncSession, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=100, description="Slug substring")] = None,
) -> list[TagResponse]:
    tags = await tag_service.list_tags(db, search)
    return [TagResponse.model_validate(tag) for tag in tags]


@router.post("/", response_model=TagResponse, status_code=201)
async def create_tag(
    tag_data: TagCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TagResponse:
    """
    Create a new tag.
    """
    tag = await tag_service.create_tag(db, current_user, tag_data.name)
    await db.commit()
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", status_code=204)
async def delete_tag(
    tag_id: Annotated[int, Path(description="Tag ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """
    Delete a tag.
    """
    await tag_service.delete_tag(db, current_user, tag_id)
    await db.commit()
