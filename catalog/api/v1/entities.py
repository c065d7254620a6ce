"""
Catalog API endpoints for the five moderated kinds.

Figures, brands, lines, series and characters expose the same five routes, so
one factory builds a router per kind from its schemas:

- GET    /{kind}/        visibility-filtered listing (?scope=all for admins)
- GET    /{kind}/{id}    single row, 404 when not visible
- POST   /{kind}/        submit (PENDING for users, APPROVED for admins)
- PATCH  /{kind}/{id}    partial update (admin)
- DELETE /{kind}/{id}    cascading delete (admin)

Figures also take variants: POST /figures/{id}/variants (admin).
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.dependencies import EntityFilterParams, PaginationParams, ScopeParams
from catalog.config import EntityKind
from catalog.core.auth import CurrentUser, OptionalCurrentUser
from catalog.core.database import get_db
from catalog.schemas.entities import (
    BrandCreate,
    BrandResponse,
    BrandUpdate,
    CharacterCreate,
    CharacterResponse,
    CharacterUpdate,
    EntityListResponse,
    FigureCreate,
    FigureDetailResponse,
    FigureResponse,
    FigureUpdate,
    FigureVariantCreate,
    FigureVariantResponse,
    LineCreate,
    LineResponse,
    LineUpdate,
    SeriesCreate,
    SeriesResponse,
    SeriesUpdate,
)
from catalog.services import moderation
from catalog.services.entity_kinds import get_kind
from catalog.services import figures as figure_rows


async def render_entity(db: AsyncSession, kind: EntityKind, entity: Any, schema: type[BaseModel]) -> Any:
    """Build the response for one row; figures include their dependent rows."""
    if kind == EntityKind.FIGURE:
        detail = await figure_rows.load_figure_detail(db, entity)
        return FigureDetailResponse.model_validate({**entity.model_dump(), **detail}, from_attributes=True)
    return schema.model_validate(entity)


def build_entity_router(
    kind: EntityKind,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    list_schema: type[BaseModel],
    detail_schema: type[BaseModel],
) -> APIRouter:
    spec = get_kind(kind)
    router = APIRouter(prefix=f"/{spec.path}", tags=[spec.path])

    @router.get("/", response_model=EntityListResponse[list_schema])  # type: ignore[valid-type]
    async def list_entities(
        current_user: OptionalCurrentUser,
        pagination: Annotated[PaginationParams, Depends()],
        scope: Annotated[ScopeParams, Depends()],
        filters: Annotated[EntityFilterParams, Depends()],
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> Any:
        items, total = await moderation.list_entities(
            db,
            current_user,
            kind,
            scope=scope.scope,
            filters=filters.model_dump(exclude_none=True),
            offset=pagination.offset,
            limit=pagination.per_page,
        )
        return EntityListResponse[list_schema](  # type: ignore[valid-type]
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
            items=[list_schema.model_validate(item) for item in items],
        )

    @router.get("/{entity_id}", response_model=detail_schema)
    async def get_entity(
        entity_id: Annotated[int, Path(description=f"{spec.label} ID")],
        current_user: OptionalCurrentUser,
        scope: Annotated[ScopeParams, Depends()],
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> Any:
        entity = await moderation.get_visible_entity(db, current_user, kind, entity_id, scope.scope)
        return await render_entity(db, kind, entity, detail_schema)

    @router.post("/", response_model=detail_schema, status_code=201)
    async def create_entity(
        payload: create_schema,  # type: ignore[valid-type]
        current_user: CurrentUser,
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> Any:
        entity = await moderation.create_entity(db, current_user, kind, payload.model_dump())
        await db.commit()
        return await render_entity(db, kind, entity, detail_schema)

    @router.patch("/{entity_id}", response_model=detail_schema)
    async def update_entity(
        entity_id: Annotated[int, Path(description=f"{spec.label} ID")],
        payload: update_schema,  # type: ignore[valid-type]
        current_user: CurrentUser,
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> Any:
        entity = await moderation.update_entity(
            db, current_user, kind, entity_id, payload.model_dump(exclude_unset=True)
        )
        await db.commit()
        return await render_entity(db, kind, entity, detail_schema)

    @router.delete("/{entity_id}", status_code=204)
    async def delete_entity(
        entity_id: Annotated[int, Path(description=f"{spec.label} ID")],
        current_user: CurrentUser,
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> None:
        await moderation.delete_entity(db, current_user, kind, entity_id)
        await db.commit()

    return router


figures_router = build_entity_router(
    EntityKind.FIGURE, FigureCreate, FigureUpdate, FigureResponse, FigureDetailResponse
)
brands_router = build_entity_router(
    EntityKind.BRAND, BrandCreate, BrandUpdate, BrandResponse, BrandResponse
)
lines_router = build_entity_router(EntityKind.LINE, LineCreate, LineUpdate, LineResponse, LineResponse)
series_router = build_entity_router(
    EntityKind.SERIES, SeriesCreate, SeriesUpdate, SeriesResponse, SeriesResponse
)
characters_router = build_entity_router(
    EntityKind.CHARACTER, CharacterCreate, CharacterUpdate, CharacterResponse, CharacterResponse
)

variants_router = APIRouter(prefix="/figures", tags=["figures"])


@variants_router.post("/{figure_id}/variants", response_model=FigureVariantResponse, status_code=201)
async def create_figure_variant(
    figure_id: Annotated[int, Path(description="Figure ID")],
    payload: FigureVariantCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FigureVariantResponse:
    """
    Add a variant to a figure (admin).

    Images are stored in the order given.
    """
    variant = await figure_rows.create_variant(
        db,
        current_user,
        figure_id,
        payload.name,
        price_mxn=payload.price_mxn,
        price_usd=payload.price_usd,
        price_yen=payload.price_yen,
        images=payload.images,
    )
    await db.commit()
    variants = await figure_rows.load_variants(db, figure_id)
    created = next(item for item in variants if item["id"] == variant.id)
    return FigureVariantResponse.model_validate(created, from_attributes=True)


routers = [
    figures_router,
    variants_router,
    brands_router,
    lines_router,
    series_router,
    characters_router,
]
