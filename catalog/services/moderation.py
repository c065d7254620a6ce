"""
Moderation state machine for the five catalog kinds.

One implementation serves figures, brands, lines, series and characters; the
per-kind differences (foreign keys, required columns, listing filters) come
from the registry in ``entity_kinds``.

States are PENDING and APPROVED only. Non-admin submissions start PENDING,
admin submissions start APPROVED, and only admins move a row between the two
or delete it. Figures additionally record who approved them and when.

Every operation validates its whole input before touching the session, so a
rejected call leaves nothing half-applied.
"""

from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import EntityKind, ModerationStatus, VisibilityScope
from catalog.core.database import flush_or_conflict
from catalog.core.errors import ConflictError, NotFoundError, ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import is_admin, require_admin_role, require_user
from catalog.models.character import Characters
from catalog.models.figure import FigureCharacters, Figures, FigureSeries
from catalog.models.line import Lines
from catalog.models.user import Users, utcnow
from catalog.services import figures as figure_rows
from catalog.services.entity_kinds import KINDS, KindSpec, get_kind
from catalog.services.notifications import notify_figure_released
from catalog.services.system_config import show_pending_figures
from catalog.services.visibility import can_view, resolve_visible_set
from catalog.utils import slugify

logger = get_logger(__name__)


# ===== Validation helpers =====


def _slug_for(name: Any) -> str:
    slug = slugify(name) if isinstance(name, str) else ""
    if not slug:
        raise ValidationError("Name must contain at least one letter or digit")
    return slug


async def _check_slug_free(
    db: AsyncSession, spec: KindSpec, slug: str, exclude_id: int | None = None
) -> None:
    query = select(spec.model.id).where(spec.model.slug == slug)
    if exclude_id is not None:
        query = query.where(spec.model.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise ConflictError(f"{spec.label} with slug '{slug}' already exists")


async def _check_references(db: AsyncSession, spec: KindSpec, values: dict[str, Any]) -> None:
    for field_name, target in spec.references.items():
        target_id = values.get(field_name)
        if target_id is None:
            continue
        if await db.get(target, target_id) is None:
            raise NotFoundError(f"{field_name.removesuffix('_id').capitalize()} {target_id} not found")


def _normalize_update(spec: KindSpec, fields: dict[str, Any]) -> dict[str, Any]:
    """Empty strings clear a column; required columns may not be cleared."""
    normalized = {key: (None if value == "" else value) for key, value in fields.items()}
    for key, value in normalized.items():
        if value is None and key in spec.required:
            raise ValidationError(f"{key} cannot be cleared")
    return normalized


def _split_dependents(spec: KindSpec, values: dict[str, Any]) -> dict[str, Any]:
    if spec.kind != EntityKind.FIGURE:
        return {}
    return {key: values.pop(key) for key in list(values) if key in figure_rows.DEPENDENT_FIELDS}


# ===== Reads =====


async def get_entity(db: AsyncSession, kind: EntityKind, entity_id: int) -> Any:
    """Load a row of ``kind`` regardless of visibility, or raise NotFoundError."""
    spec = get_kind(kind)
    entity = await db.get(spec.model, entity_id)
    if entity is None:
        raise NotFoundError(f"{spec.label} not found")
    return entity


async def get_visible_entity(
    db: AsyncSession,
    viewer: Users | None,
    kind: EntityKind,
    entity_id: int,
    scope: VisibilityScope = VisibilityScope.DEFAULT,
) -> Any:
    """
    Load a row the viewer is allowed to see.

    A row hidden by the visibility policy is reported exactly like a missing
    one, so its existence does not leak.
    """
    spec = get_kind(kind)
    entity = await db.get(spec.model, entity_id)
    if entity is None:
        raise NotFoundError(f"{spec.label} not found")

    flag = await show_pending_figures(db) if kind == EntityKind.FIGURE else False
    if not can_view(entity, viewer, scope, kind, flag):
        raise NotFoundError(f"{spec.label} not found")
    return entity


async def list_entities(
    db: AsyncSession,
    viewer: Users | None,
    kind: EntityKind,
    scope: VisibilityScope = VisibilityScope.DEFAULT,
    filters: dict[str, Any] | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Any], int]:
    """
    Visible rows of ``kind``, newest first, plus the total before pagination.

    Filters the kind does not support are ignored. ``search`` is a
    case-insensitive name substring; % and _ in it match literally.
    """
    spec = get_kind(kind)
    model = spec.model

    flag = await show_pending_figures(db) if kind == EntityKind.FIGURE else False
    visible = resolve_visible_set(viewer, scope, kind, flag)

    query = select(model)
    clause = visible.clause(model)
    if clause is not None:
        query = query.where(clause)

    for key, value in (filters or {}).items():
        if value is None or key not in spec.filters:
            continue
        if key == "search":
            query = query.where(func.lower(model.name).contains(value.lower(), autoescape=True))
        elif key == "series_id" and kind == EntityKind.FIGURE:
            query = query.where(
                model.id.in_(
                    select(FigureSeries.figure_id).where(FigureSeries.series_id == value)  # type: ignore[arg-type]
                )
            )
        else:
            query = query.where(getattr(model, key) == value)

    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = count_result.scalar() or 0

    result = await db.execute(query.order_by(model.id.desc()).offset(offset).limit(limit))
    return list(result.scalars().all()), total


async def pending_summary(db: AsyncSession, actor: Users | None) -> dict[str, int]:
    """Count PENDING rows per kind (admin only)."""
    require_admin_role(actor)

    counts: dict[str, int] = {}
    for spec in KINDS.values():
        result = await db.execute(
            select(func.count(spec.model.id)).where(spec.model.status == ModerationStatus.PENDING)
        )
        counts[spec.path] = result.scalar() or 0
    counts["total"] = sum(counts.values())
    return counts


# ===== Transitions =====


async def create_entity(
    db: AsyncSession, actor: Users | None, kind: EntityKind, payload: dict[str, Any]
) -> Any:
    """
    Submit a new row.

    Admins create APPROVED rows (figures also get the approval stamp); everyone
    else creates PENDING rows without one.

    Raises:
        UnauthenticatedError: anonymous actor
        ValidationError: name yields an empty slug
        NotFoundError: a referenced brand, line, series, character or tag is missing
        ConflictError: slug already used by another row of this kind
    """
    actor = require_user(actor)
    spec = get_kind(kind)
    values = dict(payload)
    dependents = _split_dependents(spec, values)

    slug = _slug_for(values.get("name"))
    await _check_references(db, spec, values)
    await figure_rows.check_link_targets(db, dependents)
    await _check_slug_free(db, spec, slug)

    admin = is_admin(actor)
    entity = spec.model(
        **values,
        slug=slug,
        status=ModerationStatus.APPROVED if admin else ModerationStatus.PENDING,
        created_by_id=actor.user_id,
    )
    if kind == EntityKind.FIGURE and admin:
        entity.approved_by_id = actor.user_id
        entity.approved_at = utcnow()

    db.add(entity)
    await flush_or_conflict(db, f"{spec.label} with slug '{slug}' already exists")

    if dependents:
        await figure_rows.replace_figure_dependents(db, entity.id, dependents)

    logger.info(
        "entity_created",
        kind=kind,
        entity_id=entity.id,
        status=entity.status,
        created_by=actor.user_id,
    )
    return entity


async def set_approval(
    db: AsyncSession, actor: Users | None, kind: EntityKind, entity_id: int, approved: bool
) -> Any:
    """
    Move a row to APPROVED (``approved=True``) or back to PENDING.

    For figures the approver and timestamp are stamped on approval and cleared
    on demotion.
    """
    actor = require_admin_role(actor)
    entity = await get_entity(db, kind, entity_id)

    entity.status = ModerationStatus.APPROVED if approved else ModerationStatus.PENDING
    if kind == EntityKind.FIGURE:
        entity.approved_by_id = actor.user_id if approved else None
        entity.approved_at = utcnow() if approved else None
    entity.updated_at = utcnow()
    await db.flush()

    logger.info(
        "entity_approval_changed",
        kind=kind,
        entity_id=entity_id,
        status=entity.status,
        by=actor.user_id,
    )
    return entity


async def update_entity(
    db: AsyncSession, actor: Users | None, kind: EntityKind, entity_id: int, fields: dict[str, Any]
) -> Any:
    """
    Apply a partial update (admin only).

    ``fields`` holds only the keys the client sent: a missing key keeps the
    stored value, None or "" clears it. A rename recomputes the slug; if the
    new slug belongs to another row the whole update is rejected. Figure
    image and link lists, when present, replace the stored set.

    Marking a figure released (is_released false -> true) notifies the users
    waiting for it.
    """
    actor = require_admin_role(actor)
    spec = get_kind(kind)
    entity = await get_entity(db, kind, entity_id)

    values = _normalize_update(spec, fields)
    dependents = _split_dependents(spec, values)
    values.pop("slug", None)

    new_slug = None
    if "name" in values:
        new_slug = _slug_for(values["name"])
        if new_slug != entity.slug:
            await _check_slug_free(db, spec, new_slug, exclude_id=entity.id)
    await _check_references(db, spec, values)
    await figure_rows.check_link_targets(db, dependents)

    was_released = bool(getattr(entity, "is_released", False))

    for key, value in values.items():
        setattr(entity, key, value)
    if new_slug is not None:
        entity.slug = new_slug
    entity.updated_at = utcnow()
    await flush_or_conflict(db, f"{spec.label} with slug '{new_slug}' already exists")

    if dependents:
        await figure_rows.replace_figure_dependents(db, entity.id, dependents)

    if kind == EntityKind.FIGURE and not was_released and entity.is_released:
        await notify_figure_released(db, entity)

    logger.info(
        "entity_updated",
        kind=kind,
        entity_id=entity_id,
        fields=sorted(fields),
        by=actor.user_id,
    )
    return entity


async def delete_entity(
    db: AsyncSession, actor: Users | None, kind: EntityKind, entity_id: int
) -> None:
    """
    Delete a row and whatever depends on it (admin only).

    - Figure: images, variants, links, collection entries, reviews, list items,
      notifications
    - Brand: its lines and all their figures
    - Line: its figures
    - Series: figure links; characters stay with series_id cleared
    - Character: figure links
    """
    actor = require_admin_role(actor)
    spec = get_kind(kind)
    entity = await get_entity(db, kind, entity_id)

    if kind == EntityKind.FIGURE:
        await figure_rows.delete_figures(db, [entity_id])
    else:
        if kind == EntityKind.BRAND:
            line_ids = select(Lines.id).where(Lines.brand_id == entity_id)  # type: ignore[arg-type]
            result = await db.execute(
                select(Figures.id).where(
                    or_(Figures.brand_id == entity_id, Figures.line_id.in_(line_ids))  # type: ignore[arg-type,attr-defined]
                )
            )
            await figure_rows.delete_figures(db, list(result.scalars().all()))
            await db.execute(delete(Lines).where(Lines.brand_id == entity_id))  # type: ignore[arg-type]
        elif kind == EntityKind.LINE:
            result = await db.execute(select(Figures.id).where(Figures.line_id == entity_id))  # type: ignore[arg-type]
            await figure_rows.delete_figures(db, list(result.scalars().all()))
        elif kind == EntityKind.SERIES:
            await db.execute(delete(FigureSeries).where(FigureSeries.series_id == entity_id))  # type: ignore[arg-type]
            await db.execute(
                update(Characters)
                .where(Characters.series_id == entity_id)  # type: ignore[arg-type]
                .values(series_id=None)
            )
        elif kind == EntityKind.CHARACTER:
            await db.execute(
                delete(FigureCharacters).where(FigureCharacters.character_id == entity_id)  # type: ignore[arg-type]
            )
        await db.delete(entity)

    await db.flush()
    logger.info("entity_deleted", kind=kind, entity_id=entity_id, label=spec.label, by=actor.user_id)
