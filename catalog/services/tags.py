"""Tag management. Tags are not moderated; only admins create or delete them."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.database import flush_or_conflict
from catalog.core.errors import ConflictError, NotFoundError, ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import require_admin_role
from catalog.models.figure import FigureTags
from catalog.models.tag import Tags
from catalog.models.user import Users
from catalog.utils import slugify

logger = get_logger(__name__)


async def list_tags(db: AsyncSession, search: str | None = None) -> list[Tags]:
    query = select(Tags)
    if search:
        query = query.where(Tags.slug.contains(slugify(search), autoescape=True))  # type: ignore[attr-defined]
    result = await db.execute(query.order_by(Tags.name))  # type: ignore[arg-type]
    return list(result.scalars().all())


async def create_tag(db: AsyncSession, actor: Users | None, name: str) -> Tags:
    require_admin_role(actor)
    slug = slugify(name)
    if not slug:
        raise ValidationError("Name must contain at least one letter or digit")

    existing = await db.execute(select(Tags.tag_id).where(Tags.slug == slug))  # type: ignore[arg-type]
    if existing.first() is not None:
        raise ConflictError(f"Tag with slug '{slug}' already exists")

    tag = Tags(name=name, slug=slug)
    db.add(tag)
    await flush_or_conflict(db, f"Tag with slug '{slug}' already exists")
    logger.info("tag_created", tag_id=tag.tag_id, slug=slug)
    return tag


async def delete_tag(db: AsyncSession, actor: Users | None, tag_id: int) -> None:
    """Delete a tag and unlink it from every figure."""
    require_admin_role(actor)
    tag = await db.get(Tags, tag_id)
    if tag is None:
        raise NotFoundError("Tag not found")

    await db.execute(delete(FigureTags).where(FigureTags.tag_id == tag_id))  # type: ignore[arg-type]
    await db.delete(tag)
    await db.flush()
    logger.info("tag_deleted", tag_id=tag_id)
