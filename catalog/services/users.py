"""
User accounts: registration, credential checks and superadmin administration.

Deleting an account removes the user's own data (collection, reviews, lists,
notifications) and keeps catalog rows they created or approved, with the
attribution cleared.
"""

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import UserRole
from catalog.core.database import flush_or_conflict
from catalog.core.errors import ConflictError, NotFoundError, ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import require_admin_role, require_superadmin_role
from catalog.core.security import hash_password, verify_password
from catalog.models.collection import UserFigures
from catalog.models.figure import Figures
from catalog.models.notification import Notifications
from catalog.models.review import ReviewImages, Reviews
from catalog.models.system_config import SystemConfiguration
from catalog.models.user import Users
from catalog.models.user_list import ListItems, Lists
from catalog.services.entity_kinds import KINDS

logger = get_logger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> Users:
    user = await db.get(Users, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def register_user(
    db: AsyncSession, username: str, email: str, password: str, name: str | None = None
) -> Users:
    """
    Create a USER account.

    Raises:
        ConflictError: username or email already taken
    """
    existing = await db.execute(
        select(Users.username, Users.email).where(  # type: ignore[call-overload]
            or_(Users.username == username, func.lower(Users.email) == email.lower())  # type: ignore[arg-type]
        )
    )
    row = existing.first()
    if row is not None:
        field = "Username" if row.username == username else "Email"
        raise ConflictError(f"{field} is already registered")

    user = Users(
        username=username,
        email=email,
        password=hash_password(password),
        name=name,
        role=UserRole.USER,
    )
    db.add(user)
    await flush_or_conflict(db, "Username or email is already registered")
    logger.info("user_registered", user_id=user.user_id, username=username)
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> Users | None:
    """Return the active user matching the credentials, or None."""
    result = await db.execute(select(Users).where(Users.username == username))  # type: ignore[arg-type]
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password):
        logger.info("login_failed", username=username)
        return None
    if not user.active:
        logger.info("login_inactive_user", user_id=user.user_id)
        return None
    return user


async def list_users(
    db: AsyncSession, actor: Users | None, offset: int = 0, limit: int = 20
) -> tuple[list[Users], int]:
    """All accounts, by id (admin only)."""
    require_admin_role(actor)
    total = await db.execute(select(func.count(Users.user_id)))  # type: ignore[arg-type]
    result = await db.execute(select(Users).order_by(Users.user_id).offset(offset).limit(limit))  # type: ignore[arg-type]
    return list(result.scalars().all()), total.scalar() or 0


async def change_role(
    db: AsyncSession, actor: Users | None, user_id: int, role: UserRole
) -> Users:
    """
    Change another user's role.

    Raises:
        ForbiddenError: actor is not a SUPERADMIN
        ValidationError: actor targets their own account
        NotFoundError: target does not exist
    """
    actor = require_superadmin_role(actor)
    if user_id == actor.user_id:
        raise ValidationError("You cannot change your own role")

    user = await get_user(db, user_id)
    previous = user.role
    user.role = role
    await db.flush()

    logger.info(
        "user_role_changed",
        user_id=user_id,
        previous=previous,
        role=role,
        by=actor.user_id,
    )
    return user


async def delete_user(db: AsyncSession, actor: Users | None, user_id: int) -> None:
    """Delete another user's account (SUPERADMIN only; never your own)."""
    actor = require_superadmin_role(actor)
    if user_id == actor.user_id:
        raise ValidationError("You cannot delete your own account")

    user = await get_user(db, user_id)

    review_ids = select(Reviews.id).where(Reviews.user_id == user_id)  # type: ignore[arg-type]
    await db.execute(delete(ReviewImages).where(ReviewImages.review_id.in_(review_ids)))  # type: ignore[attr-defined]
    await db.execute(delete(Reviews).where(Reviews.user_id == user_id))  # type: ignore[arg-type]
    list_ids = select(Lists.id).where(Lists.created_by_id == user_id)  # type: ignore[arg-type]
    await db.execute(delete(ListItems).where(ListItems.list_id.in_(list_ids)))  # type: ignore[attr-defined]
    await db.execute(delete(Lists).where(Lists.created_by_id == user_id))  # type: ignore[arg-type]
    await db.execute(delete(UserFigures).where(UserFigures.user_id == user_id))  # type: ignore[arg-type]
    await db.execute(delete(Notifications).where(Notifications.user_id == user_id))  # type: ignore[arg-type]

    for spec in KINDS.values():
        await db.execute(
            update(spec.model).where(spec.model.created_by_id == user_id).values(created_by_id=None)
        )
    await db.execute(
        update(Figures).where(Figures.approved_by_id == user_id).values(approved_by_id=None)  # type: ignore[arg-type]
    )
    await db.execute(
        update(SystemConfiguration)
        .where(SystemConfiguration.updated_by_id == user_id)  # type: ignore[arg-type]
        .values(updated_by_id=None)
    )

    await db.delete(user)
    await db.flush()
    logger.info("user_deleted", user_id=user_id, by=actor.user_id)
