"""
Role checks.

Roles are a fixed ladder (USER < ADMIN < SUPERADMIN); anonymous visitors have
no user at all. Every check accepts ``None`` for the anonymous viewer.
"""

from catalog.config import ADMIN_ROLES, UserRole
from catalog.core.errors import ForbiddenError, UnauthenticatedError
from catalog.models.user import Users


def is_admin(user: Users | None) -> bool:
    """ADMIN or SUPERADMIN."""
    return user is not None and user.role in ADMIN_ROLES


def is_superadmin(user: Users | None) -> bool:
    return user is not None and user.role == UserRole.SUPERADMIN


def require_user(user: Users | None) -> Users:
    """Return the user or fail with UnauthenticatedError for the anonymous viewer."""
    if user is None:
        raise UnauthenticatedError("Not authenticated")
    return user


def require_admin_role(user: Users | None) -> Users:
    """Return the user if admin; anonymous is Unauthenticated, others Forbidden."""
    user = require_user(user)
    if not is_admin(user):
        raise ForbiddenError("Admin privileges required")
    return user


def require_superadmin_role(user: Users | None) -> Users:
    user = require_user(user)
    if not is_superadmin(user):
        raise ForbiddenError("Superadmin privileges required")
    return user
