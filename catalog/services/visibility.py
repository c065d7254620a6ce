"""
Visibility policy for moderated content.

Decides which moderation states of a kind a viewer may see:

- Admins asking for scope=ALL: everything
- Figures while SHOW_PENDING_FIGURES is on: APPROVED and PENDING for everyone
- Authenticated users: APPROVED, plus PENDING rows they created
- Anonymous visitors: APPROVED only

The result is a VisibleSet, which can render itself as a single SQL condition
(for listings) or be checked against one loaded row (for detail reads). Building
it is pure: the configuration flag is read by the caller and passed in.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from catalog.config import EntityKind, ModerationStatus, VisibilityScope
from catalog.core.permissions import is_admin
from catalog.models.user import Users

ALL_STATUSES: frozenset[ModerationStatus] = frozenset(ModerationStatus)
PUBLIC_STATUSES: frozenset[ModerationStatus] = frozenset({ModerationStatus.APPROVED})


@dataclass(frozen=True)
class VisibleSet:
    """
    Moderation states visible to one viewer.

    Attributes:
        statuses: states visible regardless of who created the row
        creator_id: when set, PENDING rows created by this user are visible too
    """

    statuses: frozenset[ModerationStatus]
    creator_id: int | None = None

    @property
    def unrestricted(self) -> bool:
        return self.statuses >= ALL_STATUSES

    def allows(self, status: ModerationStatus, created_by_id: int | None) -> bool:
        """Check one row against the set."""
        if status in self.statuses:
            return True
        return (
            self.creator_id is not None
            and status == ModerationStatus.PENDING
            and created_by_id == self.creator_id
        )

    def clause(self, model: Any) -> ColumnElement[bool] | None:
        """
        SQL condition for ``model`` (a moderated table), or None for no filter.

        The creator exception is part of the same condition (OR), so a single
        query returns the whole visible set.
        """
        if self.unrestricted:
            return None

        condition: ColumnElement[bool] = model.status.in_(sorted(self.statuses))
        if self.creator_id is not None and ModerationStatus.PENDING not in self.statuses:
            condition = or_(
                condition,
                and_(
                    model.status == ModerationStatus.PENDING,
                    model.created_by_id == self.creator_id,
                ),
            )
        return condition


def resolve_visible_set(
    viewer: Users | None,
    scope: VisibilityScope,
    kind: EntityKind,
    show_pending_figures: bool = False,
) -> VisibleSet:
    """
    Compute the visible set for a viewer.

    A non-admin asking for scope=ALL gets the normal filter; admins without
    scope=ALL are treated like any other authenticated user. Anything that is
    not exactly ``True`` for the flag counts as off.

    Args:
        viewer: requesting user (None for anonymous)
        scope: requested scope
        kind: which moderated kind is being read
        show_pending_figures: current SHOW_PENDING_FIGURES value

    Returns:
        The VisibleSet for this request
    """
    if scope == VisibilityScope.ALL and is_admin(viewer):
        return VisibleSet(statuses=ALL_STATUSES)

    if kind == EntityKind.FIGURE and show_pending_figures is True:
        return VisibleSet(statuses=ALL_STATUSES)

    if viewer is not None and viewer.user_id is not None:
        return VisibleSet(statuses=PUBLIC_STATUSES, creator_id=viewer.user_id)

    return VisibleSet(statuses=PUBLIC_STATUSES)


def can_view(
    entity: Any,
    viewer: Users | None,
    scope: VisibilityScope,
    kind: EntityKind,
    show_pending_figures: bool = False,
) -> bool:
    """Check whether one loaded moderated row is visible to ``viewer``."""
    visible = resolve_visible_set(viewer, scope, kind, show_pending_figures)
    return visible.allows(entity.status, entity.created_by_id)
