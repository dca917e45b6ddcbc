"""Permission checks.

A permission name is either global (``thread.reply``) or scoped to one
category (``category3.thread.reply``). A check passes when the user's group
holds any one of the names asked for. Members of the admin group hold every
permission; anonymous viewers are checked against the tourist group.
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from mbbs.core.config import get_settings
from mbbs.models.user import User
from mbbs.repositories import permission as permission_repo

__all__ = [
    "scoped_permissions",
    "user_has_one_of_permissions",
    "group_has_one_of_permissions",
    "tourist_has_one_of_permissions",
    "grant_permissions",
    "can_create_hidden_content",
]


def scoped_permissions(category_id: int | None, action: str) -> tuple[str, ...]:
    """Return the global name for ``action`` plus its category-scoped form."""
    if category_id is None:
        return (action,)
    return (action, f"category{category_id}.{action}")


async def group_has_one_of_permissions(session: AsyncSession, group_id: int, *permissions: str) -> bool:
    return await permission_repo.group_has_any(session, group_id, permissions)


async def user_has_one_of_permissions(session: AsyncSession, user: User | None, *permissions: str) -> bool:
    if user is None:
        return False
    if user.is_admin:
        return True
    return await group_has_one_of_permissions(session, user.group_id, *permissions)


async def tourist_has_one_of_permissions(session: AsyncSession, *permissions: str) -> bool:
    return await group_has_one_of_permissions(session, get_settings().tourist_group_id, *permissions)


async def grant_permissions(session: AsyncSession, group_id: int, *permissions: str) -> list[str]:
    return await permission_repo.grant(session, group_id, permissions)


async def can_create_hidden_content(session: AsyncSession, user: User | None, category_id: int | None) -> bool:
    """Whether ``user`` may author reply-hidden blocks in the category."""
    return await user_has_one_of_permissions(
        session, user, *scoped_permissions(category_id, "thread.createHiddenContent")
    )
