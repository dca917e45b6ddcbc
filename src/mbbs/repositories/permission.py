"""Repository helpers for group permissions."""

from typing import Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from mbbs.models.group import Group, GroupPermission

__all__ = [
    "group_has_any",
    "list_for_group",
    "grant",
    "create_group",
]


async def group_has_any(session: AsyncSession, group_id: int, permissions: Iterable[str]) -> bool:
    names = list(permissions)
    if not names:
        return False
    stmt = (
        select(GroupPermission.id)
        .where(GroupPermission.group_id == group_id, GroupPermission.permission.in_(names))
        .limit(1)
    )
    res = await session.execute(stmt)
    return res.scalar_one_or_none() is not None


async def list_for_group(session: AsyncSession, group_id: int) -> list[str]:
    res = await session.execute(
        select(GroupPermission.permission).where(GroupPermission.group_id == group_id).order_by(GroupPermission.permission)
    )
    return list(res.scalars().all())


async def grant(session: AsyncSession, group_id: int, permissions: Iterable[str]) -> list[str]:
    """Add permissions to a group, skipping names it already holds."""
    held = set(await list_for_group(session, group_id))
    added = []
    for name in permissions:
        if name in held:
            continue
        session.add(GroupPermission(group_id=group_id, permission=name))
        held.add(name)
        added.append(name)
    await session.flush()
    return added


async def create_group(session: AsyncSession, *, name: str, id: int | None = None) -> Group:
    group = Group(name=name, **({"id": id} if id else {}))
    session.add(group)
    await session.flush()
    return group
