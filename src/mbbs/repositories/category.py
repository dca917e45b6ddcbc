"""Repository helpers for the Category model."""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from mbbs.models.category import Category
from mbbs.models.thread import Thread, NORMAL_THREAD_FILTER

__all__ = [
    "get_by_id",
    "list_all",
    "create",
    "update_thread_count",
]


async def get_by_id(session: AsyncSession, category_id: int) -> Optional[Category]:
    return await session.get(Category, category_id)


async def list_all(session: AsyncSession) -> list[Category]:
    res = await session.execute(select(Category).order_by(Category.sort, Category.id))
    return list(res.scalars().all())


async def create(
    session: AsyncSession,
    *,
    name: str,
    description: str = "",
    sort: int = 0,
    id: int | None = None,
) -> Category:
    category = Category(name=name, description=description, sort=sort, **({"id": id} if id else {}))
    session.add(category)
    await session.flush()
    return category


async def update_thread_count(session: AsyncSession, category_id: int | None) -> int | None:
    """Recount published threads in a category. Returns None for uncategorised threads."""
    if category_id is None:
        return None
    category = await get_by_id(session, category_id)
    if category is None:
        return None
    stmt = select(func.count(Thread.id)).where(Thread.category_id == category_id, *NORMAL_THREAD_FILTER)
    category.thread_count = (await session.execute(stmt)).scalar_one()
    await session.flush()
    return category.thread_count
