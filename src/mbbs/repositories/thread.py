"""Repository helpers for the Thread model.

Soft-deleted and draft rows are only excluded where a helper says so; callers
composing their own queries apply ``NORMAL_THREAD_FILTER`` or
``ALL_NOT_DELETED_THREAD_FILTER`` explicitly.
"""

from datetime import datetime, time
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from mbbs.db.session import utcnow
from mbbs.models.post import Post
from mbbs.models.thread import Thread, NORMAL_THREAD_FILTER

__all__ = [
    "get_by_id",
    "create",
    "list_normal",
    "set_first_post_id_if_missing",
    "backfill_first_post_ids",
    "count_user_today_created",
    "count_user_created_in_range",
]


async def get_by_id(session: AsyncSession, thread_id: int) -> Optional[Thread]:
    return await session.get(Thread, thread_id)


async def create(
    session: AsyncSession,
    *,
    user_id: int,
    title: str,
    category_id: int | None = None,
    is_draft: bool = False,
    is_approved: int | None = None,
) -> Thread:
    now = utcnow()
    thread = Thread(
        user_id=user_id,
        title=title,
        category_id=category_id,
        is_draft=is_draft,
        posted_at=now,
        modified_at=now,
        created_at=now,
        **({"is_approved": is_approved} if is_approved is not None else {}),
    )
    session.add(thread)
    await session.flush()
    return thread


async def list_normal(
    session: AsyncSession,
    *,
    category_id: int | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[Thread]:
    """Published threads, sticky ones first, then by latest reply."""
    stmt = select(Thread).where(*NORMAL_THREAD_FILTER)
    if category_id is not None:
        stmt = stmt.where(Thread.category_id == category_id)
    stmt = stmt.order_by(Thread.is_sticky.desc(), Thread.posted_at.desc(), Thread.id.desc()).limit(limit).offset(offset)
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def set_first_post_id_if_missing(session: AsyncSession, thread_id: int, post_id: int) -> bool:
    """Store ``first_post_id`` only while it is still NULL.

    Concurrent readers of the same legacy row race on this; the conditional
    update makes the losers no-ops. Returns True if this call wrote the row.
    """
    stmt = (
        update(Thread)
        .where(Thread.id == thread_id, Thread.first_post_id.is_(None))
        .values(first_post_id=post_id)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    return res.rowcount == 1


async def backfill_first_post_ids(session: AsyncSession) -> int:
    """One-off fill of ``first_post_id`` for every legacy thread. Returns rows updated."""
    first_post = (
        select(func.min(Post.id))
        .where(Post.thread_id == Thread.id, Post.is_first.is_(True))
        .correlate(Thread)
        .scalar_subquery()
    )
    stmt = (
        update(Thread)
        .where(Thread.first_post_id.is_(None), first_post.is_not(None))
        .values(first_post_id=first_post)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    return res.rowcount or 0


async def count_user_today_created(
    session: AsyncSession,
    user_id: int,
    category_id: int | None = None,
    *,
    now: datetime | None = None,
) -> int:
    """Count non-draft threads the user created since the start of today (UTC)."""
    start_of_day = datetime.combine((now or utcnow()).date(), time.min)
    stmt = select(func.count(Thread.id)).where(
        Thread.user_id == user_id,
        Thread.is_draft.is_(False),
        Thread.created_at >= start_of_day,
    )
    if category_id is not None:
        stmt = stmt.where(Thread.category_id == category_id)
    return (await session.execute(stmt)).scalar_one()


async def count_user_created_in_range(session: AsyncSession, user_id: int, start: datetime, end: datetime) -> int:
    """Count threads created by the user with ``start <= created_at <= end``."""
    stmt = select(func.count(Thread.id)).where(
        Thread.user_id == user_id,
        Thread.created_at >= start,
        Thread.created_at <= end,
    )
    return (await session.execute(stmt)).scalar_one()
