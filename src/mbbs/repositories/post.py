"""Repository helpers for the Post and PostLike models."""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from mbbs.models.post import Post, PostLike

__all__ = [
    "get_by_id",
    "get_first_post",
    "has_user_posted",
    "list_for_thread",
    "create",
    "has_user_liked",
    "add_like",
]


async def get_by_id(session: AsyncSession, post_id: int) -> Optional[Post]:
    """Return a Post by id, including soft-deleted ones."""
    return await session.get(Post, post_id)


async def get_first_post(session: AsyncSession, thread_id: int) -> Optional[Post]:
    """Look up the body post of a thread by ``(thread_id, is_first)``."""
    stmt = select(Post).where(Post.thread_id == thread_id, Post.is_first.is_(True)).order_by(Post.id).limit(1)
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def has_user_posted(session: AsyncSession, thread_id: int, user_id: int) -> bool:
    stmt = select(Post.id).where(Post.thread_id == thread_id, Post.user_id == user_id).limit(1)
    res = await session.execute(stmt)
    return res.scalar_one_or_none() is not None


async def list_for_thread(session: AsyncSession, thread_id: int, include_deleted: bool = False) -> list[Post]:
    stmt = select(Post).where(Post.thread_id == thread_id)
    if not include_deleted:
        stmt = stmt.where(Post.deleted_at.is_(None))
    res = await session.execute(stmt.order_by(Post.created_at, Post.id))
    return list(res.scalars().all())


async def create(
    session: AsyncSession,
    *,
    thread_id: int,
    user_id: int,
    content: str = "",
    is_first: bool = False,
) -> Post:
    post = Post(thread_id=thread_id, user_id=user_id, content=content, is_first=is_first)
    session.add(post)
    await session.flush()
    return post


async def has_user_liked(session: AsyncSession, post_id: int | None, user_id: int) -> bool:
    if post_id is None:
        return False
    stmt = select(PostLike.id).where(PostLike.post_id == post_id, PostLike.user_id == user_id).limit(1)
    res = await session.execute(stmt)
    return res.scalar_one_or_none() is not None


async def add_like(session: AsyncSession, post: Post, user_id: int) -> bool:
    """Record a like and refresh ``post.like_count``. Returns False if already liked."""
    if await has_user_liked(session, post.id, user_id):
        return False
    session.add(PostLike(post_id=post.id, user_id=user_id))
    await session.flush()
    count = await session.execute(select(func.count(PostLike.id)).where(PostLike.post_id == post.id))
    post.like_count = count.scalar_one()
    await session.flush()
    return True
