"""Post service layer: replies and likes on a thread's first post."""
from __future__ import annotations

import logging
from sqlalchemy.ext.asyncio import AsyncSession

from mbbs.core.cache import ModelCache
from mbbs.core.errors import PermissionDeniedError, PostNotFoundError, ThreadClosedError, ThreadNotFoundError
from mbbs.models.post import Post
from mbbs.models.thread import Thread
from mbbs.models.user import User
from mbbs.repositories import post as post_repo
from mbbs.services.permission import (
    scoped_permissions,
    tourist_has_one_of_permissions,
    user_has_one_of_permissions,
)
from mbbs.services.thread import can_view_by_user, resolve_first_post

logger = logging.getLogger(__name__)

__all__ = [
    "PostNotFoundError",
    "create_reply",
    "like_first_post",
    "list_posts",
]


async def _require(session: AsyncSession, user: User | None, thread: Thread, action: str) -> User:
    names = scoped_permissions(thread.category_id, action)
    if user is None or not await user_has_one_of_permissions(session, user, *names):
        raise PermissionDeniedError(*names)
    return user


async def create_reply(
    session: AsyncSession,
    thread: Thread,
    user: User | None,
    *,
    content: str,
    cache: ModelCache[Thread] | None = None,
) -> Post:
    """Add a reply and bump the thread's reply bookkeeping."""
    if not await can_view_by_user(session, thread, user):
        raise ThreadNotFoundError()
    if thread.disable_post:
        raise ThreadClosedError()
    author = await _require(session, user, thread, "thread.reply")

    if cache is not None:
        cache.invalidate(thread.id)
    post = await post_repo.create(session, thread_id=thread.id, user_id=author.id, content=content)
    thread.post_count = (thread.post_count or 0) + 1
    thread.posted_at = post.created_at
    thread.last_posted_user_id = author.id
    first_post = await resolve_first_post(session, thread)
    if first_post is not None:
        first_post.reply_count = (first_post.reply_count or 0) + 1
    await session.flush()
    logger.info("reply created", extra={"thread_id": thread.id, "post_id": post.id, "user_id": author.id})
    return post


async def like_first_post(session: AsyncSession, thread: Thread, user: User | None) -> tuple[bool, int]:
    """Like the thread body. Returns ``(newly_liked, like_count)``."""
    if not await can_view_by_user(session, thread, user):
        raise ThreadNotFoundError()
    liker = await _require(session, user, thread, "thread.like")
    first_post = await resolve_first_post(session, thread)
    if first_post is None:
        raise PostNotFoundError()
    liked = await post_repo.add_like(session, first_post, liker.id)
    return liked, first_post.like_count


async def list_posts(session: AsyncSession, thread: Thread, user: User | None) -> list[Post]:
    """Replies visible to ``user``; requires ``thread.viewPosts``."""
    if not await can_view_by_user(session, thread, user):
        raise ThreadNotFoundError()
    names = scoped_permissions(thread.category_id, "thread.viewPosts")
    if user is None:
        allowed = await tourist_has_one_of_permissions(session, *names)
    else:
        allowed = await user_has_one_of_permissions(session, user, *names)
    if not allowed:
        raise PermissionDeniedError(*names)
    return await post_repo.list_for_thread(session, thread.id)
