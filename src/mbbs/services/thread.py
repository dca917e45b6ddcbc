"""Thread service layer.

Permission checks, the per-viewer view projection and the thread lifecycle
(create, edit, moderate, soft delete) on top of the repository helpers.
Every function takes the caller's ``AsyncSession``; the session is the
transaction, so a thread save and its counter refresh commit or roll back
together when the caller commits.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from mbbs.core.cache import ModelCache
from mbbs.core.config import get_settings
from mbbs.core.errors import CategoryNotFoundError, PermissionDeniedError, ThreadNotFoundError
from mbbs.core.markdown import (
    filter_markdown_hidden_content,
    markdown_has_reply_hidden_content,
    markdown_to_pure_text,
)
from mbbs.core.outcome import BestEffort
from mbbs.db.session import utcnow
from mbbs.models.post import Post
from mbbs.models.thread import Thread, ThreadIsApproved
from mbbs.models.user import User
from mbbs.repositories import category as category_repo
from mbbs.repositories import post as post_repo
from mbbs.repositories import thread as thread_repo
from mbbs.repositories import user as user_repo
from mbbs.schemas.user import UserRead
from mbbs.services.permission import (
    can_create_hidden_content,
    scoped_permissions,
    tourist_has_one_of_permissions,
    user_has_one_of_permissions,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ThreadNotFoundError",
    "get_thread_cache",
    "get_thread",
    "get_thread_or_404",
    "resolve_first_post",
    "can_edit_by_user",
    "can_hide_by_user",
    "can_view_by_user",
    "to_view_json",
    "save_and_update_thread_count",
    "create_thread",
    "update_thread",
    "moderate_thread",
    "soft_delete_thread",
    "increment_view_count",
    "list_threads",
]


@lru_cache
def get_thread_cache() -> ModelCache[Thread]:
    return ModelCache(get_settings().thread_cache_size)


async def get_thread(
    session: AsyncSession, thread_id: int, *, cache: ModelCache[Thread] | None = None
) -> Thread | None:
    """Primary-key lookup through ``cache`` when one is given.

    Only clean, fully loaded instances are served from the cache; an entry
    left dirty or expired by a failed request is dropped and reloaded.
    """
    if cache is not None:
        cached = cache.get(thread_id)
        if cached is not None:
            if cached in session:
                return cached
            state = sa_inspect(cached)
            if state.modified or state.unloaded:
                cache.invalidate(thread_id)
            else:
                # copy into this session without a round trip
                return await session.merge(cached, load=False)
    thread = await thread_repo.get_by_id(session, thread_id)
    if thread is not None and cache is not None:
        cache.put(thread_id, thread)
    return thread


async def get_thread_or_404(
    session: AsyncSession, thread_id: int, *, cache: ModelCache[Thread] | None = None
) -> Thread:
    thread = await get_thread(session, thread_id, cache=cache)
    if thread is None:
        raise ThreadNotFoundError()
    return thread


async def resolve_first_post(session: AsyncSession, thread: Thread) -> Post | None:
    """Return the body post, filling ``first_post_id`` on legacy rows."""
    if thread.first_post_id:
        return await post_repo.get_by_id(session, thread.first_post_id)
    first_post = await post_repo.get_first_post(session, thread.id)
    if first_post is None:
        logger.warning("thread has no first post", extra={"thread_id": thread.id})
        return None
    await thread_repo.set_first_post_id_if_missing(session, thread.id, first_post.id)
    # the row is already written; keep the instance clean
    set_committed_value(thread, "first_post_id", first_post.id)
    return first_post


async def can_edit_by_user(session: AsyncSession, thread: Thread, user: User | None) -> bool:
    if user is None:
        return False
    if thread.user_id == user.id and thread.is_draft:
        return True
    if thread.user_id == user.id and await user_has_one_of_permissions(
        session, user, *scoped_permissions(thread.category_id, "thread.editOwnThread")
    ):
        return True
    return await user_has_one_of_permissions(session, user, *scoped_permissions(thread.category_id, "thread.edit"))


async def can_hide_by_user(session: AsyncSession, thread: Thread, user: User | None) -> bool:
    if user is None:
        return False
    if thread.user_id == user.id and await user_has_one_of_permissions(
        session, user, *scoped_permissions(thread.category_id, "thread.hideOwnThread")
    ):
        return True
    return await user_has_one_of_permissions(session, user, *scoped_permissions(thread.category_id, "thread.hide"))


async def can_view_by_user(session: AsyncSession, thread: Thread, user: User | None) -> bool:
    """Whether the thread itself is visible to ``user`` (None for anonymous)."""
    if thread.is_deleted:
        return False
    is_owner = user is not None and thread.user_id == user.id
    if thread.is_draft:
        return is_owner
    if thread.is_approved != ThreadIsApproved.ok:
        return is_owner or await can_edit_by_user(session, thread, user)
    return True


def _column_values(thread: Thread) -> dict[str, Any]:
    return {attr.key: getattr(thread, attr.key) for attr in sa_inspect(thread).mapper.column_attrs}


async def to_view_json(
    session: AsyncSession,
    thread: Thread,
    viewer: User | None,
    *,
    field_is_liked: bool = True,
) -> dict[str, Any]:
    """Project ``thread`` for one viewer.

    Raw columns are merged with the resolved body, the author, counters from
    the first post and one boolean per capability. With no viewer every flag
    is False except ``can_view_posts``, which falls back to the tourist group.
    ``field_is_liked=False`` skips the like lookup (reported as False) for
    callers that do not show it, such as list pages.
    """
    first_post = await resolve_first_post(session, thread)
    content = first_post.content if first_post is not None and first_post.content else ""
    can_edit = await can_edit_by_user(session, thread, viewer)

    if markdown_has_reply_hidden_content(content):
        has_reply = viewer is not None and await post_repo.has_user_posted(session, thread.id, viewer.id)
        if not can_edit and not has_reply:
            content = filter_markdown_hidden_content(content)

    author = await user_repo.get_by_id(session, thread.user_id)
    category_id = thread.category_id

    async def viewer_can(action: str) -> bool:
        return await user_has_one_of_permissions(session, viewer, *scoped_permissions(category_id, action))

    if viewer is not None:
        can_view_posts = await viewer_can("thread.viewPosts")
    else:
        can_view_posts = await tourist_has_one_of_permissions(
            session, *scoped_permissions(category_id, "thread.viewPosts")
        )

    return {
        **_column_values(thread),
        "content": content,
        "user": UserRead.model_validate(author).model_dump() if author is not None else None,
        "like_count": first_post.like_count if first_post is not None else None,
        "reply_count": first_post.reply_count if first_post is not None else None,
        # rows created before modified_at existed
        "modified_at": thread.modified_at or thread.created_at,
        "is_liked": (
            field_is_liked
            and viewer is not None
            and await post_repo.has_user_liked(session, thread.first_post_id, viewer.id)
        ),
        "can_edit": can_edit,
        "can_hide": await can_hide_by_user(session, thread, viewer),
        "can_like": await viewer_can("thread.like"),
        "can_reply": await viewer_can("thread.reply"),
        "can_essence": await viewer_can("thread.essence"),
        "can_sticky": await viewer_can("thread.sticky"),
        "can_set_disable_post": viewer is not None and viewer.is_admin,
        "can_view_posts": can_view_posts,
    }


async def save_and_update_thread_count(
    session: AsyncSession, thread: Thread, *, cache: ModelCache[Thread] | None = None
) -> BestEffort:
    """Flush ``thread`` then refresh the category and author thread counts.

    The counters are best effort: they run in a savepoint, so a failure
    (including a database error) only rolls back the counter writes. It is
    logged and reported as ``BestEffort.DEGRADED`` while the thread itself
    stays saved in the caller's transaction.
    """
    session.add(thread)
    await session.flush()
    thread_id, category_id, user_id = thread.id, thread.category_id, thread.user_id
    if cache is not None:
        cache.invalidate(thread_id)
    try:
        async with session.begin_nested():
            await category_repo.update_thread_count(session, category_id)
            author = await user_repo.get_by_id(session, user_id)
            if author is not None:
                await user_repo.update_thread_count(session, author)
    except Exception:
        logger.warning(
            "thread count refresh failed",
            exc_info=True,
            extra={"thread_id": thread_id, "category_id": category_id, "user_id": user_id},
        )
        return BestEffort.DEGRADED
    return BestEffort.APPLIED


def _evict(thread: Thread, cache: ModelCache[Thread] | None) -> None:
    # must run before the first attribute change
    if cache is not None:
        cache.invalidate(thread.id)


async def _require(session: AsyncSession, user: User | None, category_id: int | None, action: str) -> User:
    names = scoped_permissions(category_id, action)
    if user is None or not await user_has_one_of_permissions(session, user, *names):
        raise PermissionDeniedError(*names)
    return user


async def create_thread(
    session: AsyncSession,
    user: User | None,
    *,
    title: str,
    content: str = "",
    category_id: int | None = None,
    is_draft: bool = False,
    cache: ModelCache[Thread] | None = None,
) -> Thread:
    """Create a thread together with its first post."""
    author = await _require(session, user, category_id, "thread.create")
    if category_id is not None and await category_repo.get_by_id(session, category_id) is None:
        raise CategoryNotFoundError()
    if markdown_has_reply_hidden_content(content) and not await can_create_hidden_content(session, author, category_id):
        raise PermissionDeniedError(*scoped_permissions(category_id, "thread.createHiddenContent"))

    is_approved = ThreadIsApproved.ok
    if get_settings().thread_require_approval and not await user_has_one_of_permissions(
        session, author, *scoped_permissions(category_id, "thread.approve")
    ):
        is_approved = ThreadIsApproved.checking

    thread = await thread_repo.create(
        session,
        user_id=author.id,
        title=title,
        category_id=category_id,
        is_draft=is_draft,
        is_approved=is_approved,
    )
    first_post = await post_repo.create(session, thread_id=thread.id, user_id=author.id, content=content, is_first=True)
    thread.first_post_id = first_post.id
    thread.post_count = 1
    thread.last_posted_user_id = author.id
    thread.content_for_indexes = markdown_to_pure_text(content)
    await save_and_update_thread_count(session, thread, cache=cache)
    logger.info("thread created", extra={"thread_id": thread.id, "user_id": author.id, "is_draft": is_draft})
    return thread


async def update_thread(
    session: AsyncSession,
    thread: Thread,
    user: User | None,
    *,
    title: str | None = None,
    content: str | None = None,
    is_draft: bool | None = None,
    cache: ModelCache[Thread] | None = None,
) -> Thread:
    """Edit title / body; ``is_draft=False`` publishes a draft.

    Every check runs before the first change, so a refused edit leaves the
    instance untouched.
    """
    if not await can_edit_by_user(session, thread, user):
        raise PermissionDeniedError(*scoped_permissions(thread.category_id, "thread.edit"))
    if is_draft and not thread.is_draft:
        raise PermissionDeniedError("thread.unpublish")
    first_post = None
    if content is not None:
        first_post = await resolve_first_post(session, thread)
        if first_post is not None and first_post.content == content:
            first_post = None
        if (
            first_post is not None
            and markdown_has_reply_hidden_content(content)
            and not await can_create_hidden_content(session, user, thread.category_id)
        ):
            raise PermissionDeniedError(*scoped_permissions(thread.category_id, "thread.createHiddenContent"))

    _evict(thread, cache)
    modified = False
    if title is not None and title != thread.title:
        thread.title = title
        modified = True
    if first_post is not None and content is not None:
        first_post.content = content
        thread.content_for_indexes = markdown_to_pure_text(content)
        modified = True
    if modified:
        thread.modified_at = utcnow()
    if is_draft is False and thread.is_draft:
        thread.is_draft = False
        thread.posted_at = utcnow()
    await save_and_update_thread_count(session, thread, cache=cache)
    return thread


async def moderate_thread(
    session: AsyncSession,
    thread: Thread,
    user: User | None,
    *,
    is_sticky: bool | None = None,
    is_essence: bool | None = None,
    is_approved: int | None = None,
    disable_post: bool | None = None,
    cache: ModelCache[Thread] | None = None,
) -> Thread:
    """Apply moderator flags; all permissions are checked before any flag changes."""
    if is_sticky is not None:
        await _require(session, user, thread.category_id, "thread.sticky")
    if is_essence is not None:
        await _require(session, user, thread.category_id, "thread.essence")
    if is_approved is not None:
        await _require(session, user, thread.category_id, "thread.approve")
    if disable_post is not None and (user is None or not user.is_admin):
        raise PermissionDeniedError("admin")

    _evict(thread, cache)
    if is_sticky is not None:
        thread.is_sticky = is_sticky
    if is_essence is not None:
        thread.is_essence = is_essence
    if is_approved is not None:
        thread.is_approved = ThreadIsApproved(is_approved)
    if disable_post is not None:
        thread.disable_post = disable_post
    await save_and_update_thread_count(session, thread, cache=cache)
    return thread


async def soft_delete_thread(
    session: AsyncSession,
    thread: Thread,
    user: User | None,
    *,
    cache: ModelCache[Thread] | None = None,
) -> BestEffort:
    if user is None or not await can_hide_by_user(session, thread, user):
        raise PermissionDeniedError(*scoped_permissions(thread.category_id, "thread.hide"))
    _evict(thread, cache)
    thread.deleted_at = utcnow()
    thread.deleted_user_id = user.id
    outcome = await save_and_update_thread_count(session, thread, cache=cache)
    logger.info("thread hidden", extra={"thread_id": thread.id, "deleted_user_id": user.id})
    return outcome


async def increment_view_count(
    session: AsyncSession, thread: Thread, *, cache: ModelCache[Thread] | None = None
) -> int:
    _evict(thread, cache)
    thread.view_count = (thread.view_count or 0) + 1
    await session.flush()
    if cache is not None:
        # flushed, so the instance is clean again
        cache.put(thread.id, thread)
    return thread.view_count


list_threads = thread_repo.list_normal
