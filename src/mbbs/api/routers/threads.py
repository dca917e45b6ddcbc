from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mbbs.api import deps
from mbbs.core.cache import ModelCache
from mbbs.models.thread import Thread
from mbbs.models.user import User
from mbbs.repositories import thread as thread_repo
from mbbs.schemas.post import LikeRead, PostCreate, PostRead
from mbbs.schemas.thread import ThreadCounts, ThreadCreate, ThreadModerate, ThreadRead, ThreadUpdate, ThreadView
from mbbs.services.post import create_reply, like_first_post, list_posts
from mbbs.services.thread import (
    can_view_by_user,
    create_thread,
    get_thread_or_404,
    increment_view_count,
    list_threads,
    moderate_thread,
    soft_delete_thread,
    to_view_json,
    update_thread,
)

router = APIRouter(prefix="/threads", tags=["threads"])


async def _visible_thread(
    thread_id: int, session: AsyncSession, viewer: User | None, cache: ModelCache[Thread]
) -> Thread:
    # ThreadNotFoundError from the lookup is mapped to 404 by the app
    thread = await get_thread_or_404(session, thread_id, cache=cache)
    if not await can_view_by_user(session, thread, viewer):
        raise HTTPException(status_code=404, detail="Thread not found")
    return thread


@router.post("/", response_model=ThreadView, status_code=status.HTTP_201_CREATED,
             summary="Create a thread")
async def create_thread_route(
    payload: ThreadCreate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await create_thread(
        session,
        current_user,
        title=payload.title,
        content=payload.content,
        category_id=payload.category_id,
        is_draft=payload.is_draft,
        cache=cache,
    )
    view = await to_view_json(session, thread, current_user)
    await session.commit()
    return view


@router.get("/", response_model=list[ThreadView], summary="List published threads")
async def list_threads_route(
    category_id: int | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
):
    threads = await list_threads(session, category_id=category_id, limit=limit, offset=offset)
    # like status is only shown on the detail page
    views = [await to_view_json(session, t, current_user, field_is_liked=False) for t in threads]
    await session.commit()
    return views


@router.get("/stats/users/{user_id}", response_model=ThreadCounts,
            summary="Count threads created by a user")
async def user_thread_counts_route(
    user_id: int,
    category_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    session: AsyncSession = Depends(deps.get_db),
):
    today = await thread_repo.count_user_today_created(session, user_id, category_id)
    in_range = None
    if start is not None and end is not None:
        in_range = await thread_repo.count_user_created_in_range(session, user_id, start, end)
    return ThreadCounts(user_id=user_id, today=today, in_range=in_range)


@router.get("/{thread_id}", response_model=ThreadView, summary="Get a thread as seen by the caller")
async def get_thread_route(
    thread_id: int,
    field_is_liked: bool = True,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await _visible_thread(thread_id, session, current_user, cache)
    await increment_view_count(session, thread, cache=cache)
    view = await to_view_json(session, thread, current_user, field_is_liked=field_is_liked)
    await session.commit()
    return view


@router.patch("/{thread_id}", response_model=ThreadView, summary="Edit a thread")
async def update_thread_route(
    thread_id: int,
    payload: ThreadUpdate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await _visible_thread(thread_id, session, current_user, cache)
    thread = await update_thread(
        session,
        thread,
        current_user,
        title=payload.title,
        content=payload.content,
        is_draft=payload.is_draft,
        cache=cache,
    )
    view = await to_view_json(session, thread, current_user)
    await session.commit()
    return view


@router.patch("/{thread_id}/moderation", response_model=ThreadRead, summary="Moderate a thread")
async def moderate_thread_route(
    thread_id: int,
    payload: ThreadModerate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await get_thread_or_404(session, thread_id, cache=cache)
    if thread.is_deleted:
        raise HTTPException(status_code=404, detail="Thread not found")
    thread = await moderate_thread(
        session,
        thread,
        current_user,
        is_sticky=payload.is_sticky,
        is_essence=payload.is_essence,
        is_approved=payload.is_approved,
        disable_post=payload.disable_post,
        cache=cache,
    )
    await session.commit()
    return thread


@router.delete("/{thread_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Hide (soft delete) a thread")
async def delete_thread_route(
    thread_id: int,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await _visible_thread(thread_id, session, current_user, cache)
    await soft_delete_thread(session, thread, current_user, cache=cache)
    await session.commit()
    return None


@router.get("/{thread_id}/posts", response_model=list[PostRead], summary="List posts in a thread")
async def list_posts_route(
    thread_id: int,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User | None = Depends(deps.get_current_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await get_thread_or_404(session, thread_id, cache=cache)
    return await list_posts(session, thread, current_user)


@router.post("/{thread_id}/posts", response_model=PostRead, status_code=status.HTTP_201_CREATED,
             summary="Reply to a thread")
async def create_post_route(
    thread_id: int,
    payload: PostCreate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await get_thread_or_404(session, thread_id, cache=cache)
    post = await create_reply(session, thread, current_user, content=payload.content, cache=cache)
    await session.commit()
    return post


@router.post("/{thread_id}/like", response_model=LikeRead, summary="Like a thread")
async def like_thread_route(
    thread_id: int,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_user),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    thread = await get_thread_or_404(session, thread_id, cache=cache)
    liked, like_count = await like_first_post(session, thread, current_user)
    await session.commit()
    return LikeRead(liked=liked, like_count=like_count)
