from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional
from mbbs.models.user import User
from mbbs.models.thread import Thread, NORMAL_THREAD_FILTER

async def get_by_id(session: AsyncSession, id: int) -> Optional[User]:
    return await session.get(User, id)

async def get_by_token(session: AsyncSession, token: str) -> Optional[User]:
    res = await session.execute(select(User).where(User.token == token))
    return res.scalar_one_or_none()

async def create(
    session: AsyncSession,
    *,
    username: str,
    email: str,
    group_id: int,
    token: str | None = None,
    id: int | None = None,
) -> User:
    user = User(username=username, email=email, group_id=group_id, token=token, **({"id": id} if id else {}))
    session.add(user)
    await session.flush()
    return user

async def list_all(session: AsyncSession) -> list[User]:
    res = await session.execute(select(User).order_by(User.created_at, User.id))
    return list(res.scalars().all())

async def exists_with(session: AsyncSession, *, username: str, email: str) -> bool:
    stmt = select(User.id).where((User.username == username) | (User.email == email)).limit(1)
    res = await session.execute(stmt)
    return res.scalar_one_or_none() is not None

async def update_thread_count(session: AsyncSession, user: User) -> int:
    """Recount the user's published threads and store the value on the row."""
    stmt = select(func.count(Thread.id)).where(Thread.user_id == user.id, *NORMAL_THREAD_FILTER)
    user.thread_count = (await session.execute(stmt)).scalar_one()
    await session.flush()
    return user.thread_count
