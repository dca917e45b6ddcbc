"""User service layer.

Registration, token lookup and listing; raises domain errors instead of
returning ``None``.
"""
from __future__ import annotations

import secrets
from sqlalchemy.ext.asyncio import AsyncSession

from mbbs.core.config import get_settings
from mbbs.core.errors import DuplicateUserError, UserNotFoundError
from mbbs.schemas.user import UserCreate
from mbbs.models.user import User
from mbbs.repositories import user as user_repo

__all__ = [
    "UserNotFoundError",
    "DuplicateUserError",
    "create_user",
    "get_user_or_404",
    "authenticate",
    "list_users",
]

async def create_user(session: AsyncSession, data: UserCreate, *, group_id: int | None = None) -> User:
    if await user_repo.exists_with(session, username=data.username, email=data.email):
        raise DuplicateUserError()
    return await user_repo.create(
        session,
        username=data.username,
        email=data.email,
        group_id=group_id if group_id is not None else get_settings().default_group_id,
        token=secrets.token_hex(16),
    )

async def get_user_or_404(session: AsyncSession, user_id: int) -> User:
    user = await user_repo.get_by_id(session, user_id)
    if not user:
        raise UserNotFoundError()
    return user

async def authenticate(session: AsyncSession, token: str) -> User | None:
    if not token:
        return None
    return await user_repo.get_by_token(session, token)

async def list_users(session: AsyncSession) -> list[User]:
    return await user_repo.list_all(session)
