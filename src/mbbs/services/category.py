"""Category service layer."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from mbbs.core.errors import CategoryNotFoundError, PermissionDeniedError
from mbbs.models.category import Category
from mbbs.models.user import User
from mbbs.repositories import category as category_repo

__all__ = [
    "CategoryNotFoundError",
    "create_category",
    "get_category_or_404",
    "list_categories",
]


async def create_category(
    session: AsyncSession,
    user: User | None,
    *,
    name: str,
    description: str = "",
    sort: int = 0,
) -> Category:
    if user is None or not user.is_admin:
        raise PermissionDeniedError("admin")
    return await category_repo.create(session, name=name, description=description, sort=sort)


async def get_category_or_404(session: AsyncSession, category_id: int) -> Category:
    category = await category_repo.get_by_id(session, category_id)
    if not category:
        raise CategoryNotFoundError()
    return category


list_categories = category_repo.list_all
