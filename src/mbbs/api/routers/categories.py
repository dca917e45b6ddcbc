from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from mbbs.api import deps
from mbbs.models.user import User
from mbbs.schemas.category import CategoryCreate, CategoryRead
from mbbs.services.category import (
    create_category,
    get_category_or_404,
    list_categories,
    CategoryNotFoundError,
)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED,
             summary="Create a category (admin only)")
async def create_category_route(
    payload: CategoryCreate,
    session: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_user),
):
    category = await create_category(
        session, current_user, name=payload.name, description=payload.description, sort=payload.sort
    )
    await session.commit()
    return category


@router.get("/", response_model=list[CategoryRead], summary="List categories")
async def list_categories_route(session: AsyncSession = Depends(deps.get_db)):
    return await list_categories(session)


@router.get("/{category_id}", response_model=CategoryRead, summary="Get a category")
async def get_category_route(category_id: int, session: AsyncSession = Depends(deps.get_db)):
    try:
        return await get_category_or_404(session, category_id)
    except CategoryNotFoundError:
        raise HTTPException(status_code=404, detail="Category not found")
