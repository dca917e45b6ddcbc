from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from mbbs.api import deps
from mbbs.models.user import User
from mbbs.schemas.user import UserCreate, UserRead, UserCreated
from mbbs.services.user import (
    create_user,
    get_user_or_404,
    list_users,
    DuplicateUserError,
    UserNotFoundError,
)

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserRead, summary="Get current user")
async def get_current_user_route(current_user: User | None = Depends(deps.get_current_user)):
    if not current_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return current_user  # type: ignore

@router.post("/", response_model=UserCreated, status_code=status.HTTP_201_CREATED,
             summary="Register a user",
             description="Create a user in the default group. The login token is only returned here.")
async def create_user_route(payload: UserCreate, session: AsyncSession = Depends(deps.get_db)):
    try:
        user = await create_user(session, payload)
        await session.commit()
        return user  # type: ignore
    except DuplicateUserError:
        raise HTTPException(status_code=409, detail="Username or email already registered")


@router.get("/", response_model=list[UserRead], summary="List users")
async def list_users_route(session: AsyncSession = Depends(deps.get_db)):
    return await list_users(session)


@router.get("/{user_id}", response_model=UserRead, summary="Get a user")
async def get_user_route(user_id: int, session: AsyncSession = Depends(deps.get_db)):
    try:
        return await get_user_or_404(session, user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
