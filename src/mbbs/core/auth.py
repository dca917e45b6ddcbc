"""Bearer token authentication.

Clients send ``Authorization: Bearer <login token>``; the token is looked up
on ``users.token``. A request without the header is an anonymous viewer
(``None``), which read endpoints accept and write endpoints reject through
``require_user``. A header with an unknown token is always a 401.
"""
from __future__ import annotations

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession

from mbbs.db.session import get_db
from mbbs.models.user import User
from mbbs.services.user import authenticate

async def get_current_user(
    authorization: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db),
) -> Optional[User]:
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Malformed bearer token")
    token = authorization[len("Bearer "):].strip()
    user = await authenticate(session, token)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid bearer token")
    return user

async def require_user(current_user: Optional[User] = Depends(get_current_user)) -> User:
    if current_user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return current_user

__all__ = ["get_current_user", "require_user"]
