from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from .base import ORMBase

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    email: EmailStr

class UserRead(ORMBase):
    """Public view of a user; never carries the login token."""
    id: int
    username: str
    email: EmailStr
    group_id: int
    thread_count: int
    created_at: datetime


class UserCreated(UserRead):
    # returned once at registration so the client can authenticate
    token: str
