from datetime import datetime
from pydantic import BaseModel, Field
from .base import ORMBase

class PostCreate(BaseModel):
    content: str = Field(min_length=1)


class PostRead(ORMBase):
    id: int
    thread_id: int
    user_id: int
    content: str
    is_first: bool
    like_count: int
    reply_count: int
    created_at: datetime


class LikeRead(BaseModel):
    liked: bool
    like_count: int
