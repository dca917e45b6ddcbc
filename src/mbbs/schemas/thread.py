from datetime import datetime
from pydantic import BaseModel, Field
from .base import ORMBase
from .user import UserRead

class ThreadCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = ""
    category_id: int | None = None
    is_draft: bool = False


class ThreadUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = None
    # drafts are published by sending ``is_draft: false``
    is_draft: bool | None = None


class ThreadModerate(BaseModel):
    is_sticky: bool | None = None
    is_essence: bool | None = None
    is_approved: int | None = Field(default=None, ge=0, le=2)
    disable_post: bool | None = None


class ThreadRead(ORMBase):
    id: int
    user_id: int
    last_posted_user_id: int | None = None
    category_id: int | None = None
    first_post_id: int | None = None
    type: int
    is_approved: int
    is_sticky: bool
    is_essence: bool
    is_draft: bool
    disable_post: bool | None = None
    title: str
    content_for_indexes: str
    post_count: int
    view_count: int
    deleted_user_id: int | None = None
    posted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None
    modified_at: datetime | None = None
    deleted_at: datetime | None = None


class ThreadView(ThreadRead):
    """Thread as seen by one viewer, with capability flags."""
    content: str
    user: UserRead | None = None
    like_count: int | None = None
    reply_count: int | None = None
    is_liked: bool
    can_edit: bool
    can_hide: bool
    can_like: bool
    can_reply: bool
    can_essence: bool
    can_sticky: bool
    can_set_disable_post: bool
    can_view_posts: bool


class ThreadCounts(BaseModel):
    user_id: int
    today: int
    in_range: int | None = None
