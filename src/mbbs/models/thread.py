import enum
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, Text, DateTime, ForeignKey, Index
from mbbs.db.session import Base, utcnow


class ThreadIsApproved(enum.IntEnum):
    checking = 0
    ok = 1
    check_failed = 2


class Thread(Base):
    """forum thread; the body lives in the post referenced by ``first_post_id``"""
    __tablename__ = "threads"
    __table_args__ = (
        Index("ix_threads_category_id_is_sticky", "category_id", "is_sticky"),
        Index("ix_threads_category_id_posted_at", "category_id", "posted_at"),
        Index("ix_threads_category_id_created_at", "category_id", "created_at"),
        Index("ix_threads_category_id_modified_at", "category_id", "modified_at"),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    last_posted_user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"), nullable=True, index=True)
    # nullable for rows written before the body moved into posts
    first_post_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # reserved, always 1
    type: Mapped[int] = mapped_column(Integer, default=1)
    is_approved: Mapped[int] = mapped_column(Integer, default=ThreadIsApproved.checking)
    is_sticky: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    is_essence: Mapped[bool] = mapped_column(Boolean, default=False)
    is_draft: Mapped[bool] = mapped_column(Boolean, default=False)
    disable_post: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    title: Mapped[str] = mapped_column(String(255), default="")
    content_for_indexes: Mapped[str] = mapped_column(Text, default="")
    # the first post counts, so at least 1 once the body exists
    post_count: Mapped[int] = mapped_column(Integer, default=0)
    view_count: Mapped[int] = mapped_column(Integer, default=0)
    deleted_user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    posted_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
    modified_at: Mapped[datetime | None] = mapped_column(DateTime, default=utcnow, nullable=True, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


# Soft delete is not applied implicitly; queries add one of these explicitly.
ALL_NOT_DELETED_THREAD_FILTER = (
    Thread.deleted_at.is_(None),
    Thread.is_draft.is_(False),
)

NORMAL_THREAD_FILTER = (
    Thread.deleted_at.is_(None),
    Thread.is_approved == ThreadIsApproved.ok,
    Thread.is_draft.is_(False),
)
