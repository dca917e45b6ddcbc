from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime
from mbbs.core.config import get_settings
from mbbs.db.session import Base, utcnow

class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    group_id: Mapped[int] = mapped_column(Integer, index=True, default=10)
    # login credential; attachment links carry its first characters
    token: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    thread_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.group_id == get_settings().admin_group_id
