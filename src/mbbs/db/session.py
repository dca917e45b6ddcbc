from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from sqlalchemy import MetaData
from mbbs.core.config import get_settings
from typing import AsyncGenerator

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}
metadata = MetaData(naming_convention=convention)

class Base(DeclarativeBase):
    metadata = metadata


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (all timestamp columns are naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


_settings = get_settings()
# sqlite connections are cheap and must not outlive the event loop that opened them
_engine_kwargs = {"poolclass": NullPool} if _settings.is_sqlite else {}
engine = create_async_engine(_settings.database_url_async, echo=False, future=True, **_engine_kwargs)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:  # type: ignore
        yield session
