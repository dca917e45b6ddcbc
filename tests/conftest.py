import os
import uuid
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator

# Configure database for tests via settings module rather than hardcoding directly.
# Allow overriding with TEST_DATABASE_URL; fall back to a local sqlite file.
test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./tests/test.db")
os.environ.setdefault("DATABASE_URL", test_db_url)
os.environ.setdefault("RESOURCE_BASE_URL", "https://res.example.com/")

from mbbs.core import config as _config  # noqa: E402
_config.get_settings.cache_clear()  # ensure new env vars are picked up # type: ignore[attr-defined]
_settings = _config.get_settings()

from mbbs.api.main import app  # noqa: E402
from mbbs.db.session import AsyncSessionLocal, engine, Base  # noqa: E402
from mbbs.models import (  # noqa: E402
    Category,
    Group,
    GroupPermission,
    Post,
    PostLike,
    Thread,
    User,
)
from mbbs.services.thread import get_thread_cache  # noqa: E402
from sqlalchemy import delete  # noqa: E402

@pytest_asyncio.fixture(autouse=True, scope="session", loop_scope="session")
async def prepare_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest.fixture(scope="session")
def settings():
    """Expose application settings to tests if needed."""
    return _settings

@pytest_asyncio.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:  # type: ignore
        yield session

@pytest_asyncio.fixture()
async def client():
    # httpx >=0.28 removed the 'app=' shortcut; use ASGITransport explicitly
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

@pytest_asyncio.fixture(autouse=True)
async def _clear_tables():
    """Ensure isolated tests by clearing tables before each test.
    Order matters due to FK constraints: PostLike -> Post -> Thread -> Category/User.
    """
    async with AsyncSessionLocal() as session:  # type: ignore
        # delete in child->parent order
        await session.execute(delete(PostLike))
        await session.execute(delete(Post))
        await session.execute(delete(Thread))
        await session.execute(delete(Category))
        await session.execute(delete(GroupPermission))
        await session.execute(delete(Group))
        await session.execute(delete(User))
        await session.commit()
    # sqlite reuses primary keys after deletes; cached rows would leak between tests
    get_thread_cache().clear()
    yield


@pytest.fixture()
def make_user(db_session: AsyncSession):
    """Factory creating a flushed user in the default (or given) group."""
    async def _make(group_id: int | None = None, **kwargs) -> User:
        name = kwargs.pop("username", f"u-{uuid.uuid4().hex[:10]}")
        user = User(
            username=name,
            email=kwargs.pop("email", f"{name}@example.com"),
            group_id=group_id if group_id is not None else _settings.default_group_id,
            token=kwargs.pop("token", uuid.uuid4().hex),
            **kwargs,
        )
        db_session.add(user)
        await db_session.flush()
        return user
    return _make


@pytest.fixture()
def make_thread(db_session: AsyncSession):
    """Factory creating a thread plus its first post, bypassing permission checks."""
    async def _make(user: User, content: str = "body", **kwargs) -> Thread:
        thread = Thread(
            user_id=user.id,
            title=kwargs.pop("title", "a thread"),
            is_approved=kwargs.pop("is_approved", 1),
            post_count=1,
            **kwargs,
        )
        db_session.add(thread)
        await db_session.flush()
        post = Post(thread_id=thread.id, user_id=user.id, content=content, is_first=True)
        db_session.add(post)
        await db_session.flush()
        thread.first_post_id = post.id
        await db_session.flush()
        return thread
    return _make
