import pytest

from mbbs.core.config import Settings


@pytest.mark.unit
def test_sqlite_urls(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./x.db")
    settings = Settings()
    assert settings.is_sqlite
    assert settings.database_url_async == "sqlite+aiosqlite:///./x.db"
    assert settings.database_url_sync == "sqlite:///./x.db"


@pytest.mark.unit
def test_postgres_urls_from_components(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("POSTGRES_HOST", "pg")
    settings = Settings(_env_file=None)
    assert settings.database_url_async == "postgresql+asyncpg://mbbs:mbbspwd@pg:5432/mbbs"
    assert settings.database_url_sync == "postgresql+psycopg://mbbs:mbbspwd@pg:5432/mbbs"
    assert not settings.is_sqlite


@pytest.mark.unit
def test_forum_defaults(monkeypatch):
    monkeypatch.delenv("RESOURCE_BASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert (settings.admin_group_id, settings.tourist_group_id, settings.default_group_id) == (1, 7, 10)
    assert settings.resource_base_url == "/resources/"
    assert settings.thread_require_approval is False
