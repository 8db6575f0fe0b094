import pytest
from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine

from catalog_store.config.settings import Settings, get_settings
from catalog_store.database.session import get_async_engine, get_engine


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("ENV", "DATABASE_URL", "ASYNC_DATABASE_URL", "LOG_LEVEL", "LOG_FORMAT", "LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.ENV == "development"
        assert settings.DATABASE_URL.startswith("sqlite:///")
        assert settings.ASYNC_DATABASE_URL is None
        assert settings.LOG_FORMAT == "json"
        assert settings.LOG_TO_STDOUT is True
        assert settings.LOG_DIR is None
        assert settings.POOL_PRE_PING is True

    def test_log_level_is_normalized(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).LOG_LEVEL == "DEBUG"

    def test_log_format_is_normalized(self, clean_env):
        clean_env.setenv("LOG_FORMAT", "TEXT")
        assert Settings(_env_file=None).LOG_FORMAT == "text"

    def test_invalid_log_format(self, clean_env):
        clean_env.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_database_url_from_env(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql+psycopg://u:p@localhost/catalog")
        assert Settings(_env_file=None).DATABASE_URL == "postgresql+psycopg://u:p@localhost/catalog"

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_FORMAT=text\nENV=staging\n", encoding="utf-8")
        settings = Settings(_env_file=env_file)
        assert settings.LOG_FORMAT == "text"
        assert settings.ENV == "staging"

    def test_get_settings_is_cached(self, clean_env):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestEngines:

    def test_get_engine_is_cached_per_url(self, tmp_path):
        settings = Settings(_env_file=None, DATABASE_URL=f"sqlite:///{tmp_path / 'a.db'}")
        engine = get_engine(settings)
        assert isinstance(engine, Engine)
        assert get_engine(settings) is engine

        other = Settings(_env_file=None, DATABASE_URL=f"sqlite:///{tmp_path / 'b.db'}")
        assert get_engine(other) is not engine

    def test_async_engine_requires_url(self):
        with pytest.raises(ValueError):
            get_async_engine(Settings(_env_file=None, ASYNC_DATABASE_URL=None))

    async def test_async_engine(self, tmp_path):
        settings = Settings(_env_file=None, ASYNC_DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'c.db'}")
        engine = get_async_engine(settings)
        try:
            assert isinstance(engine, AsyncEngine)
            assert engine.dialect.name == "sqlite"
        finally:
            await engine.dispose()
