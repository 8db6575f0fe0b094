from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from catalog_store.config.settings import Settings


# Engines own connection pools; one per (url, options) per process.
@lru_cache()
def _engine_for(url: str, echo: bool, pool_pre_ping: bool) -> Engine:
    return create_engine(url, echo=echo, pool_pre_ping=pool_pre_ping)


@lru_cache()
def _async_engine_for(url: str, echo: bool, pool_pre_ping: bool) -> AsyncEngine:
    return create_async_engine(url, echo=echo, pool_pre_ping=pool_pre_ping)


def get_engine(settings: Settings) -> Engine:
    """
    Sync engine for settings.DATABASE_URL.

    Usage:
        engine = get_engine(get_settings())
        dialect = resolve_dialect(engine)
    """
    return _engine_for(settings.DATABASE_URL, settings.SQLALCHEMY_ECHO, settings.POOL_PRE_PING)


def get_async_engine(settings: Settings) -> AsyncEngine:
    """Async engine for settings.ASYNC_DATABASE_URL (e.g. sqlite+aiosqlite://, postgresql+asyncpg://)."""
    if not settings.ASYNC_DATABASE_URL:
        raise ValueError("ASYNC_DATABASE_URL is not configured")
    return _async_engine_for(settings.ASYNC_DATABASE_URL, settings.SQLALCHEMY_ECHO, settings.POOL_PRE_PING)
