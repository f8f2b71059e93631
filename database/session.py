"""
Async engines and sessions for the SQL state store.

One engine is kept per database URL, so stores pointed at different
databases never share connections. Sync-style URLs are mapped to their
async drivers:

  postgresql:// postgres://     → postgresql+asyncpg://   (asyncpg)
  mysql:// mysql+pymysql://     → mysql+aiomysql://       (aiomysql)
  sqlite://                     → sqlite+aiosqlite://     (aiosqlite)
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from config.settings import get_settings
from database.models import Base

logger = structlog.get_logger()

_ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
    "mysql": "mysql+aiomysql",
    "mysql+pymysql": "mysql+aiomysql",
    "sqlite": "sqlite+aiosqlite",
}

_engines: dict[str, AsyncEngine] = {}
_sessions: dict[str, async_sessionmaker[AsyncSession]] = {}


def _to_async_url(db_url: str) -> str:
    scheme, sep, rest = db_url.partition("://")
    if not sep:
        return db_url
    return f"{_ASYNC_DRIVERS.get(scheme, scheme)}://{rest}"


def _resolve(url: Optional[str]) -> str:
    return _to_async_url(url or get_settings().storage.url)


def get_engine(url: Optional[str] = None) -> AsyncEngine:
    """The engine for `url` (default: storage.url from settings), created on first use."""
    db_url = _resolve(url)
    engine = _engines.get(db_url)
    if engine is None:
        engine = create_async_engine(db_url, echo=get_settings().debug, pool_pre_ping=True)
        _engines[db_url] = engine
        _sessions[db_url] = async_sessionmaker(engine, expire_on_commit=False)
        logger.info("database_engine_created",
                    dialect=engine.dialect.name,
                    url=db_url.rsplit("@", 1)[-1])
    return engine


@asynccontextmanager
async def get_session(url: Optional[str] = None) -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on clean exit and rolls back on error."""
    get_engine(url)
    async with _sessions[_resolve(url)]() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(url: Optional[str] = None) -> None:
    """Create missing tables."""
    engine = get_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_initialized",
                dialect=engine.dialect.name,
                tables=sorted(Base.metadata.tables))


async def close_db(url: Optional[str] = None) -> None:
    """Dispose the engine for `url`, or every engine when no URL is given."""
    targets = [_resolve(url)] if url else list(_engines)
    for db_url in targets:
        engine = _engines.pop(db_url, None)
        _sessions.pop(db_url, None)
        if engine is not None:
            await engine.dispose()
            logger.info("database_closed", dialect=engine.dialect.name)
