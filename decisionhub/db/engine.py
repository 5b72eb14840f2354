"""
Database engine, session factory, and declarative base.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs.
Both singletons are created on first use and dropped by ``close_db``.
"""

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from decisionhub.config import settings

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for every hub table."""


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _engine_options(url: str) -> dict:
    options: dict = {"echo": settings.debug}
    # SQLite uses a single-connection pool; sizing options are rejected
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        url = settings.async_database_url
        _engine = create_async_engine(url, **_engine_options(url))
        logger.info("database_engine_created", backend=url.split(":", 1)[0])
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def init_db() -> None:
    """Create tables in development; elsewhere the schema comes from Alembic."""
    import decisionhub.db.models  # noqa: F401

    if settings.environment.lower() != "development":
        logger.info("schema_managed_by_alembic", environment=settings.environment)
        return

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("tables_created", tables=len(Base.metadata.tables))


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("database_closed")
