# backoffice/adapters/outbound/persistence/database.py

"""
Async engine and session factory.

``DATABASE_URL`` may name a synchronous driver (the form Alembic and the
seed scripts use); it is mapped to its async counterpart here.
"""

import logging
from typing import AsyncGenerator, Dict, Any
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from backoffice.adapters.configuration.config import settings
from backoffice.adapters.outbound.persistence.models.base_model import Base

logger = logging.getLogger(__name__)

ASYNC_DRIVERS = {
    "postgresql+psycopg2://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def async_database_url(url: str) -> str:
    """Swap a synchronous driver prefix for the matching async one."""
    for sync_prefix, async_prefix in ASYNC_DRIVERS.items():
        if url.startswith(sync_prefix):
            return async_prefix + url[len(sync_prefix):]
    return url


def sync_database_url(url: str) -> str:
    """Inverse of :func:`async_database_url`, for Alembic and the seed scripts."""
    return url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


def engine_options(url: str) -> Dict[str, Any]:
    # SQLite has no connection pool sizing
    options = {"echo": False, "future": True, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        options.update(pool_size=20, max_overflow=10, pool_timeout=30, pool_recycle=1800)
    return options


database_url = async_database_url(str(settings.DATABASE_URL))
logger.info(f"Connecting to database: {database_url.split('@')[-1]}")

engine = create_async_engine(database_url, **engine_options(database_url))

AsyncSessionLocal = async_sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Session scope for work outside a request: commits on success,
    rolls back on any error, always closes.

    Example:
        ```python
        async with get_db_context() as db:
            roles = await role_repository.list_with_permissions(db)
        ```
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.
    """
    async with get_db_context() as session:
        yield session


__all__ = [
    "Base", "engine", "AsyncSessionLocal", "get_db", "get_db_context",
    "async_database_url", "sync_database_url",
]
