"""
Database base configuration for SQLAlchemy models.

SQLAlchemy 2.0 style: models derive from ``Base`` (a DeclarativeBase) and all
request-path queries run on an async engine. ``DATABASE_URL`` is written in
its sync form (``sqlite://``, ``postgresql://``) and mapped to the matching
async driver here.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool

from guestbook.core.config import settings

# Build the async URL by string-prefix replacement on the raw DATABASE_URL.
# make_url() -> set(drivername) -> str() is avoided because SQLAlchemy's URL
# serialiser rewrites some hostnames.
_SYNC_PREFIX_MAP = {
    "postgresql+psycopg2://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}
_ASYNC_PREFIXES = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


def to_async_url(database_url: str) -> str:
    """
    Map a sync database URL to its async driver URL.

    Args:
        database_url: URL such as ``sqlite:///./guestbook.db``

    Returns:
        The equivalent async URL (already-async URLs are returned unchanged)

    Raises:
        ValueError: If no async driver is known for the URL's prefix
    """
    if database_url.startswith(_ASYNC_PREFIXES):
        return database_url
    for sync_prefix, async_prefix in _SYNC_PREFIX_MAP.items():
        if database_url.startswith(sync_prefix):
            return async_prefix + database_url[len(sync_prefix) :]
    raise ValueError(
        f"No async driver mapping for DATABASE_URL prefix. "
        f"Supported prefixes: {list(_SYNC_PREFIX_MAP.keys())}"
    )


def create_engine_from_url(database_url: str) -> AsyncEngine:
    """
    Create an async engine for ``database_url``.

    SQLite uses SQLAlchemy's default pool; server databases get a
    ``AsyncAdaptedQueuePool`` tuned by the ``DB_POOL_*`` settings.
    """
    async_url = to_async_url(database_url)
    kwargs: Dict[str, Any] = {"echo": settings.DEBUG}
    if not async_url.startswith("sqlite"):
        kwargs.update(
            poolclass=AsyncAdaptedQueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )
    return create_async_engine(async_url, **kwargs)


class Base(DeclarativeBase):
    """
    SQLAlchemy 2.0 declarative base class with type annotation support.
    """

    pass
