"""
Database connection management
"""

import os
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_async_database_url, settings
from ..logging import get_logger

logger = get_logger(__name__)

# Global shared connection pool
_async_engine: AsyncEngine | None = None
_async_session_local: async_sessionmaker[AsyncSession] | None = None
_initialized = False
_init_lock = threading.Lock()


def get_database_url() -> str:
    """Get database URL, checking the environment first for test compatibility."""
    return os.getenv("SOCIALGRAPH_DATABASE_URL") or settings.database_url


def create_engine_for_url(database_url: str) -> AsyncEngine:
    """Create an async engine, applying pool sizing only where the driver pools."""
    async_url = get_async_database_url(database_url)
    if async_url.startswith("sqlite"):
        return create_async_engine(async_url, echo=settings.sql_echo)
    return create_async_engine(
        async_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.sql_echo,
    )


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Initialize the shared async connection pool."""
    global _async_engine, _async_session_local, _initialized

    if _initialized and not force_reinit and database_url is None:
        return

    with _init_lock:
        if _initialized and not force_reinit and database_url is None:
            return

        db_url = database_url or get_database_url()
        _async_engine = create_engine_for_url(db_url)
        _async_session_local = async_sessionmaker(
            _async_engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

        _initialized = True
        logger.info("Database initialized", database_url=db_url)


def reset_database() -> None:
    """Drop references to the shared pool (for tests)."""
    global _async_engine, _async_session_local, _initialized
    _async_engine = None
    _async_session_local = None
    _initialized = False


async def dispose_database() -> None:
    """Close pooled connections and reset state."""
    if _async_engine is not None:
        await _async_engine.dispose()
    reset_database()


def get_async_engine() -> AsyncEngine:
    """Get the shared async SQLAlchemy engine."""
    if _async_engine is None:
        init_database()
    assert _async_engine is not None
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the shared async session factory."""
    if _async_session_local is None:
        init_database()

    if _async_session_local is None:
        raise RuntimeError("Database not initialized")
    return _async_session_local


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session (async) from the shared pool."""
    session_local = get_session_factory()

    async with session_local() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def test_database_connection() -> tuple[bool, str | None]:
    """
    Test the database connection and return a readable error message.

    Returns:
        tuple: (success: bool, error_message: str | None)
    """
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True, None
    except Exception as e:
        error_str = str(e)
        if "Connection refused" in error_str or "could not connect" in error_str:
            return False, (
                f"Cannot connect to database server: {error_str}\n"
                f"The database server appears to be down or unreachable."
            )
        if "password authentication failed" in error_str:
            return False, f"Database authentication failed: {error_str}"
        return False, f"Database connection error ({type(e).__name__}): {error_str}"
