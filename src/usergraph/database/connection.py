"""
Database connection management
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_database_url, settings, to_async_url
from ..logging import get_logger

logger = get_logger(__name__)

# Global shared connection pool
_async_engine: AsyncEngine | None = None
_async_session_local: async_sessionmaker[AsyncSession] | None = None
_initialized = False
_init_lock = threading.Lock()  # Protect initialization from race conditions


class DatabaseNotInitializedError(RuntimeError):
    """Raised when a session is requested before the engine exists."""


class DatabaseAlreadyInitializedError(RuntimeError):
    """Raised when re-pointing a live pool at a new URL without disposing it."""


def _engine_options(async_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.sql_echo}
    # SQLite pools do not take sizing arguments
    if not async_url.startswith("sqlite"):
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
    return options


def create_engine_for(database_url: str) -> AsyncEngine:
    """Create an async engine for a sync or async ``database_url``."""
    async_url = to_async_url(database_url)
    return create_async_engine(async_url, **_engine_options(async_url))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


def reset_database() -> None:
    """Reset database connections (for tests)."""
    global _async_engine, _async_session_local, _initialized
    _async_engine = None
    _async_session_local = None
    _initialized = False


async def dispose_database() -> None:
    """Dispose the shared engine and forget it."""
    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("Database engine disposed")
    reset_database()


async def check_database_connection() -> tuple[bool, str | None]:
    """
    Check the database connection and return helpful error messages.

    Returns:
        tuple: (success: bool, error_message: str | None)
    """
    if _async_engine is None:
        return False, "Database engine not initialized"

    try:
        async with _async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True, None
    except Exception as e:
        error_str = str(e)
        error_type = type(e).__name__

        if "does not exist" in error_str:
            db_name = get_database_url().split("/")[-1].split("?")[0]
            return False, (
                f"Cannot connect to database: {error_str}\n"
                f"This usually means the database '{db_name}' or its role doesn't exist.\n"
                f"Please check your database connection and run migrations if needed."
            )
        elif "Connection refused" in error_str or "could not connect" in error_str:
            return False, (
                f"Cannot connect to database server: {error_str}\n"
                f"The database server appears to be down or unreachable."
            )
        elif "password authentication failed" in error_str:
            return False, (
                f"Database authentication failed: {error_str}\n"
                f"Please check your database credentials."
            )
        elif "unable to open database file" in error_str:
            return False, f"Cannot open SQLite database file: {error_str}"
        else:
            return False, f"Database connection error ({error_type}): {error_str}"


def init_database(database_url: str | None = None) -> None:
    """Initialize the shared database connection pool.

    Calling it again without a URL is a no-op. Pointing an initialized pool at
    a URL raises ``DatabaseAlreadyInitializedError``; call
    ``dispose_database()`` first so the old pool is closed.
    """
    global _async_engine, _async_session_local, _initialized

    # Fast path: already initialized, no lock needed
    if _initialized and database_url is None:
        return

    with _init_lock:
        if _async_engine is not None:
            # Another thread may have initialized while we waited
            if database_url is None:
                return
            raise DatabaseAlreadyInitializedError(
                "Database already initialized; dispose it before switching URLs"
            )

        db_url = database_url or get_database_url()

        _async_engine = create_engine_for(db_url)
        _async_session_local = create_session_factory(_async_engine)

        _initialized = True
        logger.info("Database initialized", database_url=db_url)


def get_async_engine() -> AsyncEngine:
    """Get the shared async SQLAlchemy engine."""
    if _async_engine is None:
        init_database()
    if _async_engine is None:
        raise DatabaseNotInitializedError("Database not initialized")
    return _async_engine


def get_async_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the shared async session factory."""
    if _async_session_local is None:
        init_database()
    if _async_session_local is None:
        raise DatabaseNotInitializedError("Database not initialized")
    return _async_session_local


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session that commits on success and rolls back on error."""
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
