"""
Database module for the usergraph backend
"""

from .connection import (
    DatabaseNotInitializedError,
    get_async_engine,
    get_async_sessionmaker,
    init_database,
    session_scope,
)

__all__ = [
    "DatabaseNotInitializedError",
    "get_async_engine",
    "get_async_sessionmaker",
    "init_database",
    "session_scope",
]
