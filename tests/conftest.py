"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import strawberry
from alembic import command
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from usergraph.database.cli import get_alembic_config
from usergraph.database.connection import (
    create_engine_for,
    create_session_factory,
    reset_database,
)
from usergraph.dbmodels import Base
from usergraph.services.user import UserService


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def database_url(tmp_path) -> str:
    """DSN for a throwaway SQLite database file."""
    return f"sqlite:///{tmp_path / 'usergraph-test.db'}"


@pytest.fixture
def migrated_database_url(database_url: str) -> Generator[str, None, None]:
    """Run Alembic upgrade to head against the throwaway database."""
    os.environ["USERGRAPH_DATABASE_URL"] = database_url
    reset_database()
    command.upgrade(get_alembic_config(database_url), "head")
    yield database_url
    reset_database()


@pytest_asyncio.fixture
async def session_factory(
    database_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a freshly created schema."""
    engine = create_engine_for(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield create_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def user_service(session_factory: async_sessionmaker[AsyncSession]) -> UserService:
    return UserService(session_factory)


@pytest.fixture
def graphql_context(user_service: UserService) -> dict[str, Any]:
    """Context dict as the GraphQL router would build it."""
    return {"request": None, "user_service": user_service}


@pytest.fixture
def mock_info() -> Any:
    """Mock GraphQL info object; tests fill ``info.context['user_service']``."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {"request": MagicMock()}
    return info
