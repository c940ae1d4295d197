"""CRUD operations for user records."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..database.connection import session_scope
from ..dbmodels import Users
from ..logging import get_logger

logger = get_logger(__name__)


class UserFields(Protocol):
    """Anything carrying the writable user fields (e.g. ``CreateUserInput``)."""

    name: str
    email: str


class UserService:
    """
    Mediates between the API layer and the ``users`` table.

    Every method runs in its own session scope: committed on success,
    rolled back and re-raised on error. Missing ids are never an error.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_all(self) -> Sequence[Users]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(select(Users))
            return result.scalars().all()

    async def find_one(self, user_id: int) -> Users | None:
        async with session_scope(self._session_factory) as session:
            return await session.get(Users, user_id)

    async def create(self, data: UserFields) -> Users:
        async with session_scope(self._session_factory) as session:
            user = Users(name=data.name, email=data.email)
            session.add(user)
            await session.flush()
            logger.info("User created", user_id=user.id)
            return user

    async def update(self, user_id: int, data: UserFields) -> Users | None:
        """Overwrite name and email, then return the row as it now stands."""
        async with session_scope(self._session_factory) as session:
            stmt = (
                update(Users)
                .where(Users.id == user_id)
                .values(name=data.name, email=data.email)
            )
            await session.execute(stmt)
            user = await session.get(Users, user_id)

        if user is None:
            logger.info("Update targeted missing user", user_id=user_id)
        return user

    async def remove(self, user_id: int) -> bool:
        """Delete the row if present. Always reports success."""
        async with session_scope(self._session_factory) as session:
            await session.execute(delete(Users).where(Users.id == user_id))

        logger.info("User removed", user_id=user_id)
        return True
