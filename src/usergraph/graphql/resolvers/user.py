from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...logging import get_logger
from ..types.user import User

if TYPE_CHECKING:
    from ...services.user import UserService
    from ..types.user import CreateUserInput

logger = get_logger(__name__)


def get_user_service(info: strawberry.Info) -> UserService:
    """Fetch the UserService placed in the GraphQL context at startup."""
    try:
        return info.context["user_service"]
    except KeyError:
        raise RuntimeError("UserService missing from GraphQL context") from None


# Query resolvers
async def resolve_users(info: strawberry.Info) -> list[User]:
    service = get_user_service(info)
    users = await service.find_all()
    return [User.from_model(user) for user in users]


async def resolve_user_by_id(info: strawberry.Info, id: int) -> User | None:
    service = get_user_service(info)
    user = await service.find_one(id)
    if user is None:
        logger.info("User not found", user_id=id)
        return None
    return User.from_model(user)


# Mutation resolvers
async def create_user(info: strawberry.Info, input: CreateUserInput) -> User:
    service = get_user_service(info)
    try:
        user = await service.create(input)
    except Exception as e:
        logger.error("Failed to create user", error=str(e))
        raise
    return User.from_model(user)


async def update_user(info: strawberry.Info, id: int, input: CreateUserInput) -> User | None:
    service = get_user_service(info)
    try:
        user = await service.update(id, input)
    except Exception as e:
        logger.error("Failed to update user", user_id=id, error=str(e))
        raise
    return User.from_model(user) if user is not None else None


async def delete_user(info: strawberry.Info, id: int) -> bool:
    service = get_user_service(info)
    try:
        return await service.remove(id)
    except Exception as e:
        logger.error("Failed to delete user", user_id=id, error=str(e))
        raise
