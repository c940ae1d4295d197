"""
User GraphQL type definitions
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

if TYPE_CHECKING:
    from ...dbmodels import Users


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: int
    name: str
    email: str

    @classmethod
    def from_model(cls, user: Users) -> User:
        return cls(id=user.id, name=user.name, email=user.email)


@strawberry.input
class CreateUserInput:
    """Input for creating or updating a user."""

    name: str
    email: str
