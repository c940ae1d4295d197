"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.user import CreateUserInput, User


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="createUser")
    async def create_user(
        self, info: strawberry.Info, create_user_input: CreateUserInput
    ) -> User:
        """Create a new user."""
        from ..resolvers.user import create_user

        return await create_user(info, create_user_input)

    @strawberry.mutation(name="updateUser")
    async def update_user(
        self, info: strawberry.Info, id: int, update_user_input: CreateUserInput
    ) -> User | None:
        """Update a user's name and email. Returns null when the user does not exist."""
        from ..resolvers.user import update_user

        return await update_user(info, id, update_user_input)

    @strawberry.mutation(name="deleteUser")
    async def delete_user(self, info: strawberry.Info, id: int) -> bool:
        """Delete a user. Always returns true."""
        from ..resolvers.user import delete_user

        return await delete_user(info, id)
