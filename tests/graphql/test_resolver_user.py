"""
Tests for user GraphQL resolvers
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from usergraph.dbmodels import Users
from usergraph.graphql.resolvers.user import (
    create_user,
    delete_user,
    get_user_service,
    resolve_user_by_id,
    resolve_users,
    update_user,
)
from usergraph.graphql.types.user import CreateUserInput, User
from usergraph.services.user import UserService


def make_user(id: int, name: str, email: str):
    user = MagicMock(spec=Users)
    user.id = id
    user.name = name
    user.email = email
    return user


@pytest.fixture
def service(mock_info):
    service = AsyncMock(spec=UserService)
    mock_info.context["user_service"] = service
    return service


@pytest.mark.unit
def test_get_user_service_missing_from_context(mock_info):
    with pytest.raises(RuntimeError, match="UserService missing"):
        get_user_service(mock_info)


@pytest.mark.unit
class TestQueryResolvers:
    @pytest.mark.asyncio
    async def test_resolve_users_converts_rows(self, mock_info, service):
        service.find_all.return_value = [
            make_user(1, "Ann", "ann@x.com"),
            make_user(2, "Bob", "b@x.com"),
        ]

        result = await resolve_users(mock_info)

        assert result == [User(id=1, name="Ann", email="ann@x.com"), User(id=2, name="Bob", email="b@x.com")]
        service.find_all.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_resolve_user_by_id(self, mock_info, service):
        service.find_one.return_value = make_user(7, "Ann", "ann@x.com")

        result = await resolve_user_by_id(mock_info, 7)

        assert result == User(id=7, name="Ann", email="ann@x.com")
        service.find_one.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    async def test_resolve_user_by_id_not_found(self, mock_info, service):
        service.find_one.return_value = None

        assert await resolve_user_by_id(mock_info, 7) is None


@pytest.mark.unit
class TestMutationResolvers:
    @pytest.mark.asyncio
    async def test_create_user_passes_input_through(self, mock_info, service):
        data = CreateUserInput(name="Ann", email="ann@x.com")
        service.create.return_value = make_user(1, "Ann", "ann@x.com")

        result = await create_user(mock_info, data)

        assert result == User(id=1, name="Ann", email="ann@x.com")
        service.create.assert_awaited_once_with(data)

    @pytest.mark.asyncio
    async def test_create_user_reraises_store_errors(self, mock_info, service):
        service.create.side_effect = RuntimeError("database is locked")

        with pytest.raises(RuntimeError, match="database is locked"):
            await create_user(mock_info, CreateUserInput(name="Ann", email="ann@x.com"))

    @pytest.mark.asyncio
    async def test_update_user(self, mock_info, service):
        data = CreateUserInput(name="Bob", email="b@x.com")
        service.update.return_value = make_user(3, "Bob", "b@x.com")

        result = await update_user(mock_info, 3, data)

        assert result == User(id=3, name="Bob", email="b@x.com")
        service.update.assert_awaited_once_with(3, data)

    @pytest.mark.asyncio
    async def test_update_user_not_found(self, mock_info, service):
        service.update.return_value = None

        result = await update_user(mock_info, 3, CreateUserInput(name="Bob", email="b@x.com"))

        assert result is None

    @pytest.mark.asyncio
    async def test_delete_user(self, mock_info, service):
        service.remove.return_value = True

        assert await delete_user(mock_info, 3) is True
        service.remove.assert_awaited_once_with(3)
