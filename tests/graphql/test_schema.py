"""
Tests for GraphQL schema shape and startup validation
"""

import pytest

from usergraph.graphql import schema as schema_module
from usergraph.graphql.schema import (
    SchemaMappingError,
    check_user_field_mapping,
    schema,
    validate_schema,
)


@pytest.mark.unit
def test_validate_schema_passes():
    validate_schema()


@pytest.mark.unit
def test_sdl_matches_wire_contract():
    sdl = schema.as_str()

    assert "type User {\n  id: Int!\n  name: String!\n  email: String!\n}" in sdl
    assert "input CreateUserInput {\n  name: String!\n  email: String!\n}" in sdl
    assert "users: [User!]!" in sdl
    assert "user(id: Int!): User\n" in sdl
    assert "createUser(createUserInput: CreateUserInput!): User!" in sdl
    assert "updateUser(id: Int!, updateUserInput: CreateUserInput!): User\n" in sdl
    assert "deleteUser(id: Int!): Boolean!" in sdl


@pytest.mark.unit
def test_field_mapping_matches():
    check_user_field_mapping()


@pytest.mark.unit
def test_field_mapping_drift_is_reported(monkeypatch):
    monkeypatch.setattr(schema_module, "USER_FIELDS", ("id", "name", "email", "phone"))

    with pytest.raises(SchemaMappingError) as exc_info:
        check_user_field_mapping()

    message = str(exc_info.value)
    assert "users table columns" in message
    assert "GraphQL User fields" in message


@pytest.mark.unit
def test_validate_schema_fails_on_drift(monkeypatch):
    monkeypatch.setattr(schema_module, "USER_FIELDS", ("id", "name"))

    with pytest.raises(SchemaMappingError):
        validate_schema()
