"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..dbmodels import USER_FIELDS, Users
from ..logging import get_logger
from ..services.user import UserService
from .mutations.root import Mutation
from .queries.root import Query
from .types.user import User

logger = get_logger(__name__)

# Create the GraphQL schema
schema = strawberry.Schema(query=Query, mutation=Mutation)


class SchemaMappingError(Exception):
    """Raised when the table columns or GraphQL fields drift from USER_FIELDS."""


def check_user_field_mapping() -> None:
    """Check that the users table and the GraphQL User type expose the same fields."""
    expected = set(USER_FIELDS)
    columns = set(Users.__table__.columns.keys())
    gql_fields = {field.python_name for field in User.__strawberry_definition__.fields}

    problems = []
    if columns != expected:
        problems.append(f"users table columns {sorted(columns)} != {sorted(expected)}")
    if gql_fields != expected:
        problems.append(f"GraphQL User fields {sorted(gql_fields)} != {sorted(expected)}")
    if problems:
        raise SchemaMappingError("; ".join(problems))


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Resolves every type reference, runs an introspection query and checks the
    User field mapping so that a broken schema stops the server from starting.

    Raises:
        Exception: If the schema is invalid or the mappings disagree
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        check_user_field_mapping()

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def create_graphql_router(
    user_service: UserService | None = None,
) -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI.

    The service is taken from ``user_service`` when given, otherwise from
    ``app.state.user_service`` which the application lifespan sets.
    """

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return {
            "request": request,
            "user_service": user_service or request.app.state.user_service,
        }

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphiql=settings.graphiql,
        context_getter=get_context,
    )
