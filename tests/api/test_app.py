"""
HTTP tests for the FastAPI application
"""

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from usergraph import __version__
from usergraph.api.app import create_app


@pytest.fixture
def app(user_service):
    return create_app(user_service=user_service)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_health(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "version": __version__}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_graphql_create_then_fetch(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.post(
            "/graphql",
            json={
                "query": (
                    "mutation Create($input: CreateUserInput!) "
                    "{ createUser(createUserInput: $input) { id name email } }"
                ),
                "variables": {"input": {"name": "Ann", "email": "ann@x.com"}},
            },
        )
        assert resp.status_code == 200, resp.text
        created = resp.json()["data"]["createUser"]

        resp = await client.post(
            "/graphql",
            json={"query": "query { users { id name email } }"},
        )

    assert resp.json()["data"]["users"] == [created]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_request_id_header(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        generated = await client.get("/health")
        echoed = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert generated.headers["X-Request-ID"]
    assert echoed.headers["X-Request-ID"] == "req-123"


@pytest.mark.integration
def test_lifespan_builds_service_from_settings(migrated_database_url):
    app = create_app()

    with TestClient(app) as client:
        resp = client.post(
            "/graphql",
            json={
                "query": 'mutation { createUser(createUserInput: {name: "Ann", email: "ann@x.com"}) { id } }'
            },
        )
        assert resp.status_code == 200, resp.text
        user_id = resp.json()["data"]["createUser"]["id"]

        resp = client.post("/graphql", json={"query": f"mutation {{ deleteUser(id: {user_id}) }}"})
        assert resp.json()["data"]["deleteUser"] is True

    assert app.state.user_service is None
