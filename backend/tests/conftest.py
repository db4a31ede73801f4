"""
Pytest fixtures for an isolated data file, event bus, repositories and client.

Every test gets its own JSON document under tmp_path and its own bus, so
nothing leaks between tests. The HTTP client overrides the repositories
dependency on the app, the same way the app is wired at startup.
"""

import json
from pathlib import Path
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from eventgraph.main import app
from eventgraph.api.context import get_repositories
from eventgraph.events.bus import EventBus
from eventgraph.services.container import Repositories, build_repositories
from eventgraph.store.json_store import JsonStore

EMPTY_DOCUMENT = {"users": [], "events": [], "locations": [], "participants": []}


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(EMPTY_DOCUMENT))
    return path


@pytest.fixture
def seed(data_file: Path) -> Callable[..., None]:
    """Overwrite the data file with the given collections."""

    def write(**collections):
        document = {**EMPTY_DOCUMENT, **collections}
        data_file.write_text(json.dumps(document))

    return write


@pytest.fixture
def read_file(data_file: Path) -> Callable[[], dict]:
    return lambda: json.loads(data_file.read_text())


@pytest.fixture
def store(data_file: Path) -> JsonStore:
    return JsonStore(data_file)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def repos(store: JsonStore, bus: EventBus) -> Repositories:
    return build_repositories(store, bus)


@pytest_asyncio.fixture(scope="function")
async def client(repos: Repositories) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the repositories dependency with the test container."""
    app.dependency_overrides[get_repositories] = lambda: repos

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def gql(client: AsyncClient):
    """Run a GraphQL operation and return the decoded response body."""

    async def execute(query: str, **variables) -> dict:
        response = await client.post("/graphql", json={"query": query, "variables": variables})
        assert response.status_code == 200
        return response.json()

    return execute


@pytest.fixture
def alice() -> dict:
    return {"id": "1", "username": "alice", "email": "a@x.com"}
