"""
Request context for GraphQL resolvers.

The repositories are resolved through a FastAPI dependency so tests can
swap in an isolated container with `app.dependency_overrides`.
"""

from fastapi import Depends
from starlette.requests import HTTPConnection
from strawberry.fastapi import BaseContext

from eventgraph.services.container import Repositories


def get_repositories(connection: HTTPConnection) -> Repositories:
    """Works for both HTTP requests and websocket subscriptions."""
    return connection.app.state.repositories


class GraphContext(BaseContext):
    def __init__(self, repositories: Repositories):
        super().__init__()
        self.repositories = repositories


async def get_context(
    repositories: Repositories = Depends(get_repositories),
) -> GraphContext:
    return GraphContext(repositories)
