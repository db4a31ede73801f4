"""
HTTP routes: the GraphQL endpoint plus health and metrics.
"""

from fastapi import APIRouter, Depends
from strawberry.fastapi import GraphQLRouter

from eventgraph.api.context import get_context, get_repositories
from eventgraph.api.schema import build_schema
from eventgraph.core.config import Settings
from eventgraph.core.errors import StoreIOError
from eventgraph.core.metrics import metrics_endpoint
from eventgraph.services.container import Repositories


def create_graphql_router(settings: Settings) -> GraphQLRouter:
    return GraphQLRouter(
        build_schema(debug=settings.DEBUG),
        context_getter=get_context,
        graphql_ide="graphiql" if settings.DEBUG else None,
    )


def create_service_router(settings: Settings) -> APIRouter:
    router = APIRouter()

    @router.get("/health", tags=["Health"])
    async def health_check(repositories: Repositories = Depends(get_repositories)):
        """Health check endpoint for Docker and load balancers."""
        try:
            records = await repositories.total_count()
            store = {"status": "ok", "records": records}
        except StoreIOError as e:
            store = {"status": "unavailable", "error": str(e)}

        return {
            "status": "healthy" if store["status"] == "ok" else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "store": store,
            "subscriptions": repositories.bus.subscriber_count(),
        }

    @router.get("/metrics", tags=["Health"], include_in_schema=False)
    def metrics():
        return metrics_endpoint()

    @router.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "graphql": settings.GRAPHQL_PATH,
        }

    return router
