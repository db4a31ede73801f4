"""
Event Graph API - Main Application Entry Point

A GraphQL API over Users, Events, Locations and Participants demonstrating:
- Read-modify-write of a flat JSON document serialized behind one lock
- Change notifications fanned out to GraphQL subscriptions over websockets
- Per-subscriber filters on event and participant creation
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventgraph.core.config import get_settings
from eventgraph.core.logging import setup_logging, get_logger
from eventgraph.api.middleware import RequestLoggingMiddleware
from eventgraph.api.router import create_graphql_router, create_service_router
from eventgraph.events.bus import EventBus
from eventgraph.services.container import build_repositories
from eventgraph.store.json_store import JsonStore

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    store = JsonStore(settings.DATA_FILE)
    if settings.DATA_FILE_CREATE:
        await store.initialize()
    bus = EventBus(max_queue_size=settings.SUBSCRIPTION_QUEUE_SIZE)
    app.state.repositories = build_repositories(store, bus)
    logger.info("store_ready", path=settings.DATA_FILE)

    yield

    # Ends every open subscription stream
    bus.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="GraphQL API for events, locations and participants with live subscriptions",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(create_graphql_router(settings), prefix=settings.GRAPHQL_PATH)
app.include_router(create_service_router(settings))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
