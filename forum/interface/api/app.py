"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import Optional

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI

from forum.application.pipeline import VoteEventPipeline
from forum.interface.api.routes import auth, comments, health, notifications, posts, votes
from forum.util.di.container import create_container, setup_di
from forum.util.observability import instrument_fastapi


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """Start the vote workers with the app and release every resource on exit."""
    container = app_instance.state.dishka_container
    pipeline = await container.get(VoteEventPipeline)
    pipeline.start()
    try:
        yield
    finally:
        # Closing the container stops the pipeline, the hub and the task pool
        await container.close()
        logfire.info("Application shut down")


def create_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        container: DI container to serve from; the production container is
            built when omitted

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, configure in conftest.py if needed.
    """
    app_instance = FastAPI(
        title="Forum API",
        description="Backend API for a community forum: ranked feeds, asynchronous votes and live notifications",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    # Setup dependency injection
    # Settings are loaded from environment automatically
    if container is None:
        container = create_container()
    setup_di(app_instance, container)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(posts.router)
    app_instance.include_router(comments.router)
    app_instance.include_router(votes.router)
    app_instance.include_router(notifications.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
