"""
SituationRoom API — application factory.

Bootstraps FastAPI, attaches the shared services to ``app.state`` and closes
their HTTP sessions on shutdown.

Extension points:
  - Add new route groups with app.include_router() below
  - Inject pre-built services (tests pass stubs) via create_app() arguments
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from config.settings import AppConfig
from situationroom import __version__
from situationroom.api.routes import router
from situationroom.service import EventService, FeedService

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    event_service: Optional[EventService] = None,
    feed_service: Optional[FeedService] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Application configuration (defaults to environment-backed AppConfig).
        event_service: Pre-built EventService; one is created from ``config`` otherwise.
        feed_service: Pre-built FeedService; otherwise built lazily on first request,
            because a missing NEWSAPI_KEY must not stop the events endpoint.
    """
    config = config or AppConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting SituationRoom API (provider: %s)", config.gdelt_base_url)
        yield
        logger.info("Shutting down SituationRoom API")
        app.state.event_service.close()
        if app.state.feed_service is not None:
            app.state.feed_service.close()

    app = FastAPI(
        title="SituationRoom API",
        description="Live world-event tallies and article drilldowns from GDELT.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.event_service = event_service or EventService(config)
    app.state.feed_service = feed_service

    app.include_router(router)
    return app
