"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from favicon_api.api.routers import favicon, health
from favicon_api.core.config import get_settings
from favicon_api.core.logging import setup_logging
from favicon_api.orchestration import FaviconService, create_service
from favicon_api.version import __version__


def create_app(service: FaviconService | None = None) -> FastAPI:
    """
    Build the application.

    Without an explicit service one is created at startup from settings,
    which fails the startup if the default icon is not configured.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan handler."""
        settings = service.settings if service else get_settings()
        setup_logging(settings)
        app.state.service = service or create_service(settings)
        yield

    application = FastAPI(
        title="Favicon API",
        description="Locate and cache website favicons",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.include_router(health.router, tags=["Health"])
    application.include_router(favicon.router, tags=["Favicon"])
    return application


app = create_app()
