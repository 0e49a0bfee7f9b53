"""FastAPI application factory.

The host application owns the music library, so it hands in the media catalog
(and optionally metadata plugins). Without a catalog the app only serves and
resizes art that is already stored.

    uvicorn artcache.main:app
"""

import logging

from fastapi import FastAPI

from artcache import __version__
from artcache.api import api_router
from artcache.api.exception_handlers import register_exception_handlers
from artcache.config import Settings, get_settings
from artcache.domain.ports import IMediaCatalog
from artcache.infrastructure.lifecycle import lifespan
from artcache.infrastructure.observability.middleware import RequestLoggingMiddleware
from artcache.infrastructure.plugins import MetadataPluginRegistry

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    catalog: IMediaCatalog | None = None,
    plugins: MetadataPluginRegistry | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use (defaults to get_settings())
        catalog: Media catalog used to search for missing art
        plugins: Metadata plugins usable as art sources

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.plugins = plugins if plugins is not None else MetadataPluginRegistry()

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()
