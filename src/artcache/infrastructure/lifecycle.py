"""Application lifecycle management for startup and shutdown tasks."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from artcache.application.cache import ArtMetaCache, ArtToggle
from artcache.config import Settings
from artcache.infrastructure.integrations import (
    HttpClientPool,
    HttpFetcher,
    LastfmClient,
    MusicBrainzClient,
)
from artcache.infrastructure.observability import configure_logging
from artcache.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Hey future me, everything before `yield` runs at STARTUP, everything after at SHUTDOWN.
# Settings, catalog and plugins are put on app.state by create_app() BEFORE this runs,
# the rest (db, clients, meta cache, art toggle) is created here and lives as long as
# the app. Per-request objects (session, repository, ArtService) come from api/dependencies.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
        app_name=settings.app_name,
    )
    logger.info("Starting %s (%s)", settings.app_name, settings.app_env)

    db = Database(settings)
    # Dev convenience: production databases are migrated with alembic
    if settings.app_env != "production":
        await db.create_tables()
    app.state.db = db

    app.state.meta_cache = ArtMetaCache()
    app.state.art_toggle = ArtToggle(settings.art.enabled)
    app.state.http_fetcher = HttpFetcher(settings.http)
    app.state.musicbrainz_client = MusicBrainzClient(
        settings.musicbrainz, timeout=settings.http.timeout
    )
    app.state.lastfm_client = LastfmClient(settings.lastfm, timeout=settings.http.timeout)

    try:
        yield
    finally:
        logger.info("Shutting down %s", settings.app_name)
        await app.state.musicbrainz_client.close()
        await app.state.lastfm_client.close()
        await HttpClientPool.close()
        await db.close()
