"""Dependency injection for API endpoints."""

import logging
from collections.abc import AsyncGenerator
from typing import cast

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from artcache.application.services.images import ArtGatherer, ArtService
from artcache.config import Settings
from artcache.domain.ports import IMediaCatalog
from artcache.infrastructure.art_sources import build_default_sources
from artcache.infrastructure.persistence import Database, ImageRepository
from artcache.infrastructure.plugins import MetadataPluginRegistry

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    """Settings the app was created with (see create_app)."""
    return cast(Settings, request.app.state.settings)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state.

    Uses session_scope() so the request commits on success and rolls back on error.
    """
    db: Database = request.app.state.db
    async with db.session_scope() as session:
        yield session


def get_image_repository(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ImageRepository:
    return ImageRepository(session, owner_tables=settings.art.gc_owner_tables)


# Hey future me, ArtService is built PER REQUEST because the repository is bound to the
# request's session. Everything long-lived (http clients, meta cache, art toggle) comes
# from app.state, so two requests still share one cache. Without a media catalog there is
# nothing to search with, so the gatherer is skipped and misses simply stay misses.
def get_art_service(
    request: Request,
    repository: ImageRepository = Depends(get_image_repository),
    settings: Settings = Depends(get_settings),
) -> ArtService:
    """Get ArtService wired to the request's session."""
    state = request.app.state
    catalog: IMediaCatalog | None = state.catalog
    plugins: MetadataPluginRegistry = state.plugins

    gatherer = None
    if catalog is not None:
        sources = build_default_sources(
            settings,
            catalog,
            repository,
            state.http_fetcher,
            musicbrainz_client=state.musicbrainz_client,
            lastfm_client=state.lastfm_client,
        )
        gatherer = ArtGatherer(catalog, settings.art, sources=sources, plugins=plugins)

    return ArtService(
        repository,
        settings.art,
        gatherer=gatherer,
        fetcher=state.http_fetcher,
        meta_cache=state.meta_cache,
        toggle=state.art_toggle,
    )
