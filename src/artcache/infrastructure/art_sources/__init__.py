"""Built-in art sources and the helper that wires them from settings."""

from __future__ import annotations

from artcache.config import Settings
from artcache.domain.ports import IArtSource, IHttpFetcher, IImageStore, IMediaCatalog
from artcache.infrastructure.art_sources.folder import FolderArtSource
from artcache.infrastructure.art_sources.lastfm import LastfmArtSource
from artcache.infrastructure.art_sources.musicbrainz import MusicBrainzArtSource
from artcache.infrastructure.art_sources.plugin import PluginArtSource
from artcache.infrastructure.art_sources.store import StoreArtSource
from artcache.infrastructure.art_sources.tags import TagArtSource
from artcache.infrastructure.art_sources.web_search import WebSearchArtSource
from artcache.infrastructure.integrations.lastfm_client import LastfmClient
from artcache.infrastructure.integrations.musicbrainz_client import MusicBrainzClient


def build_default_sources(
    settings: Settings,
    catalog: IMediaCatalog,
    store: IImageStore,
    fetcher: IHttpFetcher,
    musicbrainz_client: MusicBrainzClient | None = None,
    lastfm_client: LastfmClient | None = None,
) -> list[IArtSource]:
    """Every built-in source, configured from settings.

    Which of them actually run (and in which order) is settings.art.art_order.
    """
    musicbrainz_client = musicbrainz_client or MusicBrainzClient(
        settings.musicbrainz, timeout=settings.http.timeout
    )
    lastfm_client = lastfm_client or LastfmClient(settings.lastfm, timeout=settings.http.timeout)
    return [
        StoreArtSource(store),
        TagArtSource(catalog),
        FolderArtSource(catalog, preferred_filename=settings.art.preferred_filename),
        MusicBrainzArtSource(musicbrainz_client, fetcher),
        LastfmArtSource(lastfm_client),
        WebSearchArtSource(fetcher, settings.art.google_search_url),
    ]


__all__ = [
    "FolderArtSource",
    "LastfmArtSource",
    "MusicBrainzArtSource",
    "PluginArtSource",
    "StoreArtSource",
    "TagArtSource",
    "WebSearchArtSource",
    "build_default_sources",
]
