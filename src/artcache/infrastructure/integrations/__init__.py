"""External service integrations."""

from artcache.infrastructure.integrations.http_pool import HttpClientPool, HttpFetcher
from artcache.infrastructure.integrations.lastfm_client import LastfmClient
from artcache.infrastructure.integrations.musicbrainz_client import MusicBrainzClient

__all__ = ["HttpClientPool", "HttpFetcher", "LastfmClient", "MusicBrainzClient"]
