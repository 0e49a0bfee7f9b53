"""Art source "lastfm": album.getInfo image URLs."""

from __future__ import annotations

import logging

from artcache.domain.entities import Candidate
from artcache.domain.ports import GatherOptions, IArtSource
from artcache.domain.value_objects import ArtKey, ObjectType, mime_from_url
from artcache.infrastructure.integrations.lastfm_client import LastfmClient

logger = logging.getLogger(__name__)


class LastfmArtSource(IArtSource):
    """Album covers listed by Last.fm."""

    def __init__(self, client: LastfmClient) -> None:
        self.client = client

    @property
    def name(self) -> str:
        return "lastfm"

    async def gather(
        self, key: ArtKey, limit: int | None, options: GatherOptions
    ) -> list[Candidate]:
        artist = options.get("artist")
        album = options.get("album")
        if key.object_type is not ObjectType.ALBUM or not artist or not album:
            return []
        if not self.client.is_configured:
            logger.debug("Last.fm API key not set, skipping")
            return []

        info = await self.client.get_album_info(artist, album, mbid=options.get("mbid"))
        if not info:
            return []

        # Sorted by size name, same order the XML API's coverart map had
        images = sorted(info.get("image") or [], key=lambda image: image.get("size", ""))

        results: list[Candidate] = []
        for image in images:
            url = image.get("#text")
            if not url:
                continue
            if "/noimage/" in url:
                logger.debug("Skipping Last.fm placeholder %s", url)
                continue
            results.append(Candidate(url=url, mime=mime_from_url(url)))
            if limit and len(results) >= limit:
                break
        return results
