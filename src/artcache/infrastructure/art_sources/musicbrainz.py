"""Art source "musicbrainz": Amazon ASIN mirrors and cover-art URL relations.

Hey future me - MusicBrainz itself has no images here! We look up the release
with inc=url-rels and turn what it links to into image URLs:

1. release has an ASIN → probe the Amazon image mirrors, keep the ones that
   answer 200
2. every URL relation whose domain is in COVERART_SITES and whose URL matches
   the site's regex → rewrite into a direct image URL via str.format on the
   regex groups ({1}, {2}, ... = group 1, group 2, ...)

All of these are plain jpegs. A failed lookup = no candidates, never an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from artcache.domain.entities import Candidate
from artcache.domain.ports import GatherOptions, IArtSource, IHttpFetcher
from artcache.domain.value_objects import ArtKey, ObjectType
from artcache.infrastructure.integrations.musicbrainz_client import MusicBrainzClient

logger = logging.getLogger(__name__)

# Mirror number → host. URL: http://<host>/images/P/<ASIN>.<nn>.LZZZZZZZ.jpg
AMAZON_MIRRORS: dict[str, str] = {
    "01": "ec1.images-amazon.com",
    "02": "ec1.images-amazon.com",
    "03": "ec2.images-amazon.com",
    "08": "ec1.images-amazon.com",
    "09": "ec1.images-amazon.com",
}
AMAZON_IMAGE_URL = "http://{host}/images/P/{asin}.{mirror}.LZZZZZZZ.jpg"


@dataclass(frozen=True)
class CoverArtSite:
    """One known cover-art host: which relations to accept and how to rewrite them."""

    name: str
    domain: str
    pattern: re.Pattern[str]
    image_url: str  # str.format template, {1} = first regex group

    def image_url_for(self, url: str) -> str | None:
        if self.domain not in url:
            return None
        match = self.pattern.search(url)
        if match is None:
            return None
        groups = (match.group(0), *match.groups())
        return self.image_url.format(*groups)


COVERART_SITES: tuple[CoverArtSite, ...] = (
    CoverArtSite(
        "CD Baby",
        "cdbaby.com",
        re.compile(r"http://cdbaby\.com/cd/(\w)(\w)(\w*)"),
        "http://cdbaby.name/{1}/{2}/{1}{2}{3}.jpg",
    ),
    CoverArtSite(
        "CD Baby",
        "cdbaby.name",
        re.compile(r"http://cdbaby\.name/([a-z0-9])/([a-z0-9])/([A-Za-z0-9]*)\.jpg"),
        "http://cdbaby.name/{1}/{2}/{3}.jpg",
    ),
    CoverArtSite(
        "archive.org",
        "archive.org",
        re.compile(r"^(.*\.(jpg|jpeg|png|gif))$"),
        "{1}",
    ),
    CoverArtSite(
        "Jamendo",
        "www.jamendo.com",
        re.compile(r"http://www\.jamendo\.com/(\w\w/)?album/(\d+)"),
        "http://img.jamendo.com/albums/{2}/covers/1.200.jpg",
    ),
    CoverArtSite(
        "8bitpeoples.com",
        "8bitpeoples.com",
        re.compile(r"^(.*)$"),
        "{1}",
    ),
    CoverArtSite(
        "Encyclopédisque",
        "encyclopedisque.fr",
        re.compile(r"http://www\.encyclopedisque\.fr/images/imgdb/(thumb250|main)/(\d+)\.jpg"),
        "http://www.encyclopedisque.fr/images/imgdb/thumb250/{2}.jpg",
    ),
    CoverArtSite(
        "Thastrom",
        "www.thastrom.se",
        re.compile(r"^(.*)$"),
        "{1}",
    ),
    CoverArtSite(
        "Universal Poplab",
        "www.universalpoplab.com",
        re.compile(r"^(.*)$"),
        "{1}",
    ),
)


def relation_urls(release: dict[str, Any]) -> list[str]:
    """URL targets of a release's url relations (ws/2 JSON shape)."""
    urls = []
    for relation in release.get("relations") or []:
        target = relation.get("url") or {}
        resource = target.get("resource") if isinstance(target, dict) else None
        if resource:
            urls.append(resource)
    return urls


class MusicBrainzArtSource(IArtSource):
    """Album art via MusicBrainz release links."""

    def __init__(self, client: MusicBrainzClient, fetcher: IHttpFetcher) -> None:
        self.client = client
        self.fetcher = fetcher

    @property
    def name(self) -> str:
        return "musicbrainz"

    async def gather(
        self, key: ArtKey, limit: int | None, options: GatherOptions
    ) -> list[Candidate]:
        if key.object_type is not ObjectType.ALBUM:
            return []
        mbid = options.get("mbid")
        if not mbid:
            logger.debug("No MusicBrainz id for %s, skipping", key)
            return []

        try:
            release = await self.client.lookup_release(mbid, inc="url-rels")
        except Exception as e:
            logger.warning("MusicBrainz lookup failed for release %s: %s", mbid, e)
            return []
        if not release:
            return []

        results: list[Candidate] = []

        asin = release.get("asin")
        if asin:
            logger.debug("Found ASIN %s for release %s", asin, mbid)
            for mirror, host in AMAZON_MIRRORS.items():
                url = AMAZON_IMAGE_URL.format(host=host, asin=asin, mirror=mirror)
                try:
                    response = await self.fetcher.fetch(url)
                except Exception as e:
                    logger.debug("Amazon mirror %s failed: %s", host, e)
                    continue
                if response.status_code == 200:
                    results.append(Candidate(url=url, mime="image/jpeg"))
                    if limit and len(results) >= limit:
                        return results

        for url in relation_urls(release):
            for site in COVERART_SITES:
                image_url = site.image_url_for(url)
                if image_url is None:
                    continue
                logger.debug("Found cover art link on %s: %s", site.name, image_url)
                results.append(Candidate(url=image_url, mime="image/jpeg"))
                if limit and len(results) >= limit:
                    return results

        return results
