"""Art source "google": scrape an image-search result page.

Low-confidence by nature: every <img src="http..."> on the result page
becomes a candidate, logos and all. Keep it late in art_order (or out of it).
"""

from __future__ import annotations

import logging
import re

from artcache.domain.entities import Candidate
from artcache.domain.exceptions import ArtSourceError
from artcache.domain.ports import GatherOptions, IArtSource, IHttpFetcher
from artcache.domain.value_objects import ArtKey

logger = logging.getLogger(__name__)

IMG_SRC_RE = re.compile(r'\ssrc="(http.+?)"')

# Fixed query shape the result page markup was scraped against
SEARCH_PARAMS: dict[str, str] = {
    "source": "hp",
    "oq": "",
    "um": "1",
    "ie": "UTF-8",
    "sa": "N",
    "tab": "wi",
    "start": "0",
    "tbo": "1",
    "imgsz": "m",  # medium
}


class WebSearchArtSource(IArtSource):
    """Image URLs scraped from a web image search for the keyword."""

    def __init__(self, fetcher: IHttpFetcher, search_url: str) -> None:
        self.fetcher = fetcher
        self.search_url = search_url

    @property
    def name(self) -> str:
        return "google"

    async def gather(
        self, key: ArtKey, limit: int | None, options: GatherOptions
    ) -> list[Candidate]:
        keyword = options.get("keyword")
        if not keyword:
            return []

        params = {"q": str(keyword), **SEARCH_PARAMS}
        response = await self.fetcher.fetch(self.search_url, params=params)
        if not response.ok:
            raise ArtSourceError(self.name, f"image search answered HTTP {response.status_code}")

        return [
            Candidate(url=match, mime="image/jpeg")
            for match in IMG_SRC_RE.findall(response.text)
        ]
