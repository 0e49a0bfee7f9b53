"""MusicBrainz HTTP client implementation with rate limiting."""

import asyncio
import logging
from typing import Any, cast

import httpx

from artcache.config.settings import MusicBrainzSettings

logger = logging.getLogger(__name__)


class MusicBrainzClient:
    """HTTP client for MusicBrainz release lookups with rate limiting."""

    API_BASE_URL = "https://musicbrainz.org/ws/2"
    RATE_LIMIT_DELAY = 1.0  # 1 request per second as per MusicBrainz guidelines

    # Hey future me, MusicBrainz is STRICT about 1 req/sec. A library-wide art
    # rescan hits this for every album, so the lock + delay stays even though a
    # single resolution only ever does one lookup.
    def __init__(self, settings: MusicBrainzSettings, timeout: float = 10.0) -> None:
        """
        Initialize MusicBrainz client.

        Args:
            settings: MusicBrainz configuration settings
            timeout: Per-request timeout in seconds
        """
        self.settings = settings
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self._last_request_time: float = 0.0
        self._rate_limit_lock = asyncio.Lock()

    @property
    def user_agent(self) -> str:
        # Format matters: "AppName/Version ( contact )"
        return (
            f"{self.settings.app_name}/{self.settings.app_version} "
            f"( {self.settings.contact} )"
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.API_BASE_URL,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _rate_limited_request(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """
        Make a rate-limited request to MusicBrainz API.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional request parameters

        Returns:
            HTTP response

        Raises:
            httpx.HTTPError: If the request fails
        """
        async with self._rate_limit_lock:
            loop = asyncio.get_running_loop()
            time_since_last = loop.time() - self._last_request_time
            if time_since_last < self.RATE_LIMIT_DELAY:
                await asyncio.sleep(self.RATE_LIMIT_DELAY - time_since_last)

            client = await self._get_client()
            response = await client.request(method, url, **kwargs)

            # Stamp AFTER the request so slow responses don't shorten the gap
            self._last_request_time = loop.time()
            return response

    async def lookup_release(
        self, release_id: str, inc: str = "url-rels"
    ) -> dict[str, Any] | None:
        """
        Lookup a release (album) by MusicBrainz ID.

        Args:
            release_id: MusicBrainz release ID
            inc: Sub-queries to include; url-rels carries the cover-art links

        Returns:
            Release information or None if not found

        Raises:
            httpx.HTTPError: If the request fails
        """
        try:
            response = await self._rate_limited_request(
                "GET",
                f"/release/{release_id}",
                params={"fmt": "json", "inc": inc},
            )
            response.raise_for_status()
            return cast(dict[str, Any], response.json())
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.debug("MusicBrainz release %s not found", release_id)
                return None
            raise

    async def __aenter__(self) -> "MusicBrainzClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
