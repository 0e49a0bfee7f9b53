"""Last.fm HTTP client implementation."""

from typing import Any, cast

import httpx

from artcache.config.settings import LastfmSettings


class LastfmClient:
    """HTTP client for the Last.fm album.getInfo call used for cover art."""

    API_BASE_URL = "https://ws.audioscrobbler.com/2.0/"

    def __init__(self, settings: LastfmSettings, timeout: float = 10.0) -> None:
        """
        Initialize Last.fm client.

        Args:
            settings: Last.fm configuration settings
            timeout: Per-request timeout in seconds
        """
        self.settings = settings
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.API_BASE_URL, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _make_request(self, method: str, params: dict[str, Any]) -> dict[str, Any] | None:
        """
        Make a request to Last.fm API.

        Args:
            method: API method name
            params: Request parameters

        Returns:
            Response data or None if not found / API error

        Raises:
            httpx.HTTPError: If the request fails
        """
        client = await self._get_client()
        request_params = {
            "method": method,
            "api_key": self.settings.api_key,
            "format": "json",
            **params,
        }

        try:
            response = await client.get("", params=request_params)
            response.raise_for_status()
            data = response.json()
            # Last.fm answers 200 with {"error": 6, "message": "Album not found"}
            if "error" in data:
                return None
            return cast(dict[str, Any], data)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

    async def get_album_info(
        self, artist: str, album: str, mbid: str | None = None
    ) -> dict[str, Any] | None:
        """
        Get album information including image URLs.

        Args:
            artist: Artist name
            album: Album title
            mbid: Optional MusicBrainz release ID

        Returns:
            Album information or None if not found
        """
        params: dict[str, Any] = {"artist": artist, "album": album}
        if mbid:
            params["mbid"] = mbid

        response = await self._make_request("album.getInfo", params)
        if response:
            return cast(dict[str, Any] | None, response.get("album"))
        return None
