"""Unit tests for the MusicBrainz art source."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from artcache.domain.ports import HttpResponse
from artcache.domain.value_objects import ArtKey
from artcache.infrastructure.art_sources import MusicBrainzArtSource
from artcache.infrastructure.art_sources.musicbrainz import COVERART_SITES, relation_urls

ALBUM = ArtKey.create("album", 9)


def _site(name: str, domain: str):
    return next(s for s in COVERART_SITES if s.name == name and s.domain == domain)


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock()
    mock.lookup_release = AsyncMock()
    return mock


@pytest.fixture
def fetcher() -> AsyncMock:
    return AsyncMock()


class TestCoverArtSites:
    """Tests for relation URL rewriting."""

    def test_cdbaby_rewrite(self) -> None:
        site = _site("CD Baby", "cdbaby.com")
        assert site.image_url_for("http://cdbaby.com/cd/abc123") == "http://cdbaby.name/a/b/abc123.jpg"

    def test_jamendo_rewrite(self) -> None:
        site = _site("Jamendo", "www.jamendo.com")
        assert (
            site.image_url_for("http://www.jamendo.com/en/album/1234")
            == "http://img.jamendo.com/albums/1234/covers/1.200.jpg"
        )

    def test_archive_needs_image_extension(self) -> None:
        site = _site("archive.org", "archive.org")
        assert site.image_url_for("https://archive.org/download/x/front.jpg") == (
            "https://archive.org/download/x/front.jpg"
        )
        assert site.image_url_for("https://archive.org/details/x") is None

    def test_domain_must_match(self) -> None:
        assert _site("CD Baby", "cdbaby.com").image_url_for("http://example.com/cd/abc") is None

    def test_relation_urls(self) -> None:
        release = {
            "relations": [
                {"type": "amazon asin", "url": {"resource": "http://amazon.example/x"}},
                {"type": "discogs", "url": {}},
                {"type": "other"},
            ]
        }
        assert relation_urls(release) == ["http://amazon.example/x"]


class TestMusicBrainzArtSource:
    """Tests for MusicBrainzArtSource.gather."""

    async def test_requires_album_and_mbid(self, client: MagicMock, fetcher: AsyncMock) -> None:
        source = MusicBrainzArtSource(client, fetcher)

        assert await source.gather(ArtKey.create("artist", 1), None, {"mbid": "x"}) == []
        assert await source.gather(ALBUM, None, {}) == []
        client.lookup_release.assert_not_called()

    async def test_lookup_failure_gives_no_candidates(
        self, client: MagicMock, fetcher: AsyncMock
    ) -> None:
        client.lookup_release.side_effect = TimeoutError("slow")
        assert await MusicBrainzArtSource(client, fetcher).gather(ALBUM, None, {"mbid": "m"}) == []

    async def test_asin_mirrors_answering_200(self, client: MagicMock, fetcher: AsyncMock) -> None:
        client.lookup_release.return_value = {"asin": "B000TEST", "relations": []}
        responses = iter([200, 404, 200, 500, 200])
        fetcher.fetch.side_effect = lambda url: HttpResponse(status_code=next(responses), body=b"")

        results = await MusicBrainzArtSource(client, fetcher).gather(ALBUM, None, {"mbid": "m"})

        assert len(results) == 3
        assert all("B000TEST" in c.url for c in results)
        assert results[0].url == "http://ec1.images-amazon.com/images/P/B000TEST.01.LZZZZZZZ.jpg"
        client.lookup_release.assert_awaited_once_with("m", inc="url-rels")

    async def test_relations_become_candidates(self, client: MagicMock, fetcher: AsyncMock) -> None:
        client.lookup_release.return_value = {
            "relations": [
                {"url": {"resource": "http://cdbaby.com/cd/xyz"}},
                {"url": {"resource": "http://www.discogs.com/release/1"}},
                {"url": {"resource": "http://www.jamendo.com/album/77"}},
            ]
        }

        results = await MusicBrainzArtSource(client, fetcher).gather(ALBUM, None, {"mbid": "m"})

        assert [c.url for c in results] == [
            "http://cdbaby.name/x/y/xyz.jpg",
            "http://img.jamendo.com/albums/77/covers/1.200.jpg",
        ]
        assert all(c.mime == "image/jpeg" for c in results)
        fetcher.fetch.assert_not_called()

    async def test_limit(self, client: MagicMock, fetcher: AsyncMock) -> None:
        client.lookup_release.return_value = {"asin": "B0", "relations": [
            {"url": {"resource": "http://cdbaby.com/cd/xyz"}},
        ]}
        fetcher.fetch.return_value = HttpResponse(status_code=200, body=b"")

        results = await MusicBrainzArtSource(client, fetcher).gather(ALBUM, 1, {"mbid": "m"})

        assert len(results) == 1
        assert fetcher.fetch.await_count == 1
