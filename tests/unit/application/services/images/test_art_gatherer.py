"""Unit tests for ArtGatherer and default search options."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from artcache.application.services.images import ArtGatherer, build_default_options
from artcache.config import ArtSettings
from artcache.domain.entities import Candidate
from artcache.domain.exceptions import ArtSourceError
from artcache.domain.ports import GatherOptions, IArtSource, IMetadataPlugin
from artcache.domain.value_objects import ArtKey
from artcache.infrastructure.plugins import MetadataPluginRegistry

KEY = ArtKey.create("album", 5)


class FakeSource(IArtSource):
    """Art source returning fixed candidates and recording calls."""

    def __init__(self, name: str, candidates: list[Candidate] | None = None, error: Exception | None = None):
        self._name = name
        self.candidates = candidates or []
        self.error = error
        self.calls: list[tuple[ArtKey, int | None, GatherOptions]] = []

    @property
    def name(self) -> str:
        return self._name

    async def gather(self, key: ArtKey, limit: int | None, options: GatherOptions) -> list[Candidate]:
        self.calls.append((key, limit, options))
        if self.error:
            raise self.error
        return list(self.candidates)


class FakePlugin(IMetadataPlugin):
    def __init__(self, name: str, meta: dict[str, Any]):
        self._name = name
        self.meta = meta

    @property
    def name(self) -> str:
        return self._name

    async def get_metadata(self, categories: list[str], media_info: dict[str, Any]) -> dict[str, Any]:
        return self.meta


@pytest.fixture
def catalog() -> MagicMock:
    mock = MagicMock()
    mock.get_search_info = AsyncMock(return_value={"artist": "Boards of Canada", "album": "Geogaddi"})
    mock.get_file_paths = AsyncMock(return_value=[])
    mock.get_external_id = AsyncMock(return_value="mbid-123")
    return mock


def _gatherer(catalog: MagicMock, order: list[str], *sources: IArtSource, **kwargs: Any) -> ArtGatherer:
    return ArtGatherer(catalog, ArtSettings(art_order=order), sources=sources, **kwargs)


class TestArtGathererOrder:
    """Tests for priority order and merging."""

    async def test_later_provider_batches_come_first(self, catalog: MagicMock) -> None:
        folder = FakeSource("folder", [Candidate(file="/a/cover.jpg")])
        tags = FakeSource("tags", [Candidate(data=b"embedded-1"), Candidate(data=b"embedded-2")])
        gatherer = _gatherer(catalog, ["folder", "tags"], folder, tags)

        results = await gatherer.gather(KEY)

        assert [c.provider for c in results] == ["tags", "tags", "folder"]
        assert results[0].data == b"embedded-1"
        assert results[2].file == "/a/cover.jpg"

    async def test_empty_order_returns_nothing(self, catalog: MagicMock) -> None:
        source = FakeSource("folder", [Candidate(file="/a/cover.jpg")])
        gatherer = _gatherer(catalog, [], source)

        assert await gatherer.gather(KEY) == []
        assert source.calls == []
        catalog.get_search_info.assert_not_called()

    async def test_failing_source_is_contained(self, catalog: MagicMock) -> None:
        broken = FakeSource("musicbrainz", error=TimeoutError("timed out"))
        folder = FakeSource("folder", [Candidate(file="/a/cover.jpg")])
        gatherer = _gatherer(catalog, ["musicbrainz", "folder"], broken, folder)

        results = await gatherer.gather(KEY)

        assert [c.provider for c in results] == ["folder"]
        assert len(broken.calls) == 1

    async def test_source_error_is_contained(self, catalog: MagicMock) -> None:
        broken = FakeSource("google", error=ArtSourceError("google", "HTTP 503"))
        tags = FakeSource("tags", [Candidate(data=b"embedded")])
        gatherer = _gatherer(catalog, ["tags", "google"], tags, broken)

        results = await gatherer.gather(KEY)

        assert [c.provider for c in results] == ["tags"]

    async def test_unknown_source_is_skipped(self, catalog: MagicMock) -> None:
        folder = FakeSource("folder", [Candidate(file="/a/cover.jpg")])
        gatherer = _gatherer(catalog, ["nope", "folder"], folder)

        assert len(await gatherer.gather(KEY)) == 1

    async def test_limit_stops_early(self, catalog: MagicMock) -> None:
        first = FakeSource("tags", [Candidate(data=b"1"), Candidate(data=b"2"), Candidate(data=b"3")])
        second = FakeSource("folder", [Candidate(file="/a/cover.jpg")])
        gatherer = _gatherer(catalog, ["tags", "folder"], first, second)

        results = await gatherer.gather(KEY, limit=2)

        assert len(results) == 2
        assert second.calls == []
        assert first.calls[0][1] == 2


class TestArtGathererOptions:
    """Tests for option building."""

    async def test_default_options_from_catalog(self, catalog: MagicMock) -> None:
        source = FakeSource("folder")
        gatherer = _gatherer(catalog, ["folder"], source)

        await gatherer.gather(KEY)

        options = source.calls[0][2]
        assert options["keyword"] == "Boards of Canada Geogaddi"
        assert options["mbid"] == "mbid-123"

    async def test_caller_options_are_used_as_is(self, catalog: MagicMock) -> None:
        source = FakeSource("folder")
        gatherer = _gatherer(catalog, ["folder"], source)

        await gatherer.gather(KEY, options={"keyword": "custom"})

        assert source.calls[0][2] == {"keyword": "custom"}
        catalog.get_search_info.assert_not_called()

    async def test_kind_is_passed_to_sources(self, catalog: MagicMock) -> None:
        catalog.get_search_info.return_value = {"title": "Alien"}
        source = FakeSource("folder")
        gatherer = _gatherer(catalog, ["folder"], source)

        await gatherer.gather(ArtKey.create("movie", 3), kind="movie")

        assert source.calls[0][2] == {"keyword": "Alien", "object_kind": "movie"}

    @pytest.mark.parametrize(
        "kind,info,expected",
        [
            ("album", {"artist": "A", "album": "B"}, {"artist": "A", "album": "B", "keyword": "A B"}),
            ("artist", {"artist": "A"}, {"artist": "A", "keyword": "A"}),
            ("tvshow", {"tvshow": "T"}, {"tvshow": "T", "keyword": "T"}),
            (
                "tvshow_season",
                {"tvshow": "T", "tvshow_season": 2},
                {"tvshow": "T", "tvshow_season": 2, "keyword": "T"},
            ),
            ("clip", {"title": "C"}, {"keyword": "C"}),
            ("user", {"name": "x"}, {}),
        ],
    )
    def test_build_default_options(self, kind: str, info: dict, expected: dict) -> None:
        assert build_default_options(kind, info) == expected

    def test_episode_keyword(self) -> None:
        options = build_default_options(
            "tvshow_episode",
            {"tvshow": "Show", "tvshow_season": 1, "tvshow_episode": 4, "title": "Pilot"},
        )
        assert options["keyword"] == "Show Pilot"
        assert options["tvshow_episode"] == 4


class TestArtGathererPlugins:
    """Tests for plugin resolution."""

    async def test_plugin_wins_over_builtin_with_same_name(self, catalog: MagicMock) -> None:
        builtin = FakeSource("tmdb", [Candidate(url="http://builtin/a.jpg")])
        plugins = MetadataPluginRegistry()
        plugins.register(FakePlugin("tmdb", {"art": "http://plugin/poster.png"}))
        gatherer = _gatherer(catalog, ["tmdb"], builtin, plugins=plugins)

        results = await gatherer.gather(KEY, options={"keyword": "Alien"})

        assert [c.url for c in results] == ["http://plugin/poster.png"]
        assert results[0].provider == "tmdb"
        assert builtin.calls == []

    def test_available_sources(self, catalog: MagicMock) -> None:
        plugins = MetadataPluginRegistry()
        plugins.register(FakePlugin("tmdb", {}))
        gatherer = _gatherer(catalog, [], FakeSource("db"), FakeSource("folder"), plugins=plugins)

        assert gatherer.available_sources() == ["db", "folder", "tmdb"]

    def test_register_and_unregister(self, catalog: MagicMock) -> None:
        gatherer = _gatherer(catalog, [])
        gatherer.register(FakeSource("folder"))

        assert len(gatherer) == 1
        assert gatherer.unregister("folder")
        assert not gatherer.unregister("folder")
