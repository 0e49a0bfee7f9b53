"""Art Gatherer - runs the configured art sources in priority order.

Hey future me - das ist das HERZ der Art-Suche!

FLOW:
    ArtService.find_and_store(key)
        │
        └─► ArtGatherer.gather(key)
                │
                ├─► default options from IMediaCatalog (if caller gave none)
                ├─► art_order leer? → [] (keine Suche, kein Fehler)
                │
                └─► for name in art_order:
                        metadata plugin "name" registriert? → PluginArtSource
                        sonst eingebaute Quelle "name"?     → source.gather()
                        sonst                                → log "not defined"

MERGE ORDER:
    results = new_batch + results
The NEWEST batch goes in FRONT. With art_order [folder, tags] the tag
candidates come before the folder candidates, so callers that insert the
first valid candidate prefer later providers.

FAILURES:
    One provider blowing up (timeout, bad JSON, mutagen choking) = zero
    candidates from that provider + a warning. The next provider still runs.
    Providers run strictly one after another, never in parallel.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from artcache.config import ArtSettings
from artcache.domain.entities import Candidate
from artcache.domain.exceptions import ArtSourceError
from artcache.domain.ports import GatherOptions, IArtSource, IMediaCatalog
from artcache.domain.value_objects import ArtKey
from artcache.infrastructure.art_sources.plugin import PluginArtSource
from artcache.infrastructure.plugins.registry import MetadataPluginRegistry

logger = logging.getLogger(__name__)

VIDEO_KINDS = frozenset({"video", "clip", "movie", "personal_video"})


def build_default_options(kind: str, info: dict[str, Any]) -> GatherOptions:
    """Search options for an object kind from its descriptive fields.

    Accepts the video-like kinds (tvshow_episode, movie, clip,
    personal_video) too, even though art keys collapse those to album.

    Args:
        kind: Object kind, e.g. "album" or "tvshow_episode"
        info: Fields from IMediaCatalog.get_search_info

    Returns:
        Options dict, possibly empty for unknown kinds
    """
    options: GatherOptions = {}
    match kind:
        case "album":
            options["artist"] = info.get("artist")
            options["album"] = info.get("album")
            options["keyword"] = _join(options["artist"], options["album"])
        case "artist":
            options["artist"] = info.get("artist")
            options["keyword"] = options["artist"]
        case "tvshow":
            options["tvshow"] = info.get("tvshow")
            options["keyword"] = options["tvshow"]
        case "tvshow_season":
            options["tvshow"] = info.get("tvshow")
            options["tvshow_season"] = info.get("tvshow_season")
            options["keyword"] = options["tvshow"]
        case "tvshow_episode":
            options["tvshow"] = info.get("tvshow")
            options["tvshow_season"] = info.get("tvshow_season")
            options["tvshow_episode"] = info.get("tvshow_episode")
            options["keyword"] = _join(options["tvshow"], info.get("title"))
        case _ if kind in VIDEO_KINDS:
            options["keyword"] = info.get("title")
    return options


def _join(*parts: Any) -> str:
    return " ".join(str(p) for p in parts if p)


class ArtGatherer:
    """Priority-ordered art source pipeline.

    Built-in sources are registered by name (see
    infrastructure/art_sources/build_default_sources). Metadata plugins from
    the MetadataPluginRegistry win over a built-in source with the same name.
    """

    def __init__(
        self,
        catalog: IMediaCatalog,
        settings: ArtSettings,
        sources: Iterable[IArtSource] = (),
        plugins: MetadataPluginRegistry | None = None,
    ) -> None:
        self.catalog = catalog
        self.settings = settings
        self.plugins = plugins if plugins is not None else MetadataPluginRegistry()
        self._sources: dict[str, IArtSource] = {}
        for source in sources:
            self.register(source)

    # === Registration ===

    def register(self, source: IArtSource) -> None:
        """Register a built-in source under its name (replaces same name)."""
        if source.name in self._sources:
            logger.warning("Art source %s already registered, replacing", source.name)
        self._sources[source.name] = source
        logger.debug("Registered art source: %s", source.name)

    def unregister(self, name: str) -> bool:
        return self._sources.pop(name, None) is not None

    def available_sources(self) -> list[str]:
        """Names usable in art_order: built-in sources plus plugins."""
        names = list(self._sources)
        names.extend(n for n in self.plugins.names() if n not in self._sources)
        return names

    def _resolve(self, name: str) -> IArtSource | None:
        plugin = self.plugins.get(name)
        if plugin is not None:
            return PluginArtSource(plugin)
        return self._sources.get(name)

    # === Gathering ===

    async def default_options(self, key: ArtKey, kind: str | None = None) -> GatherOptions:
        """Build search options for a key from the media catalog."""
        kind = kind or key.object_type.value
        info = await self.catalog.get_search_info(key)
        options = build_default_options(kind, info)
        if kind == "album":
            options["mbid"] = await self.catalog.get_external_id(key)
        return options

    async def gather(
        self,
        key: ArtKey,
        options: GatherOptions | None = None,
        limit: int | None = None,
        kind: str | None = None,
    ) -> list[Candidate]:
        """Collect candidates from every source named in art_order.

        Args:
            key: Object to find art for
            options: Search options; built from the catalog when empty
            limit: Stop once this many candidates are collected
            kind: Object kind for keyword building when it is finer than the
                key's type (e.g. "tvshow_episode", "movie")

        Returns:
            Candidates, newest provider batch first, at most limit long
        """
        art_order = list(self.settings.art_order or [])
        if not art_order:
            logger.info("art_order is empty, skipping art gathering for %s", key)
            return []

        if not options:
            options = await self.default_options(key, kind)
        if kind:
            options = {**options, "object_kind": kind}

        logger.debug("Searching art for %s using %s", key, art_order)

        results: list[Candidate] = []
        for name in art_order:
            source = self._resolve(name)
            if source is None:
                logger.warning("Art source %s not defined, skipping", name)
                continue

            try:
                batch = await source.gather(key, limit, options)
            except ArtSourceError as e:
                logger.warning("Art source failed for %s: %s", key, e.message)
                continue
            except Exception as e:
                logger.warning("Art source %s failed for %s: %s", name, key, e, exc_info=True)
                continue

            logger.debug("Art source %s returned %d candidate(s) for %s", name, len(batch), key)
            results = [c.with_provider(name) for c in batch] + results

            if limit and len(results) >= limit:
                return results[:limit]

        return results

    def __len__(self) -> int:
        return len(self._sources)

    def __repr__(self) -> str:
        return f"ArtGatherer(sources={list(self._sources)}, order={self.settings.art_order})"
