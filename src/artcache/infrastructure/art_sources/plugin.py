"""Art source adapter for registered metadata plugins."""

from __future__ import annotations

import logging

from artcache.domain.entities import Candidate
from artcache.domain.ports import GatherOptions, IArtSource, IMetadataPlugin
from artcache.domain.value_objects import ArtKey, mime_from_url

logger = logging.getLogger(__name__)

TVSHOW_KINDS = frozenset({"tvshow", "tvshow_season", "tvshow_episode"})

# kind -> metadata field that carries the art URL
ART_FIELDS: dict[str, str] = {
    "tvshow": "tvshow_art",
    "tvshow_season": "tvshow_season_art",
}


class PluginArtSource(IArtSource):
    """Asks a metadata plugin for tvshow or movie metadata and takes its art URL."""

    def __init__(self, plugin: IMetadataPlugin) -> None:
        self.plugin = plugin

    @property
    def name(self) -> str:
        return self.plugin.name

    async def gather(
        self, key: ArtKey, limit: int | None, options: GatherOptions
    ) -> list[Candidate]:
        kind = options.get("object_kind") or key.object_type.value

        if kind in TVSHOW_KINDS:
            categories = ["tvshow"]
            media_info = {
                "tvshow": options.get("tvshow"),
                "tvshow_season": options.get("tvshow_season"),
                "tvshow_episode": options.get("tvshow_episode"),
            }
        else:
            categories = ["movie"]
            media_info = {"title": options.get("keyword")}

        meta = await self.plugin.get_metadata(categories, media_info) or {}
        url = meta.get(ART_FIELDS.get(kind, "art"))
        if not url:
            logger.debug("Plugin %s has no art for %s", self.name, key)
            return []
        return [Candidate(url=url, mime=mime_from_url(url))]
