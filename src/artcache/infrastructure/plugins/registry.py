"""
Registry for externally loaded metadata plugins.

Hey future me – das ist NUR die Ablage für schon geladene Plugins! Laden,
Aktivieren und Konfigurieren macht die Host-Anwendung. Die Art-Pipeline fragt
hier nur: "gibt es ein Plugin mit diesem Namen?" – wenn ja, gewinnt es gegen
eine gleichnamige eingebaute Quelle.

Verwendung:
    registry = MetadataPluginRegistry()
    registry.register(TmdbPlugin(api_key))

    plugin = registry.get("tmdb")
"""

import logging
from collections.abc import Iterator

from artcache.domain.ports import IMetadataPlugin

logger = logging.getLogger(__name__)


class MetadataPluginRegistry:
    """Name → metadata plugin lookup. One plugin per name."""

    def __init__(self) -> None:
        self._plugins: dict[str, IMetadataPlugin] = {}

    def register(self, plugin: IMetadataPlugin) -> None:
        """
        Register a plugin under its name.

        Überschreibt ein existierendes Plugin mit gleichem Namen.

        Args:
            plugin: Loaded plugin instance
        """
        if plugin.name in self._plugins:
            logger.info("Replacing metadata plugin '%s'", plugin.name)
        self._plugins[plugin.name] = plugin

    def unregister(self, name: str) -> None:
        self._plugins.pop(name, None)

    def get(self, name: str) -> IMetadataPlugin | None:
        return self._plugins.get(name)

    def names(self) -> list[str]:
        return list(self._plugins)

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def __iter__(self) -> Iterator[IMetadataPlugin]:
        return iter(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)
