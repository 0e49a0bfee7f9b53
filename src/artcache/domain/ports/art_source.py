"""Art Source Interface - abstraction for one art-gathering strategy.

Hey future me - this is the PORT every provider implements!

FLOW:
    ArtGatherer.gather(key)
        │
        ├─► StoreArtSource.gather()        ("db")
        ├─► FolderArtSource.gather()       ("folder")
        ├─► TagArtSource.gather()          ("tags")
        ├─► MusicBrainzArtSource.gather()  ("musicbrainz")
        ├─► LastfmArtSource.gather()       ("lastfm")
        ├─► WebSearchArtSource.gather()    ("google")
        └─► PluginArtSource.gather()       (any registered metadata plugin)

The gatherer only knows this interface. Which sources exist is decided at
wiring time (see infrastructure/art_sources/__init__.py), the order in which
they run comes from settings.art.art_order.

CONTRACT:
- Missing option fields → return [] (never raise for "not enough info")
- Sources MAY raise on provider failure; the gatherer contains it
- Never write anything - candidates are transient
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from artcache.domain.entities import Candidate
from artcache.domain.value_objects import ArtKey

# Free-form search options: artist, album, keyword, mbid, tvshow, ...
GatherOptions = dict[str, Any]


class IArtSource(ABC):
    """Interface for art sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name as used in art_order (e.g. "folder")."""
        ...

    @abstractmethod
    async def gather(
        self,
        key: ArtKey,
        limit: int | None,
        options: GatherOptions,
    ) -> list[Candidate]:
        """Produce zero or more candidates for the key.

        Args:
            key: Object the art is for
            limit: Stop after this many candidates (None = no limit)
            options: Search options built by the gatherer

        Returns:
            Candidates in the provider's own preference order
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
