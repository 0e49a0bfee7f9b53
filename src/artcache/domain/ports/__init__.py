"""Domain ports (interfaces) consumed by the art subsystem.

Clean Architecture: application services depend on these ABCs only. The
concrete adapters live in infrastructure/ (SQLAlchemy store, httpx fetcher,
mutagen/filesystem sources). The media catalog and metadata plugins are
provided by the embedding application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from artcache.domain.entities import ImageMeta, ImageRecord
from artcache.domain.ports.art_source import GatherOptions, IArtSource
from artcache.domain.value_objects import ArtKey, ObjectType


class IImageStore(ABC):
    """Keyed image persistence: (object_type, object_id, size) -> (bytes, mime)."""

    @abstractmethod
    async def get(self, key: ArtKey) -> list[ImageRecord]:
        """All stored sizes for a key."""
        ...

    @abstractmethod
    async def get_size(self, key: ArtKey, size: str) -> ImageRecord | None:
        """One size for a key, or None."""
        ...

    @abstractmethod
    async def put(self, key: ArtKey, size: str, data: bytes, mime: str) -> None:
        """Store a size, replacing any existing record (delete-then-insert)."""
        ...

    @abstractmethod
    async def delete_all(self, key: ArtKey) -> int:
        """Remove every size for a key. Returns rows removed."""
        ...

    @abstractmethod
    async def exists_any(self, key: ArtKey) -> bool:
        """Check for any record without loading blobs."""
        ...

    @abstractmethod
    async def count_orphans_and_delete(self, object_type: ObjectType) -> int:
        """Delete records whose owning object no longer exists. Returns count."""
        ...

    @abstractmethod
    async def list_meta(self, object_ids: Sequence[int]) -> list[ImageMeta]:
        """Blob-free metadata for many objects (cache pre-warming)."""
        ...


class IMediaCatalog(ABC):
    """Narrow view of the (external) album/artist/show data model."""

    @abstractmethod
    async def get_search_info(self, key: ArtKey) -> dict[str, Any]:
        """Descriptive fields used to build default search keywords.

        Expected keys depend on the type: album → artist, album;
        artist → artist; tvshow → tvshow; tvshow_season → tvshow,
        tvshow_season; video → title. Missing keys are fine.
        """
        ...

    @abstractmethod
    async def get_file_paths(self, key: ArtKey) -> list[str]:
        """Paths of the object's constituent media files (e.g. album tracks)."""
        ...

    @abstractmethod
    async def get_external_id(self, key: ArtKey) -> str | None:
        """Stable external identifier (MusicBrainz release id for albums)."""
        ...


@dataclass(frozen=True)
class HttpResponse:
    """Minimal HTTP response as seen by the art subsystem."""

    status_code: int
    body: bytes
    content_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class IHttpFetcher(ABC):
    """Best-effort HTTP GET with a bounded timeout.

    Implementations raise on transport errors (timeouts included); callers
    decide whether that is fatal.
    """

    @abstractmethod
    async def fetch(self, url: str, params: dict[str, Any] | None = None) -> HttpResponse:
        ...


class IMetadataPlugin(ABC):
    """Externally registered metadata provider that can point at artwork."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def get_metadata(
        self, categories: list[str], media_info: dict[str, Any]
    ) -> dict[str, Any]:
        """Return a field → value mapping (may include *_art URL fields)."""
        ...


__all__ = [
    "GatherOptions",
    "HttpResponse",
    "IArtSource",
    "IHttpFetcher",
    "IImageStore",
    "IMediaCatalog",
    "IMetadataPlugin",
]
