"""In-process cache of stored-art metadata (mime per key and size)."""

import asyncio
from dataclasses import dataclass
from typing import NamedTuple

from artcache.domain.entities import ImageMeta
from artcache.domain.value_objects import ArtKey, ObjectType


class MetaCacheKey(NamedTuple):
    """Structured composite key: (object_type, object_id, size)."""

    object_type: ObjectType
    object_id: int
    size: str

    @classmethod
    def for_art(cls, key: ArtKey, size: str) -> "MetaCacheKey":
        return cls(key.object_type, key.object_id, size)


@dataclass(frozen=True)
class CacheEntry:
    """Cached metadata for one stored image."""

    mime: str
    size: str


class ArtMetaCache:
    """Mime/size cache used for URL building and existence checks.

    Hey future me - no TTL and no eviction: entries only go away
    through invalidate() (insert, reset, thumbnail write) or clear(). In a
    long-running process with a huge library this grows with every key
    url() touches. Known limitation, fine for one library.

    Keys are tuples, never concatenated strings ("album42275x275" is ambiguous).
    """

    def __init__(self) -> None:
        self._entries: dict[MetaCacheKey, CacheEntry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: ArtKey, size: str) -> CacheEntry | None:
        async with self._lock:
            return self._entries.get(MetaCacheKey.for_art(key, size))

    async def set(self, key: ArtKey, size: str, mime: str) -> None:
        async with self._lock:
            self._entries[MetaCacheKey.for_art(key, size)] = CacheEntry(mime=mime, size=size)

    async def add_many(self, metas: list[ImageMeta]) -> int:
        """Bulk insert (pre-warming). Returns number of entries written."""
        async with self._lock:
            for meta in metas:
                self._entries[MetaCacheKey.for_art(meta.key, meta.size)] = CacheEntry(
                    mime=meta.mime, size=meta.size
                )
        return len(metas)

    async def invalidate(self, key: ArtKey) -> int:
        """Drop every size cached for an art key. Returns entries removed."""
        async with self._lock:
            stale = [
                k
                for k in self._entries
                if k.object_type is key.object_type and k.object_id == key.object_id
            ]
            for k in stale:
                del self._entries[k]
            return len(stale)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
