"""Art Service - central artwork operations.

Future me note:
This is THE place for artwork business logic. Routers, CLI jobs and the
host application only talk to ArtService.

What this service does:
1. get() / get_with_mime() - stored art, lazily creating the 275x275 thumb
2. insert() / insert_from_url() - validate + replace the original
3. get_sized() / get_thumb() - any thumbnail size, transcoded once, then cached
4. find_and_store() - run the gather pipeline and keep the first good image
5. url() - the image.php URL for templates/clients
6. gc() - drop art whose album/artist is gone

What this service does NOT do:
- ❌ Provider lookups → art sources (infrastructure/art_sources)
- ❌ Pixel work → image_processing (Pillow, in a worker thread)
- ❌ Commit → the caller's session_scope()

Concurrency:
Two requests for the same key can both miss and both transcode/insert; the
last writer wins and the store still holds one row per (key, size). Callers
that need single-writer semantics must hold their own lock per ArtKey.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import urlencode

from artcache.application.cache import ArtMetaCache, ArtToggle
from artcache.application.services.images.art_gatherer import ArtGatherer
from artcache.application.services.images.image_processing import (
    MIN_IMAGE_DIMENSION,
    is_valid_image,
    resize_image,
)
from artcache.config import ArtSettings
from artcache.domain.entities import ArtInsertResult, ArtInsertStatus, Candidate, ImageRecord
from artcache.domain.exceptions import ArtStoreError, TranscodeError, ValidationException
from artcache.domain.ports import GatherOptions, IHttpFetcher, IImageStore
from artcache.domain.value_objects import (
    DEFAULT_MIME,
    DEFAULT_THUMB,
    ORIGINAL,
    ArtKey,
    ObjectType,
    extension_for_mime,
    get_thumb_size,
    mime_from_url,
    size_tag,
)
from artcache.infrastructure.art_sources.tags import extract_pictures

logger = logging.getLogger(__name__)


class ArtService:
    """Artwork façade over store, gatherer, validator and transcoder."""

    def __init__(
        self,
        store: IImageStore,
        settings: ArtSettings,
        gatherer: ArtGatherer | None = None,
        fetcher: IHttpFetcher | None = None,
        meta_cache: ArtMetaCache | None = None,
        toggle: ArtToggle | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.gatherer = gatherer
        self.fetcher = fetcher
        self.meta_cache = meta_cache if meta_cache is not None else ArtMetaCache()
        self.toggle = toggle if toggle is not None else ArtToggle(settings.enabled)

    # === Enabled toggle ===

    def is_enabled(self) -> bool:
        return self.toggle.enabled

    def set_enabled(self, value: bool | None = None) -> bool:
        """Set art on/off; None flips the current state. Returns the new state."""
        enabled = self.toggle.set(value)
        logger.info("Art %s", "enabled" if enabled else "disabled")
        return enabled

    # === Reading ===

    async def get(self, key: ArtKey, raw: bool = False) -> bytes | None:
        """Stored art bytes: the default thumbnail, or the original when raw."""
        result = await self.get_with_mime(key, raw=raw)
        return result[0] if result else None

    async def get_with_mime(self, key: ArtKey, raw: bool = False) -> tuple[bytes, str] | None:
        """Like get(), plus the mime type of the returned bytes.

        Args:
            key: Art key
            raw: Return the original even if a thumbnail exists

        Returns:
            (bytes, mime) or None when there is no art

        Raises:
            ArtStoreError: Store read/write failed
        """
        original, thumb = await self._load_records(key)

        if original is None and self.settings.gather_on_miss and self.gatherer is not None:
            if await self.find_and_store(key):
                original, thumb = await self._load_records(key)

        if original is None:
            return None

        if thumb is None and self.settings.resize_images:
            resized = await self._transcode(original, DEFAULT_THUMB.width, DEFAULT_THUMB.height)
            if resized is not None:
                await self.save_thumb(key, resized[0], resized[1], DEFAULT_THUMB.tag)
                thumb = ImageRecord(key=key, size=DEFAULT_THUMB.tag, data=resized[0], mime=resized[1])
            else:
                logger.warning("Unable to retrieve or generate thumbnail for %s", key)

        if raw or thumb is None:
            return original.data, original.mime
        return thumb.data, thumb.mime

    async def _load_records(self, key: ArtKey) -> tuple[ImageRecord | None, ImageRecord | None]:
        original: ImageRecord | None = None
        thumb: ImageRecord | None = None
        for record in await self.store.get(key):
            if record.is_original:
                original = record
            elif record.size == DEFAULT_THUMB.tag and self.settings.resize_images:
                thumb = record
        return original, thumb

    async def has_art(self, key: ArtKey) -> bool:
        return await self.store.exists_any(key)

    # === Writing ===

    async def insert(
        self, key: ArtKey, data: bytes | None, mime: str | None = None
    ) -> ArtInsertResult:
        """Replace the original (and drop all thumbnails) with new image bytes.

        Returns:
            ArtInsertResult - DECLINED in demo mode, INVALID for bad bytes,
            STORED on success. Truthy only when stored.

        Raises:
            ArtStoreError: Store write failed
        """
        if self.settings.demo_mode:
            logger.info("Demo mode, not inserting art for %s", key)
            return ArtInsertResult.declined("demo mode")

        if not is_valid_image(data):
            logger.warning("Not inserting image for %s, invalid data passed", key)
            return ArtInsertResult.invalid("invalid image data")
        assert data is not None

        mime = mime or DEFAULT_MIME
        await self.reset(key)
        await self.store.put(key, ORIGINAL, data, mime)
        await self.meta_cache.set(key, ORIGINAL, mime)
        logger.info("Inserted art for %s (%d bytes, %s)", key, len(data), mime)
        return ArtInsertResult.stored(mime)

    async def insert_from_url(self, key: ArtKey, url: str) -> ArtInsertResult:
        """Download an image and insert it. A failed download writes nothing."""
        data = await self._fetch_url(url)
        if data is None:
            return ArtInsertResult.fetch_failed(f"could not download {url}")
        return await self.insert(key, data, mime_from_url(url))

    async def save_thumb(self, key: ArtKey, data: bytes, mime: str, size: str) -> bool:
        """Store a thumbnail for a size tag, replacing any existing one."""
        if not is_valid_image(data):
            logger.warning("Not saving %s thumbnail for %s, invalid data", size, key)
            return False
        await self.store.put(key, size, data, mime)
        await self.meta_cache.set(key, size, mime)
        return True

    async def reset(self, key: ArtKey) -> None:
        """Delete every stored size for the key."""
        removed = await self.store.delete_all(key)
        await self.meta_cache.invalidate(key)
        logger.debug("Reset art for %s (%d row(s))", key, removed)

    # === Thumbnails ===

    async def get_sized(self, key: ArtKey, width: int, height: int) -> tuple[bytes, str] | None:
        """Art at an exact size, transcoding and storing it on first request.

        Returns:
            (bytes, mime), or None when there is no original, the box is below
            the validator minimum, or transcoding fails

        Raises:
            ArtStoreError: Store read/write failed
        """
        # save_thumb rejects anything under the validator minimum
        if width < MIN_IMAGE_DIMENSION or height < MIN_IMAGE_DIMENSION:
            logger.warning("Refusing %dx%d thumbnail for %s, below minimum size", width, height, key)
            return None

        tag = size_tag(width, height)
        cached = await self.store.get_size(key, tag)
        if cached is not None:
            return cached.data, cached.mime

        original = await self.store.get_size(key, ORIGINAL)
        if original is None:
            return None

        resized = await self._transcode(original, width, height)
        if resized is None:
            return None
        await self.save_thumb(key, resized[0], resized[1], tag)
        return resized

    async def get_thumb(self, key: ArtKey, thumb: int | str | None) -> tuple[bytes, str] | None:
        """get_sized() for a numeric thumb preset (unknown presets = 275x275)."""
        size = get_thumb_size(thumb)
        return await self.get_sized(key, size.width, size.height)

    async def _transcode(
        self, original: ImageRecord, width: int, height: int
    ) -> tuple[bytes, str] | None:
        try:
            resized = await asyncio.to_thread(
                resize_image, original.data, original.mime, width, height
            )
        except TranscodeError as e:
            logger.warning("No %dx%d thumbnail for %s: %s", width, height, original.key, e)
            return None
        return resized.data, resized.mime

    # === Gathering ===

    async def load_candidate(self, key: ArtKey, candidate: Candidate) -> bytes | None:
        """Fetch the bytes a candidate points at. Failures → None."""
        match candidate.kind:
            case "raw":
                return candidate.data
            case "db":
                record = await self.store.get_size(key, ORIGINAL)
                return record.data if record else None
            case "url":
                assert candidate.url is not None
                return await self._fetch_url(candidate.url)
            case "file":
                assert candidate.file is not None
                try:
                    return await asyncio.to_thread(Path(candidate.file).read_bytes)
                except OSError as e:
                    logger.warning("Unable to read art file %s: %s", candidate.file, e)
                    return None
        if candidate.source_file:
            try:
                pictures = await asyncio.to_thread(extract_pictures, candidate.source_file, 1)
            except Exception as e:
                logger.warning("Unable to read embedded art from %s: %s", candidate.source_file, e)
                return None
            return pictures[0].data if pictures else None
        return None

    async def find_and_store(
        self,
        key: ArtKey,
        options: GatherOptions | None = None,
        limit: int | None = None,
    ) -> bool:
        """Gather candidates and insert the first one whose bytes validate.

        Returns:
            True when the key has an original afterwards
        """
        if self.gatherer is None:
            return False

        candidates = await self.gatherer.gather(
            key, options=options, limit=limit or self.settings.gather_limit
        )
        for candidate in candidates:
            if candidate.db:
                return True
            data = await self.load_candidate(key, candidate)
            if not is_valid_image(data):
                logger.debug("Discarding unusable candidate %r for %s", candidate, key)
                continue
            result = await self.insert(key, data, candidate.mime)
            if result:
                logger.info("Stored art for %s from %s", key, candidate.provider)
                return True
            if result.status is ArtInsertStatus.DECLINED:
                return False
        logger.info("No usable art found for %s (%d candidate(s))", key, len(candidates))
        return False

    async def _fetch_url(self, url: str) -> bytes | None:
        if self.fetcher is None:
            logger.warning("No HTTP fetcher configured, cannot download %s", url)
            return None
        try:
            response = await self.fetcher.fetch(url)
        except Exception as e:
            logger.warning("Failed to download %s: %s", url, e)
            return None
        if not response.ok:
            logger.warning("Failed to download %s: HTTP %d", url, response.status_code)
            return None
        return response.body

    # === URLs & cache ===

    async def url(self, key: ArtKey, session_id: str | None = None) -> str:
        """image.php URL for the key, with an art.<ext> name when the mime is known."""
        mime = await self._cached_mime(key)
        if mime is None:
            for meta in await self.store.list_meta([key.object_id]):
                if meta.key == key:
                    await self.meta_cache.set(key, meta.size, meta.mime)
            mime = await self._cached_mime(key)

        params = {
            "object_id": key.object_id,
            "object_type": key.object_type.value,
            "auth": session_id or "",
        }
        if mime:
            params["name"] = f"art.{extension_for_mime(mime)}"
        return f"{self.settings.web_path}/image.php?{urlencode(params)}"

    async def _cached_mime(self, key: ArtKey) -> str | None:
        if self.settings.resize_images:
            thumb = await self.meta_cache.get(key, DEFAULT_THUMB.tag)
            if thumb is not None:
                return thumb.mime
        original = await self.meta_cache.get(key, ORIGINAL)
        return original.mime if original else None

    async def build_cache(self, object_ids: list[int]) -> int:
        """Pre-warm the meta cache for many objects. Returns entries cached."""
        if not object_ids:
            return 0
        return await self.meta_cache.add_many(await self.store.list_meta(object_ids))

    # === Maintenance ===

    async def gc(self) -> dict[str, int]:
        """Delete art whose owning object is gone, per configured type.

        A failure for one type is logged and the sweep goes on.
        """
        removed: dict[str, int] = {}
        for type_name in self.settings.gc_types:
            object_type = ObjectType.normalize(type_name)
            try:
                removed[object_type.value] = await self.store.count_orphans_and_delete(object_type)
            except (ArtStoreError, ValidationException) as e:
                logger.error("Art GC failed for %s: %s", object_type.value, e)
        if any(removed.values()):
            logger.info("Art GC removed %s", removed)
        return removed
