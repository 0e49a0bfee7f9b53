"""Application-level caches and shared process state."""

from artcache.application.cache.art_meta_cache import ArtMetaCache, CacheEntry, MetaCacheKey
from artcache.application.cache.art_toggle import ArtToggle

__all__ = ["ArtMetaCache", "ArtToggle", "CacheEntry", "MetaCacheKey"]
