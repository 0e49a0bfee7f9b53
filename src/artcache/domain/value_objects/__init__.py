"""Domain value objects."""

from artcache.domain.value_objects.art_key import ArtKey, ObjectType
from artcache.domain.value_objects.mime import (
    DEFAULT_MIME,
    extension_for_mime,
    extension_from_url,
    mime_from_extension,
    mime_from_url,
)
from artcache.domain.value_objects.thumb_size import (
    DEFAULT_THUMB,
    ORIGINAL,
    THUMB_PRESETS,
    ThumbSize,
    get_thumb_size,
    parse_size_tag,
    size_tag,
)

__all__ = [
    "ArtKey",
    "DEFAULT_MIME",
    "DEFAULT_THUMB",
    "ORIGINAL",
    "ObjectType",
    "THUMB_PRESETS",
    "ThumbSize",
    "extension_for_mime",
    "extension_from_url",
    "get_thumb_size",
    "mime_from_extension",
    "mime_from_url",
    "parse_size_tag",
    "size_tag",
]
