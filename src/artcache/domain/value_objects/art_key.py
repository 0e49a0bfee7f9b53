"""ArtKey value object - identity of the object that artwork is attached to.

Hey future me - every image row, every cache entry and every gather request is
keyed by (object_type, object_id). The type is ALWAYS one of the ObjectType
members: unknown strings collapse to "album". That collapse is explicit and
logged, not an accident - older callers pass things like "clip" or "movie"
and the image table only ever knew the six types below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from artcache.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)


class ObjectType(StrEnum):
    """Object types that can own artwork."""

    ALBUM = "album"
    ARTIST = "artist"
    VIDEO = "video"
    USER = "user"
    TVSHOW = "tvshow"
    TVSHOW_SEASON = "tvshow_season"

    @classmethod
    def normalize(cls, value: str | ObjectType | None) -> ObjectType:
        """Map any input to a known member, defaulting to ALBUM.

        Args:
            value: Raw type string (or an ObjectType already)

        Returns:
            The matching member, or ObjectType.ALBUM for unknown values
        """
        if isinstance(value, ObjectType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.debug("Unknown object type %r, falling back to album", value)
            return cls.ALBUM


@dataclass(frozen=True)
class ArtKey:
    """Structured (object_type, object_id) pair.

    Frozen so it can be used directly in dict/cache keys.
    """

    object_type: ObjectType
    object_id: int

    @classmethod
    def create(cls, object_type: str | ObjectType | None, object_id: int | str) -> ArtKey:
        """Build a key, normalising the type and coercing the id to int.

        Raises:
            ValidationException: If object_id is not an integer
        """
        try:
            uid = int(object_id)
        except (TypeError, ValueError) as e:
            raise ValidationException(f"Invalid object id: {object_id!r}") from e
        return cls(object_type=ObjectType.normalize(object_type), object_id=uid)

    def __str__(self) -> str:
        return f"{self.object_type.value}::{self.object_id}"
