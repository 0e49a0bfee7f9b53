"""Domain entities for artwork records, gather candidates and insert results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from artcache.domain.value_objects import ORIGINAL, ArtKey


@dataclass(frozen=True)
class ImageRecord:
    """One stored image: the original or a derived size of it.

    Invariant: at most one record per (key, size). The store enforces this
    with delete-then-insert writes.
    """

    key: ArtKey
    size: str
    data: bytes
    mime: str

    @property
    def is_original(self) -> bool:
        return self.size == ORIGINAL


@dataclass(frozen=True)
class ImageMeta:
    """Blob-free view of an ImageRecord, used by the in-process meta cache."""

    key: ArtKey
    size: str
    mime: str


@dataclass(frozen=True)
class Candidate:
    """Prospective artwork produced by an art source.

    Hey future me - exactly ONE of data/url/file/db is meaningful:
    - data: raw bytes already in hand (embedded tags)
    - url: remote image (musicbrainz, lastfm, google, plugins)
    - file: local image next to the media files (folder scan)
    - db: "there is already an original stored" (store source)
    Candidates are never persisted and never outlive one gather call.
    """

    mime: str = "image/jpeg"
    data: bytes | None = None
    url: str | None = None
    file: str | None = None
    db: bool = False
    source_file: str | None = None  # media file an embedded picture came from
    provider: str | None = None

    @property
    def kind(self) -> str:
        if self.data is not None:
            return "raw"
        if self.db:
            return "db"
        if self.url:
            return "url"
        if self.file:
            return "file"
        return "empty"

    def with_provider(self, provider: str) -> Candidate:
        """Copy tagged with the producing provider name."""
        return Candidate(
            mime=self.mime,
            data=self.data,
            url=self.url,
            file=self.file,
            db=self.db,
            source_file=self.source_file,
            provider=provider,
        )

    def __repr__(self) -> str:
        # Keep raw bytes out of logs
        target = self.url or self.file or self.source_file or ("db" if self.db else "")
        return f"Candidate(kind={self.kind}, mime={self.mime}, target={target!r})"


class ArtInsertStatus(Enum):
    """Outcome of an insert attempt."""

    STORED = "STORED"
    DECLINED = "DECLINED"  # demo mode / art disabled - not an error
    INVALID = "INVALID"  # failed image validation
    FETCH_FAILED = "FETCH_FAILED"  # insert_from_url could not download


@dataclass
class ArtInsertResult:
    """Result of ArtService.insert / insert_from_url.

    Future me note:
    Truthy only when the image was stored, so `if await service.insert(...)`
    keeps working for callers that just want a bool.
    """

    status: ArtInsertStatus
    message: str | None = None
    mime: str | None = None

    @property
    def success(self) -> bool:
        return self.status is ArtInsertStatus.STORED

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def stored(cls, mime: str) -> ArtInsertResult:
        return cls(status=ArtInsertStatus.STORED, mime=mime)

    @classmethod
    def declined(cls, message: str) -> ArtInsertResult:
        return cls(status=ArtInsertStatus.DECLINED, message=message)

    @classmethod
    def invalid(cls, message: str) -> ArtInsertResult:
        return cls(status=ArtInsertStatus.INVALID, message=message)

    @classmethod
    def fetch_failed(cls, message: str) -> ArtInsertResult:
        return cls(status=ArtInsertStatus.FETCH_FAILED, message=message)


__all__ = [
    "ArtInsertResult",
    "ArtInsertStatus",
    "Candidate",
    "ImageMeta",
    "ImageRecord",
]
