"""Art source "tags": pictures embedded in the media files.

Supported containers (all via mutagen):
- ASF/WMA: WM/Picture, only the first one
- ID3 (mp3, aiff, ...): every APIC frame
- FLAC: every PICTURE block
- Ogg Vorbis/Opus: metadata_block_picture comments
- MP4/M4A: every covr atom
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import struct
from dataclasses import dataclass
from typing import Any

from mutagen import File as MutagenFile  # type: ignore[attr-defined]
from mutagen import MutagenError
from mutagen.asf import ASF
from mutagen.flac import FLAC, Picture
from mutagen.id3 import ID3
from mutagen.mp4 import MP4, MP4Cover

from artcache.domain.entities import Candidate
from artcache.domain.ports import GatherOptions, IArtSource, IMediaCatalog
from artcache.domain.value_objects import DEFAULT_MIME, ArtKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddedPicture:
    """Picture bytes pulled out of a media file's tags."""

    data: bytes
    mime: str


def parse_asf_picture(raw: bytes) -> EmbeddedPicture | None:
    """Decode a WM/Picture attribute.

    Layout: picture type (1 byte), data length (uint32 LE), mime (UTF-16LE,
    NUL terminated), description (UTF-16LE, NUL terminated), data.
    """
    if len(raw) < 5:
        return None
    (length,) = struct.unpack_from("<I", raw, 1)
    pos = 5
    strings = []
    for _ in range(2):
        end = pos
        while end + 1 < len(raw) and raw[end : end + 2] != b"\x00\x00":
            end += 2
        strings.append(raw[pos:end].decode("utf-16-le", errors="replace"))
        pos = end + 2
    data = raw[pos : pos + length]
    if not data:
        return None
    return EmbeddedPicture(data=data, mime=strings[0] or DEFAULT_MIME)


def _mp4_cover_mime(cover: Any) -> str:
    if getattr(cover, "imageformat", None) == MP4Cover.FORMAT_PNG:
        return "image/png"
    return "image/jpeg"


def extract_pictures(path: str, limit: int | None = None) -> list[EmbeddedPicture]:
    """Read embedded pictures from one media file (sync, mutagen).

    Raises whatever mutagen raises for unreadable files; the caller decides.
    """
    audio = MutagenFile(path)
    if audio is None or (audio.tags is None and not isinstance(audio, FLAC)):
        return []

    pictures: list[EmbeddedPicture] = []

    if isinstance(audio, ASF):
        for attribute in audio.tags.get("WM/Picture", [])[:1]:
            picture = parse_asf_picture(bytes(attribute.value))
            if picture:
                pictures.append(picture)

    elif isinstance(audio.tags, ID3):
        for frame in audio.tags.getall("APIC"):
            pictures.append(EmbeddedPicture(data=frame.data, mime=frame.mime or DEFAULT_MIME))

    elif isinstance(audio, FLAC):
        for flac_picture in audio.pictures:
            pictures.append(
                EmbeddedPicture(data=flac_picture.data, mime=flac_picture.mime or DEFAULT_MIME)
            )

    elif isinstance(audio, MP4):
        for cover in audio.tags.get("covr", []):
            pictures.append(EmbeddedPicture(data=bytes(cover), mime=_mp4_cover_mime(cover)))

    else:
        for encoded in audio.tags.get("metadata_block_picture", []) or []:
            try:
                block = Picture(base64.b64decode(encoded))
            except (binascii.Error, ValueError, struct.error, MutagenError) as e:
                logger.debug("Skipping broken picture block in %s: %s", path, e)
                continue
            pictures.append(EmbeddedPicture(data=block.data, mime=block.mime or DEFAULT_MIME))

    if limit:
        pictures = pictures[:limit]
    return pictures


class TagArtSource(IArtSource):
    """Pictures embedded in the object's media files."""

    def __init__(self, catalog: IMediaCatalog) -> None:
        self.catalog = catalog

    @property
    def name(self) -> str:
        return "tags"

    async def gather(
        self, key: ArtKey, limit: int | None, options: GatherOptions
    ) -> list[Candidate]:
        results: list[Candidate] = []
        for path in await self.catalog.get_file_paths(key):
            try:
                pictures = await asyncio.to_thread(extract_pictures, path)
            except Exception as e:
                logger.warning("Could not read tags from %s: %s", path, e)
                continue

            for picture in pictures:
                results.append(Candidate(data=picture.data, mime=picture.mime, source_file=path))
                if limit and len(results) >= limit:
                    return results
        return results
