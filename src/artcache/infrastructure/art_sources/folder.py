"""Art source "folder": image files next to the object's media files.

Hey future me - the preferred filename logic is a bit odd, but it's the
behaviour people's libraries are set up for:
- a directory scan STOPS at the preferred file (later files in that
  directory are not looked at)
- if ANY directory had the preferred file, the result is ONLY the preferred
  files (from all directories), everything else is dropped
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os

from artcache.domain.entities import Candidate
from artcache.domain.ports import GatherOptions, IArtSource, IMediaCatalog
from artcache.domain.value_objects import ArtKey, mime_from_extension

logger = logging.getLogger(__name__)

# Case-sensitive on purpose: COVER.JPG is not picked up
IMAGE_EXTENSIONS = frozenset({"bmp", "gif", "jp2", "jpeg", "jpg", "png"})


def _path_index(path: str) -> str:
    # Dedup key only, not security relevant
    return hashlib.md5(path.encode("utf-8"), usedforsecurity=False).hexdigest()  # nosec B324


def scan_directories(
    directories: list[str], preferred_filename: str | None
) -> list[Candidate]:
    """Scan directories for image files (sync, run in a worker thread).

    Args:
        directories: Distinct directories, in the order they should be scanned
        preferred_filename: Exact file name that overrides everything else

    Returns:
        Preferred candidates if any were found, else all image candidates
    """
    results: dict[str, Candidate] = {}
    preferred: dict[str, Candidate] = {}

    for directory in directories:
        logger.debug("Opening %s and checking for art", directory)
        try:
            entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
        except OSError as e:
            logger.warning("Unable to open %s for art read: %s", directory, e)
            continue

        for entry in entries:
            extension = os.path.splitext(entry.name)[1][1:]
            if extension not in IMAGE_EXTENSIONS:
                continue

            full_path = os.path.join(directory, entry.name)
            try:
                if not entry.is_file() or entry.stat().st_size == 0:
                    logger.debug("Empty file, rejecting %s", entry.name)
                    continue
            except OSError as e:
                logger.debug("Cannot stat %s: %s", full_path, e)
                continue

            candidate = Candidate(file=full_path, mime=mime_from_extension(extension))
            index = _path_index(full_path)

            if preferred_filename and entry.name == preferred_filename:
                logger.debug("Found preferred image file: %s", full_path)
                preferred[index] = candidate
                break

            logger.debug("Found image file: %s", full_path)
            results[index] = candidate

    if preferred:
        return list(preferred.values())
    return list(results.values())


class FolderArtSource(IArtSource):
    """Local image files in the directories of the object's media files."""

    def __init__(self, catalog: IMediaCatalog, preferred_filename: str | None = None) -> None:
        self.catalog = catalog
        self.preferred_filename = preferred_filename

    @property
    def name(self) -> str:
        return "folder"

    async def gather(
        self, key: ArtKey, limit: int | None, options: GatherOptions
    ) -> list[Candidate]:
        paths = await self.catalog.get_file_paths(key)

        directories: list[str] = []
        for path in paths:
            directory = os.path.dirname(path)
            if directory not in directories:
                directories.append(directory)
        if not directories:
            return []

        results = await asyncio.to_thread(
            scan_directories, directories, self.preferred_filename
        )
        if limit:
            results = results[:limit]
        return results
