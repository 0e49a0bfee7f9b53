"""Unit tests for the folder art source."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from artcache.domain.value_objects import ArtKey
from artcache.infrastructure.art_sources import FolderArtSource
from artcache.infrastructure.art_sources.folder import scan_directories

KEY = ArtKey.create("album", 1)


def _touch(path: Path, content: bytes = b"img") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def album_dir(tmp_path: Path) -> Path:
    album = tmp_path / "Artist" / "Album"
    _touch(album / "01 - Intro.mp3")
    _touch(album / "back.png")
    _touch(album / "cover.jpg")
    _touch(album / "folder.jpg")
    _touch(album / "empty.jpg", b"")
    _touch(album / "notes.txt")
    _touch(album / "SHOUT.JPG")
    return album


class TestScanDirectories:
    """Tests for the synchronous directory scan."""

    def test_collects_image_files(self, album_dir: Path) -> None:
        results = scan_directories([str(album_dir)], None)

        names = sorted(Path(c.file).name for c in results)
        assert names == ["back.png", "cover.jpg", "folder.jpg"]

    def test_mime_from_extension(self, album_dir: Path) -> None:
        mimes = {Path(c.file).name: c.mime for c in scan_directories([str(album_dir)], None)}
        assert mimes["back.png"] == "image/png"
        assert mimes["cover.jpg"] == "image/jpeg"

    def test_preferred_file_replaces_everything(self, album_dir: Path) -> None:
        results = scan_directories([str(album_dir)], "cover.jpg")

        assert [Path(c.file).name for c in results] == ["cover.jpg"]

    def test_preferred_from_any_directory_drops_others(self, tmp_path: Path) -> None:
        cd1 = tmp_path / "CD1"
        cd2 = tmp_path / "CD2"
        _touch(cd1 / "scan.png")
        _touch(cd2 / "cover.jpg")
        _touch(cd2 / "inlay.jpg")

        results = scan_directories([str(cd1), str(cd2)], "cover.jpg")

        assert [c.file for c in results] == [str(cd2 / "cover.jpg")]

    def test_scan_stops_at_preferred_file(self, tmp_path: Path) -> None:
        """Files sorted after the preferred one are not looked at."""
        cd1 = tmp_path / "CD1"
        cd2 = tmp_path / "CD2"
        _touch(cd1 / "a.jpg")
        _touch(cd1 / "cover.jpg")
        _touch(cd1 / "z.jpg")
        _touch(cd2 / "b.jpg")

        without_preferred = scan_directories([str(cd1), str(cd2)], "nothing.jpg")
        assert len(without_preferred) == 4

        with_preferred = scan_directories([str(cd1), str(cd2)], "cover.jpg")
        assert [c.file for c in with_preferred] == [str(cd1 / "cover.jpg")]

    def test_unreadable_directory_is_skipped(self, tmp_path: Path, album_dir: Path) -> None:
        results = scan_directories([str(tmp_path / "missing"), str(album_dir)], None)
        assert len(results) == 3


class TestFolderArtSource:
    """Tests for FolderArtSource.gather."""

    @pytest.fixture
    def catalog(self, album_dir: Path) -> MagicMock:
        mock = MagicMock()
        mock.get_file_paths = AsyncMock(
            return_value=[str(album_dir / "01 - Intro.mp3"), str(album_dir / "02 - Song.mp3")]
        )
        return mock

    async def test_gather_scans_each_directory_once(self, catalog: MagicMock) -> None:
        source = FolderArtSource(catalog)

        results = await source.gather(KEY, None, {})

        assert len(results) == 3
        assert source.name == "folder"

    async def test_gather_respects_limit(self, catalog: MagicMock) -> None:
        results = await FolderArtSource(catalog).gather(KEY, 2, {})
        assert len(results) == 2

    async def test_gather_with_preferred_filename(self, catalog: MagicMock) -> None:
        results = await FolderArtSource(catalog, preferred_filename="folder.jpg").gather(KEY, None, {})
        assert [Path(c.file).name for c in results] == ["folder.jpg"]

    async def test_no_media_files(self) -> None:
        catalog = MagicMock()
        catalog.get_file_paths = AsyncMock(return_value=[])
        assert await FolderArtSource(catalog).gather(KEY, None, {}) == []
