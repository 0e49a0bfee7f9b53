"""Unit tests for ImageRepository on in-memory SQLite.

Hey future me - these run against a real aiosqlite database (see conftest `db`),
so the NOT EXISTS garbage collection query is exercised for real.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from artcache.domain.exceptions import ArtStoreError, ValidationException
from artcache.domain.value_objects import ArtKey, ObjectType
from artcache.infrastructure.persistence import ImageRepository

ALBUM_1 = ArtKey.create("album", 1)
ALBUM_2 = ArtKey.create("album", 2)
ARTIST_1 = ArtKey.create("artist", 1)


class TestImageRepositoryReadWrite:
    """Tests for put/get/delete."""

    async def test_put_and_get_size(self, image_repository: ImageRepository) -> None:
        await image_repository.put(ALBUM_1, "original", b"original-bytes", "image/png")

        record = await image_repository.get_size(ALBUM_1, "original")

        assert record is not None
        assert record.data == b"original-bytes"
        assert record.mime == "image/png"
        assert record.key == ALBUM_1
        assert await image_repository.get_size(ALBUM_1, "275x275") is None

    async def test_put_replaces_same_size(self, image_repository: ImageRepository) -> None:
        await image_repository.put(ALBUM_1, "original", b"first", "image/jpeg")
        await image_repository.put(ALBUM_1, "original", b"second", "image/gif")

        records = await image_repository.get(ALBUM_1)

        assert len(records) == 1
        assert records[0].data == b"second"
        assert records[0].mime == "image/gif"

    async def test_get_returns_all_sizes(self, image_repository: ImageRepository) -> None:
        await image_repository.put(ALBUM_1, "original", b"o", "image/jpeg")
        await image_repository.put(ALBUM_1, "275x275", b"t", "image/jpeg")
        await image_repository.put(ARTIST_1, "original", b"a", "image/jpeg")

        sizes = {r.size for r in await image_repository.get(ALBUM_1)}

        assert sizes == {"original", "275x275"}

    async def test_delete_all_and_exists_any(self, image_repository: ImageRepository) -> None:
        await image_repository.put(ALBUM_1, "original", b"o", "image/jpeg")
        await image_repository.put(ALBUM_1, "75x75", b"t", "image/jpeg")
        assert await image_repository.exists_any(ALBUM_1)

        assert await image_repository.delete_all(ALBUM_1) == 2
        assert not await image_repository.exists_any(ALBUM_1)
        assert await image_repository.delete_all(ALBUM_1) == 0

    async def test_list_meta(self, image_repository: ImageRepository) -> None:
        await image_repository.put(ALBUM_1, "original", b"o", "image/png")
        await image_repository.put(ARTIST_1, "original", b"a", "image/jpeg")
        await image_repository.put(ALBUM_2, "original", b"b", "image/jpeg")

        metas = await image_repository.list_meta([1])

        assert {(m.key, m.size, m.mime) for m in metas} == {
            (ALBUM_1, "original", "image/png"),
            (ARTIST_1, "original", "image/jpeg"),
        }
        assert await image_repository.list_meta([]) == []


class TestImageRepositoryGarbageCollection:
    """Tests for count_orphans_and_delete."""

    async def test_deletes_images_without_owner(
        self, session: AsyncSession, image_repository: ImageRepository
    ) -> None:
        await session.execute(text("CREATE TABLE album (id INTEGER PRIMARY KEY)"))
        await session.execute(text("INSERT INTO album (id) VALUES (1)"))
        await image_repository.put(ALBUM_1, "original", b"o", "image/jpeg")
        await image_repository.put(ALBUM_2, "original", b"o", "image/jpeg")
        await image_repository.put(ALBUM_2, "275x275", b"t", "image/jpeg")

        removed = await image_repository.count_orphans_and_delete(ObjectType.ALBUM)

        assert removed == 2
        assert await image_repository.exists_any(ALBUM_1)
        assert not await image_repository.exists_any(ALBUM_2)

    async def test_other_types_are_untouched(
        self, session: AsyncSession, image_repository: ImageRepository
    ) -> None:
        await session.execute(text("CREATE TABLE album (id INTEGER PRIMARY KEY)"))
        await image_repository.put(ARTIST_1, "original", b"a", "image/jpeg")

        assert await image_repository.count_orphans_and_delete(ObjectType.ALBUM) == 0
        assert await image_repository.exists_any(ARTIST_1)

    async def test_unconfigured_type_raises(self, image_repository: ImageRepository) -> None:
        with pytest.raises(ValidationException, match="No owner table"):
            await image_repository.count_orphans_and_delete(ObjectType.VIDEO)

    async def test_missing_owner_table_raises_store_error(self, session: AsyncSession) -> None:
        repository = ImageRepository(session, owner_tables={"artist": "no_such_table"})

        with pytest.raises(ArtStoreError) as exc_info:
            await repository.count_orphans_and_delete(ObjectType.ARTIST)
        assert exc_info.value.operation == "gc"

    async def test_failed_type_does_not_spoil_the_transaction(
        self, session: AsyncSession, mocker: MagicMock
    ) -> None:
        await session.execute(text("CREATE TABLE album (id INTEGER PRIMARY KEY)"))
        repository = ImageRepository(session, owner_tables={"album": "album", "artist": "gone"})
        await repository.put(ALBUM_2, "original", b"o", "image/jpeg")
        await repository.put(ARTIST_1, "original", b"a", "image/jpeg")
        spy = mocker.spy(session, "begin_nested")

        with pytest.raises(ArtStoreError):
            await repository.count_orphans_and_delete(ObjectType.ARTIST)
        removed = await repository.count_orphans_and_delete(ObjectType.ALBUM)
        await session.commit()

        assert spy.call_count == 2
        assert removed == 1
        assert await repository.exists_any(ARTIST_1)
        assert not await repository.exists_any(ALBUM_2)
