"""Repository implementations for stored artwork."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from sqlalchemy import column, delete, exists, func, select, table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from artcache.domain.entities import ImageMeta, ImageRecord
from artcache.domain.exceptions import ArtStoreError, ValidationException
from artcache.domain.ports import IImageStore
from artcache.domain.value_objects import ArtKey, ObjectType

from .models import ImageModel

logger = logging.getLogger(__name__)

DEFAULT_OWNER_TABLES: dict[str, str] = {"album": "album", "artist": "artist"}


class ImageRepository(IImageStore):
    """SQLAlchemy implementation of the image store.

    Hey future me - like every repository here, this one NEVER commits! Writes
    are flushed so later reads in the same session see them, the caller's
    session_scope() decides commit/rollback. SQLAlchemy errors are wrapped in
    ArtStoreError so the services don't need to know about SQLAlchemy.
    """

    def __init__(
        self,
        session: AsyncSession,
        owner_tables: Mapping[str, str] | None = None,
    ) -> None:
        self.session = session
        self.owner_tables = dict(owner_tables or DEFAULT_OWNER_TABLES)

    def _model_to_record(self, model: ImageModel) -> ImageRecord:
        return ImageRecord(
            key=ArtKey.create(model.object_type, model.object_id),
            size=model.size,
            data=model.image,
            mime=model.mime,
        )

    async def get(self, key: ArtKey) -> list[ImageRecord]:
        stmt = select(ImageModel).where(
            ImageModel.object_type == key.object_type.value,
            ImageModel.object_id == key.object_id,
        ).order_by(ImageModel.id)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise ArtStoreError(f"Failed to read images for {key}: {e}", operation="get") from e
        return [self._model_to_record(model) for model in result.scalars().all()]

    async def get_size(self, key: ArtKey, size: str) -> ImageRecord | None:
        stmt = (
            select(ImageModel)
            .where(
                ImageModel.object_type == key.object_type.value,
                ImageModel.object_id == key.object_id,
                ImageModel.size == size,
            )
            .order_by(ImageModel.id.desc())
            .limit(1)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise ArtStoreError(
                f"Failed to read {size} image for {key}: {e}", operation="get_size"
            ) from e
        model = result.scalar_one_or_none()
        return self._model_to_record(model) if model else None

    async def put(self, key: ArtKey, size: str, data: bytes, mime: str) -> None:
        try:
            await self.session.execute(
                delete(ImageModel).where(
                    ImageModel.object_type == key.object_type.value,
                    ImageModel.object_id == key.object_id,
                    ImageModel.size == size,
                )
            )
            self.session.add(
                ImageModel(
                    object_type=key.object_type.value,
                    object_id=key.object_id,
                    size=size,
                    mime=mime,
                    image=data,
                )
            )
            await self.session.flush()
        except SQLAlchemyError as e:
            raise ArtStoreError(f"Failed to store {size} image for {key}: {e}", operation="put") from e
        logger.debug("Stored %s image for %s (%d bytes, %s)", size, key, len(data), mime)

    async def delete_all(self, key: ArtKey) -> int:
        try:
            result = await self.session.execute(
                delete(ImageModel).where(
                    ImageModel.object_type == key.object_type.value,
                    ImageModel.object_id == key.object_id,
                )
            )
            await self.session.flush()
        except SQLAlchemyError as e:
            raise ArtStoreError(
                f"Failed to delete images for {key}: {e}", operation="delete_all"
            ) from e
        return result.rowcount or 0

    async def exists_any(self, key: ArtKey) -> bool:
        stmt = select(func.count(ImageModel.id)).where(
            ImageModel.object_type == key.object_type.value,
            ImageModel.object_id == key.object_id,
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise ArtStoreError(f"Failed to count images for {key}: {e}", operation="exists_any") from e
        return (result.scalar() or 0) > 0

    async def count_orphans_and_delete(self, object_type: ObjectType) -> int:
        """Delete images whose owner row is gone.

        The owner table comes from owner_tables (object_type -> table name);
        it only needs an integer "id" column, so we describe it with a
        lightweight table() clause instead of mapping the host's models.

        Raises:
            ValidationException: No owner table configured for the type
            ArtStoreError: Database failure
        """
        owner_name = self.owner_tables.get(object_type.value)
        if not owner_name:
            raise ValidationException(f"No owner table configured for '{object_type.value}'")

        owner = table(owner_name, column("id"))
        stmt = (
            delete(ImageModel)
            .where(
                ImageModel.object_type == object_type.value,
                ~exists(select(owner.c.id).where(owner.c.id == ImageModel.object_id)),
            )
            .execution_options(synchronize_session=False)
        )
        # Own savepoint per type: a failed DELETE must not poison the caller's transaction
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise ArtStoreError(
                f"Failed to collect orphaned {object_type.value} images: {e}",
                operation="gc",
            ) from e
        return result.rowcount or 0

    async def list_meta(self, object_ids: Sequence[int]) -> list[ImageMeta]:
        if not object_ids:
            return []
        stmt = select(
            ImageModel.object_type, ImageModel.object_id, ImageModel.size, ImageModel.mime
        ).where(ImageModel.object_id.in_([int(i) for i in object_ids]))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise ArtStoreError(f"Failed to list image metadata: {e}", operation="list_meta") from e
        return [
            ImageMeta(key=ArtKey.create(row.object_type, row.object_id), size=row.size, mime=row.mime)
            for row in result.all()
        ]
