"""SQLAlchemy ORM models for artcache."""

from datetime import UTC, datetime

from sqlalchemy import Index, Integer, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Hey future me - one row per (object_type, object_id, size)! The uniqueness is
# NOT a DB constraint (the legacy table never had one and migrated data can
# contain dupes), the repository keeps it with delete-then-insert writes.
# size is "original" or "<W>x<H>". object_id is an integer id of the owning
# album/artist/... row in the host application's tables.
class ImageModel(Base):
    """Stored artwork: an original image or one derived thumbnail size."""

    __tablename__ = "image"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    object_type: Mapped[str] = mapped_column(String(32), nullable=False)
    object_id: Mapped[int] = mapped_column(Integer, nullable=False)
    size: Mapped[str] = mapped_column(String(32), nullable=False, default="original")
    mime: Mapped[str] = mapped_column(String(64), nullable=False, default="image/jpeg")
    image: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_image_object_size", "object_type", "object_id", "size"),
        Index("ix_image_object_id", "object_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ImageModel {self.object_type}::{self.object_id} size={self.size} "
            f"mime={self.mime}>"
        )
