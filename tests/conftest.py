"""Shared fixtures: settings, in-memory database and generated images."""

from collections.abc import AsyncGenerator, Callable
from io import BytesIO

import pytest
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession

from artcache.config import ArtSettings, DatabaseSettings, Settings
from artcache.infrastructure.persistence import Database, ImageRepository


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory for real encoded images: make_image(width, height, fmt)."""

    def _make(width: int = 100, height: int = 100, fmt: str = "JPEG") -> bytes:
        output = BytesIO()
        Image.new("RGB", (width, height), color=(200, 40, 40)).save(output, format=fmt)
        return output.getvalue()

    return _make


@pytest.fixture
def jpeg_bytes(make_image: Callable[..., bytes]) -> bytes:
    return make_image(400, 300, "JPEG")


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        app_env="test",
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        art=ArtSettings(art_order=["db"], gather_on_miss=False),
    )


@pytest.fixture
async def db(app_settings: Settings) -> AsyncGenerator[Database, None]:
    database = Database(app_settings)
    await database.create_tables()
    yield database
    await database.close()


@pytest.fixture
async def session(db: Database) -> AsyncGenerator[AsyncSession, None]:
    async with db.session_scope() as session:
        yield session


@pytest.fixture
def image_repository(session: AsyncSession) -> ImageRepository:
    return ImageRepository(session)
