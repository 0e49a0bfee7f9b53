"""Artwork services: gather pipeline, validation/transcoding and the ArtService façade.

Usage:
    from artcache.application.services.images import ArtGatherer, ArtService

    gatherer = ArtGatherer(catalog, settings.art, sources=build_default_sources(...))
    service = ArtService(ImageRepository(session), settings.art, gatherer, fetcher)
    data = await service.get(ArtKey.create("album", 42))
"""

from artcache.application.services.images.art_gatherer import (
    ArtGatherer,
    build_default_options,
)
from artcache.application.services.images.art_service import ArtService
from artcache.application.services.images.image_processing import (
    ResizedImage,
    is_valid_image,
    resize_image,
)

__all__ = [
    "ArtGatherer",
    "ArtService",
    "ResizedImage",
    "build_default_options",
    "is_valid_image",
    "resize_image",
]
