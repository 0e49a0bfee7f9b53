"""Persistence layer: ORM models, session management and the image repository."""

from artcache.infrastructure.persistence.database import Database
from artcache.infrastructure.persistence.models import Base, ImageModel
from artcache.infrastructure.persistence.repositories import ImageRepository

__all__ = ["Base", "Database", "ImageModel", "ImageRepository"]
