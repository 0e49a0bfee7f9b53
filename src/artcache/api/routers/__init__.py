"""API router initialization."""

from fastapi import APIRouter

from artcache.api.routers import images

# Mounted at the app root: image.php URLs are built from art.web_path, not /api
api_router = APIRouter()
api_router.include_router(images.router)

__all__ = ["api_router"]
