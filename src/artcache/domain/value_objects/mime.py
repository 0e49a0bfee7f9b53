"""Mime type helpers for image URLs and file names."""

import posixpath
from urllib.parse import urlparse

DEFAULT_MIME = "image/jpeg"


def extension_from_url(url: str) -> str:
    """Lowercased file extension of a URL path ("" when there is none)."""
    path = urlparse(url).path
    return posixpath.splitext(path)[1].lstrip(".").lower()


def mime_from_url(url: str, default: str = DEFAULT_MIME) -> str:
    """Mime "image/<ext>" built from the URL path extension."""
    extension = extension_from_url(url)
    return f"image/{extension}" if extension else default


def mime_from_extension(extension: str) -> str:
    """Mime for a local file extension, jpg normalised to jpeg."""
    extension = extension.lower().lstrip(".")
    return "image/jpeg" if extension == "jpg" else f"image/{extension}"


def extension_for_mime(mime: str | None) -> str:
    """File extension for a mime type, with jpeg shortened to jpg."""
    subtype = (mime or DEFAULT_MIME).partition("/")[2].lower() or "jpeg"
    return "jpg" if subtype == "jpeg" else subtype
