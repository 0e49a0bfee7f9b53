"""Image validation and thumbnail transcoding (Pillow).

Future me note:
Both functions are SYNC and CPU-bound. ArtService calls resize_image through
asyncio.to_thread; is_valid_image only parses the header and is cheap enough
to call inline.

Pillow is imported lazily like everywhere else we touch images: without it
the validator falls back to the length check and the transcoder reports
BACKEND_MISSING instead of blowing up at import time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import NoReturn

from artcache.domain.exceptions import TranscodeError, TranscodeFailure

logger = logging.getLogger(__name__)

MIN_IMAGE_BYTES = 10
MIN_IMAGE_DIMENSION = 5
JPEG_QUALITY = 75

# mime subtype -> (Pillow format, output mime). bmp goes out as png.
_OUTPUT_FORMATS: dict[str, tuple[str, str]] = {
    "jpeg": ("JPEG", "image/jpeg"),
    "jpg": ("JPEG", "image/jpeg"),
    "gif": ("GIF", "image/gif"),
    "png": ("PNG", "image/png"),
    "bmp": ("PNG", "image/png"),
}

_pillow_warning_logged = False


@dataclass(frozen=True)
class ResizedImage:
    """Output of resize_image."""

    data: bytes
    mime: str
    width: int
    height: int


def _load_pillow():  # type: ignore[no-untyped-def]
    global _pillow_warning_logged
    try:
        from PIL import Image
    except ImportError:
        if not _pillow_warning_logged:
            logger.warning("Pillow not installed - image checks reduced to size only")
            _pillow_warning_logged = True
        return None
    return Image


def is_valid_image(data: bytes | None) -> bool:
    """Cheap sanity check for image bytes.

    Rejects anything under 10 bytes. With Pillow available, also rejects
    data that doesn't parse as an image or is smaller than 5x5 pixels.
    """
    if not data or len(data) < MIN_IMAGE_BYTES:
        logger.debug("Image rejected: %d bytes", len(data or b""))
        return False

    pil_image = _load_pillow()
    if pil_image is None:
        return True

    try:
        with pil_image.open(BytesIO(data)) as img:
            width, height = img.size
    except Exception as e:  # Pillow raises a zoo of types for broken data
        logger.debug("Image rejected: not decodable (%s)", e)
        return False

    if width < MIN_IMAGE_DIMENSION or height < MIN_IMAGE_DIMENSION:
        logger.debug("Image rejected: %dx%d is too small", width, height)
        return False
    return True


def resize_image(data: bytes, mime: str | None, width: int, height: int) -> ResizedImage:
    """Stretch an image onto an exact width x height canvas and re-encode it.

    Aspect ratio is NOT preserved - thumbnails are always exactly the
    requested box. jpeg/jpg → JPEG q75, gif → GIF, png/bmp → PNG.

    Args:
        data: Source image bytes
        mime: Source mime type (decides the output format)
        width: Target width in pixels
        height: Target height in pixels

    Returns:
        ResizedImage with the encoded bytes and output mime

    Raises:
        TranscodeError: With a TranscodeFailure reason on any failure
    """
    if width <= 0 or height <= 0 or not is_valid_image(data):
        _fail(TranscodeFailure.INVALID_INPUT, "not trying to resize invalid image data")

    pil_image = _load_pillow()
    if pil_image is None:
        _fail(TranscodeFailure.BACKEND_MISSING, "Pillow not installed, unable to resize")

    subtype = (mime or "").partition("/")[2].lower()
    if subtype not in _OUTPUT_FORMATS:
        _fail(TranscodeFailure.UNSUPPORTED_FORMAT, f"cannot resize {mime!r}")
    out_format, out_mime = _OUTPUT_FORMATS[subtype]

    try:
        source = pil_image.open(BytesIO(data))
        source.load()
    except Exception as e:
        _fail(TranscodeFailure.DECODE_FAILED, f"source image is damaged ({e})")

    try:
        with source:
            canvas = pil_image.new("RGB", (width, height))
            stretched = source.convert("RGB").resize(
                (width, height), pil_image.Resampling.BICUBIC
            )
            canvas.paste(stretched, (0, 0))
    except Exception as e:
        _fail(TranscodeFailure.RESAMPLE_FAILED, f"unable to create resized image ({e})")

    output = BytesIO()
    try:
        if out_format == "JPEG":
            canvas.save(output, format=out_format, quality=JPEG_QUALITY)
        else:
            canvas.save(output, format=out_format)
    except Exception as e:
        _fail(TranscodeFailure.ENCODE_FAILED, f"unable to encode {out_format} ({e})")

    encoded = output.getvalue()
    if not encoded:
        _fail(TranscodeFailure.EMPTY_OUTPUT, "encoder produced no data")

    return ResizedImage(data=encoded, mime=out_mime, width=width, height=height)


def _fail(reason: TranscodeFailure, message: str) -> NoReturn:
    logger.warning("Thumbnail generation failed [%s]: %s", reason.value, message)
    raise TranscodeError(reason, message)
