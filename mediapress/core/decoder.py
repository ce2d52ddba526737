"""Turn raw image bytes into a fully loaded Pillow image."""

import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeError

logger = logging.getLogger(__name__)

# Largest image accepted, in pixels. Matches the size at which Pillow itself
# refuses to open an image (twice Image.MAX_IMAGE_PIXELS).
MAX_PIXELS = 2 * 89_478_485


def _normalize_mode(img: Image.Image) -> Image.Image:
    """Convert to RGBA when the image carries transparency, RGB otherwise."""
    target = "RGBA" if img.has_transparency_data else "RGB"
    if img.mode == target:
        return img
    return img.convert(target)


def decode(data: bytes) -> Image.Image:
    """Decode image bytes into an RGB or RGBA bitmap.

    The EXIF orientation tag is applied so camera photos come out upright.
    Images larger than ``MAX_PIXELS`` are rejected from their header,
    before any pixel data is decoded.

    Args:
        data: Raw image bytes (JPEG, PNG, WebP, ... anything Pillow reads)

    Returns:
        A loaded PIL Image independent of ``data``

    Raises:
        DecodeError: If the bytes are empty, unrecognized, truncated, corrupt
            or too large
    """
    if not data:
        raise DecodeError("Empty image data")

    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.width * img.height > MAX_PIXELS:
                raise DecodeError(
                    f"Image too large: {img.width}x{img.height} exceeds {MAX_PIXELS} pixels"
                )
            img.load()
            upright = ImageOps.exif_transpose(img)
    except UnidentifiedImageError as e:
        raise DecodeError("Unrecognized image format") from e
    except Image.DecompressionBombError as e:
        raise DecodeError(f"Image too large: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Corrupt or truncated image: {e}") from e

    bitmap = _normalize_mode(upright)
    if bitmap is not upright:
        upright.close()
    logger.debug("Decoded image %dx%d (%s)", bitmap.width, bitmap.height, bitmap.mode)
    return bitmap
