"""Resize and center-crop images into bounded squares."""

import logging
import math

from PIL import Image

logger = logging.getLogger(__name__)

# Every resample in the pipeline uses this filter
RESAMPLE = Image.Resampling.LANCZOS


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def fit_dimensions(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Compute the size after an aspect-preserving downscale.

    The longer side becomes ``max_dimension``; the shorter side is rounded
    half-up. Sizes already within the limit are returned unchanged.
    """
    if max_dimension < 1:
        raise ValueError(f"max_dimension must be positive, got {max_dimension}")

    if width <= max_dimension and height <= max_dimension:
        return width, height

    if width > height:
        return max_dimension, max(1, _round_half_up(height * (max_dimension / width)))
    return max(1, _round_half_up(width * (max_dimension / height))), max_dimension


def resize_to_fit(img: Image.Image, max_dimension: int) -> Image.Image:
    """Downscale image if its longer side exceeds the maximum dimension.

    Maintains aspect ratio. Only downscales; never upscales images.

    Args:
        img: PIL Image object
        max_dimension: Maximum allowed width or height in pixels

    Returns:
        PIL Image object (downscaled if necessary, original otherwise)
    """
    new_size = fit_dimensions(img.width, img.height, max_dimension)
    if new_size == img.size:
        return img

    logger.debug("Resizing %dx%d to %dx%d", img.width, img.height, *new_size)
    return img.resize(new_size, RESAMPLE)


def center_square_crop(img: Image.Image) -> Image.Image:
    """Crop the largest centered square out of an image."""
    size = min(img.width, img.height)
    left = (img.width - size) // 2
    top = (img.height - size) // 2
    return img.crop((left, top, left + size, top + size))


def normalize(img: Image.Image, max_dimension: int) -> Image.Image:
    """Bound an image by ``max_dimension`` and crop it to a centered square.

    Always returns a new image; the input is left untouched.
    """
    resized = resize_to_fit(img, max_dimension)
    try:
        square = center_square_crop(resized)
    finally:
        if resized is not img:
            resized.close()

    logger.info("Square crop created: %dx%d", square.width, square.height)
    return square


def shrink(img: Image.Image, scale: float) -> Image.Image:
    """Scale both sides by ``scale``, flooring to whole pixels (at least 1)."""
    new_size = (
        max(1, math.floor(img.width * scale)),
        max(1, math.floor(img.height * scale)),
    )
    return img.resize(new_size, RESAMPLE)
