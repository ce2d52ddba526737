"""Size-constrained encoding for a single codec.

Each codec gets a bounded search: encode, keep the smallest output seen,
and lower the quality by a square-root step towards the byte budget. Once
quality reaches its floor the canvas itself is shrunk and quality is reset.
Encoded size scales roughly quadratically with both quality and linear
dimension, which is why both steps use ``sqrt(budget / size)``.
"""

import io
import logging
import math
from typing import Callable, Optional

from PIL import Image

from ..config import DEFAULT_CONFIG, CompressionConfig
from .errors import CodecEncodeFailure
from .models import Codec, CompressionAttempt, EncodedResult, SearchState
from .normalizer import shrink

logger = logging.getLogger(__name__)

# (bitmap, codec, quality in [0, 1]) -> encoded bytes, or None/b"" when nothing was produced
Encoder = Callable[[Image.Image, Codec, float], Optional[bytes]]


def quality_to_pillow(quality: float) -> int:
    """Map a [0, 1] quality to Pillow's 1..100 integer scale."""
    return min(100, max(1, round(quality * 100)))


def pillow_encode(img: Image.Image, codec: Codec, quality: float) -> bytes:
    """Encode an image with Pillow.

    Raises:
        CodecEncodeFailure: If Pillow has no encoder for the codec or the
            encoder errors out
    """
    if img.mode == "RGBA" and not codec.supports_alpha:
        img = img.convert("RGB")

    buffer = io.BytesIO()
    try:
        img.save(buffer, format=codec.pil_format, quality=quality_to_pillow(quality))
    except (KeyError, OSError, ValueError) as e:
        raise CodecEncodeFailure(f"{codec.name} encoding failed: {e}") from e
    return buffer.getvalue()


def next_search_state(
    state: SearchState,
    best_size: int,
    budget_bytes: int,
    config: CompressionConfig = DEFAULT_CONFIG,
) -> SearchState:
    """Compute the quality and canvas for the next attempt.

    Quality drops by ``sqrt(budget / best_size)`` but never below the floor.
    When the floor is reached the current canvas is shrunk by the same kind
    of factor and quality resets. Shrinks compound: each one scales the
    already shrunk canvas, not the original.
    """
    ratio = math.sqrt(budget_bytes / best_size)
    quality = max(config.min_quality, state.quality * ratio)

    if quality > config.min_quality:
        return SearchState(quality=quality, bitmap=state.bitmap)

    scale = math.sqrt(budget_bytes / best_size)
    smaller = shrink(state.bitmap, scale)
    logger.debug(
        "Quality floor reached, shrinking %dx%d to %dx%d",
        state.bitmap.width, state.bitmap.height, smaller.width, smaller.height,
    )
    return SearchState(quality=config.reset_quality, bitmap=smaller)


def encode_with_budget(
    bitmap: Image.Image,
    codec: Codec,
    budget_bytes: Optional[int] = None,
    *,
    encoder: Encoder = pillow_encode,
    config: CompressionConfig = DEFAULT_CONFIG,
) -> Optional[EncodedResult]:
    """Encode ``bitmap`` with ``codec``, searching for a result within the budget.

    Args:
        bitmap: Normalized image to encode (not modified or closed)
        codec: Codec to encode with
        budget_bytes: Target maximum size; defaults to ``config.budget_bytes``
        encoder: Callable producing encoded bytes for (image, codec, quality)
        config: Search constants

    Returns:
        The smallest result seen, even when it is still over budget, or
        None if the codec produced no output at all
    """
    if budget_bytes is None:
        budget_bytes = config.budget_bytes

    state = SearchState(quality=config.initial_quality, bitmap=bitmap)
    best: Optional[EncodedResult] = None
    attempts = 0

    try:
        while attempts < config.max_attempts:
            attempts += 1
            logger.debug(
                "%s compression attempt %d with quality %.3f", codec.name, attempts, state.quality
            )

            try:
                data = encoder(state.bitmap, codec, state.quality)
            except CodecEncodeFailure as e:
                logger.warning("%s, trying next format", e)
                return None

            if not data:
                logger.warning("%s encoding produced no output, trying next format", codec.name)
                return None

            attempt = CompressionAttempt(
                quality=state.quality,
                width=state.bitmap.width,
                height=state.bitmap.height,
                size=len(data),
            )
            logger.debug("Compressed size: %dKB", round(attempt.size / 1024))

            if best is None or attempt.size < best.size:
                best = EncodedResult(
                    data=data,
                    codec=codec,
                    mime_type=codec.mime_type,
                    width=attempt.width,
                    height=attempt.height,
                )

            if best.size <= budget_bytes:
                break

            if attempts < config.max_attempts:
                previous = state
                state = next_search_state(state, best.size, budget_bytes, config)
                if previous.bitmap is not state.bitmap and previous.bitmap is not bitmap:
                    previous.bitmap.close()
    finally:
        if state.bitmap is not bitmap:
            state.bitmap.close()

    return EncodedResult(
        data=best.data,
        codec=best.codec,
        mime_type=best.mime_type,
        width=best.width,
        height=best.height,
        attempts=attempts,
    )
