"""Compression pipeline: decode, normalize, then walk the codec fallback chain."""

import logging
from typing import Optional

from ..codecs.capabilities import CapabilityProvider, default_capabilities
from ..config import CompressionConfig, DEFAULT_CONFIG
from .decoder import decode
from .encoder import Encoder, encode_with_budget, pillow_encode
from .errors import EncodingUnavailableError
from .models import EncodedResult, SourceImage
from .normalizer import normalize

logger = logging.getLogger(__name__)


class MediaCompressor:
    """Reusable compressor bound to a configuration and codec capabilities.

    The fallback chain exists for format availability only: the first codec
    that produces any output wins, even if it missed the byte budget.
    """

    def __init__(
        self,
        config: Optional[CompressionConfig] = None,
        capabilities: Optional[CapabilityProvider] = None,
        encoder: Optional[Encoder] = None,
    ):
        """Initialize the compressor.

        Args:
            config: Compression settings; defaults to CompressionConfig()
            capabilities: Codec capability provider; defaults to the
                process-wide Pillow prober
            encoder: Encoding callable; defaults to Pillow
        """
        self.config = config or DEFAULT_CONFIG
        self.capabilities = capabilities or default_capabilities()
        self.encoder = encoder or pillow_encode

    def compress(self, source: SourceImage | bytes) -> EncodedResult:
        """Compress an image into a square thumbnail under the byte budget.

        Args:
            source: SourceImage or raw image bytes

        Returns:
            EncodedResult from the highest-priority codec that could encode

        Raises:
            DecodeError: If the source is not a readable image
            EncodingUnavailableError: If no codec could produce output
        """
        if not isinstance(source, SourceImage):
            source = SourceImage(source)
        logger.info(
            "Starting image processing (%d bytes, %s)", source.size, source.mime_type or "unknown type"
        )
        data = source.data

        bitmap = decode(data)
        try:
            square = normalize(bitmap, self.config.max_dimension)
        finally:
            bitmap.close()

        try:
            codecs = self.capabilities.supported_codecs()
            for codec in codecs:
                logger.info("Attempting %s compression", codec.name)
                result = encode_with_budget(
                    square,
                    codec,
                    self.config.budget_bytes,
                    encoder=self.encoder,
                    config=self.config,
                )
                if result is not None:
                    logger.info(
                        "Final image result: %s (%s), %dx%d, %dKB after %d attempt(s)",
                        result.codec.name,
                        result.mime_type,
                        result.width,
                        result.height,
                        result.size_kb,
                        result.attempts,
                    )
                    return result
                logger.info("%s produced no output, falling back", codec.name)
        finally:
            square.close()

        raise EncodingUnavailableError(
            "Failed to compress image with any supported format: "
            + ", ".join(c.name for c in codecs)
        )


def compress(
    source: SourceImage | bytes,
    config: Optional[CompressionConfig] = None,
    *,
    capabilities: Optional[CapabilityProvider] = None,
    encoder: Optional[Encoder] = None,
) -> EncodedResult:
    """Compress an image with a one-off MediaCompressor."""
    return MediaCompressor(config, capabilities, encoder).compress(source)
