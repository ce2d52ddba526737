"""Core data models and error types."""

from .errors import (
    CodecEncodeFailure,
    ConfigError,
    DecodeError,
    EncodingUnavailableError,
    MediaPressError,
    TransportError,
)
from .models import Codec, CompressionAttempt, EncodedResult, SearchState, SourceImage

__all__ = [
    "Codec",
    "CompressionAttempt",
    "EncodedResult",
    "SearchState",
    "SourceImage",
    "MediaPressError",
    "DecodeError",
    "CodecEncodeFailure",
    "EncodingUnavailableError",
    "ConfigError",
    "TransportError",
]
