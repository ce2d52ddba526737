"""Exception hierarchy for the compression pipeline."""


class MediaPressError(Exception):
    """Base class for all errors raised by mediapress."""
    pass


class DecodeError(MediaPressError):
    """Raised when input bytes are not a readable raster image."""
    pass


class CodecEncodeFailure(MediaPressError):
    """Raised by an encoder that could not produce output for a codec.

    The pipeline recovers from this by moving on to the next codec, so
    callers of ``compress`` never see it.
    """
    pass


class EncodingUnavailableError(MediaPressError):
    """Raised when no codec in the capability chain could encode at all."""
    pass


class ConfigError(MediaPressError, ValueError):
    """Raised for invalid configuration values or files."""
    pass


class TransportError(MediaPressError, ValueError):
    """Raised when a data URL cannot be parsed back into bytes."""
    pass
