"""mediapress - Compress images into square, size-bounded thumbnails.

Package structure:
    mediapress/
    ├── cli.py              # Command-line interface
    ├── config.py           # CompressionConfig, YAML/env loading
    ├── logger.py           # Logging setup for the CLI
    ├── transport.py        # Data URL helpers for storage hand-off
    ├── core/               # Compression pipeline
    │   ├── models.py       # Codec, SourceImage, EncodedResult, ...
    │   ├── errors.py       # Exception hierarchy
    │   ├── decoder.py      # Bytes -> bitmap
    │   ├── normalizer.py   # Resize + centered square crop
    │   ├── encoder.py      # Per-codec budgeted quality/dimension search
    │   └── pipeline.py     # Codec fallback orchestration
    └── codecs/             # Runtime codec detection
        └── capabilities.py # Capability probing and providers
"""

from .codecs.capabilities import (
    CapabilityProvider,
    PillowCapabilityProber,
    StaticCapabilities,
    default_capabilities,
    probe,
)
from .config import (
    DEFAULT_BUDGET_BYTES,
    DEFAULT_MAX_DIMENSION,
    CompressionConfig,
    load_config,
)
from .core.decoder import decode
from .core.encoder import encode_with_budget, next_search_state, pillow_encode
from .core.errors import (
    CodecEncodeFailure,
    ConfigError,
    DecodeError,
    EncodingUnavailableError,
    MediaPressError,
    TransportError,
)
from .core.models import Codec, CompressionAttempt, EncodedResult, SearchState, SourceImage
from .core.normalizer import center_square_crop, normalize, resize_to_fit
from .core.pipeline import MediaCompressor, compress
from .transport import from_data_url, to_data_url

__all__ = [
    # Pipeline
    "compress",
    "MediaCompressor",
    "decode",
    "normalize",
    "resize_to_fit",
    "center_square_crop",
    "encode_with_budget",
    "next_search_state",
    "pillow_encode",
    # Models
    "Codec",
    "SourceImage",
    "CompressionAttempt",
    "SearchState",
    "EncodedResult",
    # Capabilities
    "CapabilityProvider",
    "PillowCapabilityProber",
    "StaticCapabilities",
    "default_capabilities",
    "probe",
    # Config
    "CompressionConfig",
    "load_config",
    "DEFAULT_MAX_DIMENSION",
    "DEFAULT_BUDGET_BYTES",
    # Transport
    "to_data_url",
    "from_data_url",
    # Errors
    "MediaPressError",
    "DecodeError",
    "CodecEncodeFailure",
    "EncodingUnavailableError",
    "ConfigError",
    "TransportError",
]
