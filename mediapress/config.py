"""Compression settings with defaults, YAML file and environment overrides.

Environment variables (a ``.env`` file is honoured by the CLI):
    MEDIAPRESS_MAX_DIMENSION: Longest side kept before the square crop (default: 1200)
    MEDIAPRESS_BUDGET_BYTES: Target maximum encoded size (default: 512000)
    MEDIAPRESS_INITIAL_QUALITY: First encoder quality tried (default: 0.85)
    MEDIAPRESS_MIN_QUALITY: Quality floor before shrinking (default: 0.3)
    MEDIAPRESS_RESET_QUALITY: Quality used after a shrink (default: 0.7)
    MEDIAPRESS_MAX_ATTEMPTS: Encode calls allowed per codec (default: 5)
"""

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .core.errors import ConfigError

DEFAULT_MAX_DIMENSION = 1200
DEFAULT_BUDGET_BYTES = 500 * 1024

ENV_PREFIX = "MEDIAPRESS_"


@dataclass(frozen=True)
class CompressionConfig:
    """Knobs for one compression call.

    Fields:
        max_dimension: Longest side allowed before cropping, in pixels.
        budget_bytes: Target maximum size of the encoded result.
        initial_quality: Quality of the first attempt for every codec.
        min_quality: Floor for quality reduction; reaching it triggers a shrink.
        reset_quality: Quality restored after the canvas has been shrunk.
        max_attempts: Encode calls allowed per codec, shrinks included.
    """

    max_dimension: int = DEFAULT_MAX_DIMENSION
    budget_bytes: int = DEFAULT_BUDGET_BYTES
    initial_quality: float = 0.85
    min_quality: float = 0.3
    reset_quality: float = 0.7
    max_attempts: int = 5

    def __post_init__(self):
        for name in ("max_dimension", "budget_bytes", "max_attempts"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        if not 0 < self.min_quality <= 1:
            raise ConfigError(f"min_quality must be in (0, 1], got {self.min_quality}")
        if not self.min_quality <= self.reset_quality <= 1:
            raise ConfigError(
                f"reset_quality must be between min_quality and 1, got {self.reset_quality}"
            )
        if not self.min_quality <= self.initial_quality <= 1:
            raise ConfigError(
                f"initial_quality must be between min_quality and 1, got {self.initial_quality}"
            )

    def replace(self, **overrides) -> "CompressionConfig":
        """Return a validated copy with some fields changed (``None`` values are ignored)."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


DEFAULT_CONFIG = CompressionConfig()


def _field_types() -> dict[str, type]:
    return {field.name: type(getattr(DEFAULT_CONFIG, field.name)) for field in dataclasses.fields(CompressionConfig)}


def _coerce(name: str, value, source: str):
    expected = _field_types()[name]
    try:
        if expected is int:
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            return int(value)
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for {name} in {source}: {value!r}") from None


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    # Settings may sit at the top level or under a "compression" key
    if "compression" in data:
        data = data["compression"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"'compression' must be a mapping in {path}")
    return data


def load_config(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CompressionConfig:
    """Build a configuration from defaults, an optional YAML file and the environment.

    Later sources win: YAML values override defaults, environment variables
    override YAML.

    Args:
        path: Optional YAML file with field names as keys
        environ: Environment mapping to read; defaults to ``os.environ``

    Returns:
        Validated CompressionConfig

    Raises:
        ConfigError: If the file is missing, malformed, has unknown keys,
            or any value is out of range
    """
    fields = _field_types()
    values: dict = {}

    if path is not None:
        path = Path(path)
        for key, value in _read_yaml(path).items():
            if key not in fields:
                raise ConfigError(f"Unknown config key '{key}' in {path}")
            values[key] = _coerce(key, value, str(path))

    env = os.environ if environ is None else environ
    for name in fields:
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is not None and raw.strip():
            values[name] = _coerce(name, raw.strip(), ENV_PREFIX + name.upper())

    return CompressionConfig(**values)
