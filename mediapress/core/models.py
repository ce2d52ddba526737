"""Data models for source images, codecs and compression results."""

import hashlib
import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from PIL import Image


class Codec(Enum):
    """Output codecs, declared from best compression to the universal baseline."""

    AVIF = ("AVIF", "image/avif", ".avif", True)
    WEBP = ("WEBP", "image/webp", ".webp", True)
    JPEG = ("JPEG", "image/jpeg", ".jpg", False)

    def __init__(self, pil_format: str, mime_type: str, extension: str, supports_alpha: bool):
        self.pil_format = pil_format
        self.mime_type = mime_type
        self.extension = extension
        self.supports_alpha = supports_alpha

    @classmethod
    def baseline(cls) -> "Codec":
        """The codec every runtime is assumed to encode."""
        return cls.JPEG

    @classmethod
    def priority_order(cls) -> tuple["Codec", ...]:
        return tuple(cls)

    @classmethod
    def from_name(cls, name: str) -> "Codec":
        """Look up a codec by case-insensitive name (``"webp"``, ``"JPEG"``...)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown codec: {name}") from None


@dataclass(frozen=True)
class SourceImage:
    """Caller-owned input bytes plus an optional declared MIME type."""

    data: bytes
    mime_type: Optional[str] = None

    @classmethod
    def from_path(cls, filepath: str | Path) -> "SourceImage":
        """Read an image file, guessing its MIME type from the extension."""
        filepath = Path(filepath)
        with open(filepath, "rb") as f:
            data = f.read()
        mime_type, _ = mimetypes.guess_type(str(filepath))
        return cls(data=data, mime_type=mime_type)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class CompressionAttempt:
    """One encode call inside a codec search."""

    quality: float
    width: int
    height: int
    size: int  # bytes


@dataclass(frozen=True)
class SearchState:
    """Quality and canvas used for the next encode attempt."""

    quality: float
    bitmap: Image.Image

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.bitmap.size


@dataclass(frozen=True)
class EncodedResult:
    """Encoded thumbnail handed back to the caller."""

    data: bytes
    codec: Codec
    mime_type: str
    width: int
    height: int
    attempts: int = 1

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def size_kb(self) -> int:
        """Size in KiB, rounded for display."""
        return round(self.size / 1024)

    @property
    def sha256(self) -> str:
        return hashlib.sha256(self.data).hexdigest()

    def to_data_url(self) -> str:
        from ..transport import to_data_url

        return to_data_url(self.data, self.mime_type)

    def to_dict(self) -> dict:
        return {
            "codec": self.codec.name,
            "mime_type": self.mime_type,
            "width": self.width,
            "height": self.height,
            "size": self.size,
            "attempts": self.attempts,
            "sha256": self.sha256,
        }
