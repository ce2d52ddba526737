"""Runtime detection of the codecs Pillow can decode and encode.

The chain is ordered from the most efficient codec to the JPEG baseline.
JPEG support is assumed rather than probed, so a capability set is never
empty.
"""

import base64
import io
import logging
from functools import lru_cache
from typing import Iterable, Optional, Protocol

from PIL import Image

from ..core.models import Codec

logger = logging.getLogger(__name__)

# Minimal valid images used to test decoding support
PROBE_SAMPLES = {
    Codec.AVIF: (
        "AAAAIGZ0eXBhdmlmAAAAAGF2aWZtaWYxbWlhZk1BMUIAAADybWV0YQAAAAAAAAAoaGRscgAAAAAAAAAAcGljdAAAAAAAAAAAAAAAAGxp"
        "YmF2aWYAAAAADnBpdG0AAAAAAAEAAAAeaWxvYwAAAABEAAABAAEAAAABAAABGgAAAB0AAAAoaWluZgAAAAAAAQAAABppbmZlAgAAAAAB"
        "AABhdjAxQ29sb3IAAAAAamlwcnAAAABLaXBjbwAAABRpc3BlAAAAAAAAAAIAAAACAAAAEHBpeGkAAAAAAwgICAAAAAxhdjFDgQ0MAAAA"
        "ABNjb2xybmNseAACAAIAAYAAAAAXaXBtYQAAAAAAAAABAAEEAQKDBAAAACVtZGF0EgAKCBgANogQEAwgMg8f8D///8WfhwB8+ErK42A="
    ),
    Codec.WEBP: "UklGRh4AAABXRUJQVlA4TBEAAAAvAAAAAAfQ//73v/+BiOh/AAA=",
}


class CapabilityProvider(Protocol):
    """Anything that can report the usable codecs in priority order."""

    def supported_codecs(self) -> tuple[Codec, ...]:
        ...


def _can_decode(codec: Codec) -> bool:
    sample = PROBE_SAMPLES.get(codec)
    if sample is None:
        return False
    with Image.open(io.BytesIO(base64.b64decode(sample))) as img:
        img.load()
        return img.width > 0 and img.height > 0


def _can_encode(codec: Codec) -> bool:
    Image.init()
    return codec.pil_format in Image.SAVE


def probe() -> tuple[Codec, ...]:
    """Return the codecs this runtime supports, best compression first.

    Never raises: a codec whose probe fails for any reason is reported as
    unsupported and probing moves on to the next one.
    """
    supported = []
    for codec in Codec.priority_order():
        if codec is Codec.baseline():
            continue
        try:
            ok = _can_decode(codec) and _can_encode(codec)
        except Exception as e:
            logger.debug("Probe for %s failed: %s", codec.name, e)
            ok = False
        logger.debug("Codec %s supported: %s", codec.name, ok)
        if ok:
            supported.append(codec)

    supported.append(Codec.baseline())
    logger.info("Supported codecs: %s", ", ".join(c.name for c in supported))
    return tuple(supported)


class PillowCapabilityProber:
    """Capability provider backed by real Pillow probing.

    The probe runs on first use and the result is kept for the lifetime of
    the instance. Call ``refresh()`` to probe again.
    """

    def __init__(self):
        self._codecs: Optional[tuple[Codec, ...]] = None

    def supported_codecs(self) -> tuple[Codec, ...]:
        if self._codecs is None:
            self._codecs = probe()
        return self._codecs

    def refresh(self) -> tuple[Codec, ...]:
        self._codecs = None
        return self.supported_codecs()


class StaticCapabilities:
    """Fixed capability set, for tests and for forcing a specific codec.

    Codecs are kept in priority order regardless of the order given, and the
    baseline codec is always appended.
    """

    def __init__(self, codecs: Iterable[Codec] = ()):
        requested = set(codecs)
        requested.add(Codec.baseline())
        self._codecs = tuple(c for c in Codec.priority_order() if c in requested)

    def supported_codecs(self) -> tuple[Codec, ...]:
        return self._codecs

    def __repr__(self) -> str:
        return f"StaticCapabilities({[c.name for c in self._codecs]})"


@lru_cache(maxsize=1)
def _default_prober() -> PillowCapabilityProber:
    return PillowCapabilityProber()


def default_capabilities() -> PillowCapabilityProber:
    """Process-wide prober shared by every pipeline that is not given one."""
    return _default_prober()
