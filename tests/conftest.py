import io
import random

import pytest
from PIL import Image


def noise_image(size, seed=0, mode="RGB"):
    """Seeded random pixels; compresses very poorly."""
    width, height = size
    channels = len(mode)
    data = random.Random(seed).randbytes(width * height * channels)
    return Image.frombytes(mode, size, data)


def gradient_image(size):
    width, height = size
    img = Image.new("RGB", size)
    img.putdata([
        (x * 255 // max(1, width - 1), y * 255 // max(1, height - 1), 128)
        for y in range(height)
        for x in range(width)
    ])
    return img


def to_bytes(img, fmt="PNG", **params):
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **params)
    return buffer.getvalue()


class RecordingEncoder:
    """Wraps an encoder and records every (codec, quality, size) call."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    def __call__(self, img, codec, quality):
        data = self.inner(img, codec, quality)
        self.calls.append((codec, quality, img.size, len(data) if data else 0))
        return data

    @property
    def codecs(self):
        return [call[0] for call in self.calls]

    @property
    def sizes(self):
        return [call[3] for call in self.calls]


@pytest.fixture
def solid_png():
    return to_bytes(Image.new("RGB", (64, 64), (200, 30, 30)))


@pytest.fixture
def photo_like_png():
    return to_bytes(gradient_image((320, 240)))


@pytest.fixture
def noise_png():
    return to_bytes(noise_image((300, 300), seed=42))
