import pytest
from PIL import Image

from mediapress.core import decoder
from mediapress.core.decoder import decode
from mediapress.core.errors import DecodeError, MediaPressError
from conftest import noise_image, to_bytes


def test_decode_png():
    bitmap = decode(to_bytes(Image.new("RGB", (120, 80), (1, 2, 3))))
    assert bitmap.size == (120, 80)
    assert bitmap.mode == "RGB"
    assert bitmap.getpixel((0, 0)) == (1, 2, 3)


def test_decode_jpeg():
    bitmap = decode(to_bytes(noise_image((64, 48)), "JPEG", quality=90))
    assert bitmap.size == (64, 48)
    assert bitmap.mode == "RGB"


def test_decode_keeps_transparency_as_rgba():
    bitmap = decode(to_bytes(Image.new("RGBA", (10, 10), (0, 0, 0, 0))))
    assert bitmap.mode == "RGBA"


@pytest.mark.parametrize("mode", ["L", "P", "CMYK"])
def test_decode_converts_other_modes_to_rgb(mode):
    fmt = "JPEG" if mode == "CMYK" else "PNG"
    bitmap = decode(to_bytes(Image.new(mode, (8, 8)), fmt))
    assert bitmap.mode == "RGB"


def test_decode_applies_exif_orientation():
    img = Image.new("RGB", (40, 20), (255, 255, 255))
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 degrees clockwise on display
    data = to_bytes(img, "JPEG", exif=exif)

    assert decode(data).size == (20, 40)


@pytest.mark.parametrize("data", [b"", b"not an image at all", b"\x89PNG\r\n\x1a\n"])
def test_decode_rejects_garbage(data):
    with pytest.raises(DecodeError):
        decode(data)


def test_decode_rejects_truncated_jpeg():
    data = to_bytes(noise_image((200, 200)), "JPEG", quality=95)
    with pytest.raises(DecodeError):
        decode(data[: len(data) // 2])


def test_decode_error_is_a_mediapress_error():
    with pytest.raises(MediaPressError):
        decode(b"garbage")


def test_decode_rejects_images_over_pixel_limit(monkeypatch):
    monkeypatch.setattr(decoder, "MAX_PIXELS", 300)
    data = to_bytes(Image.new("RGB", (20, 20)))
    with pytest.raises(DecodeError, match="too large"):
        decode(data)


def test_decode_accepts_images_at_pixel_limit(monkeypatch):
    monkeypatch.setattr(decoder, "MAX_PIXELS", 400)
    assert decode(to_bytes(Image.new("RGB", (20, 20)))).size == (20, 20)
