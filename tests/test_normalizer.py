import pytest
from PIL import Image

from mediapress.core.normalizer import (
    center_square_crop,
    fit_dimensions,
    normalize,
    resize_to_fit,
    shrink,
)
from conftest import gradient_image, noise_image


@pytest.mark.parametrize(
    "size, max_dimension, expected",
    [
        ((4000, 3000), 1200, (1200, 900)),
        ((3000, 4000), 1200, (900, 1200)),
        ((1500, 1500), 1200, (1200, 1200)),
        ((800, 600), 1200, (800, 600)),
        ((1200, 1200), 1200, (1200, 1200)),
        ((1000, 333), 500, (500, 167)),  # 166.5 rounds half-up
        ((5000, 1), 1200, (1200, 1)),
    ],
)
def test_fit_dimensions(size, max_dimension, expected):
    assert fit_dimensions(*size, max_dimension) == expected


def test_fit_dimensions_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        fit_dimensions(100, 100, 0)


def test_resize_longer_side_maps_to_max_dimension():
    img = Image.new("RGB", (4000, 3000))
    resized = resize_to_fit(img, 1200)
    assert resized.size == (1200, 900)

    portrait = resize_to_fit(Image.new("RGB", (600, 2400)), 1200)
    assert portrait.size == (300, 1200)


def test_resize_passes_small_images_through():
    img = Image.new("RGB", (640, 480))
    assert resize_to_fit(img, 1200) is img


def test_center_square_crop_takes_the_middle():
    # Three 10px wide vertical bands: red | green | blue
    img = Image.new("RGB", (30, 10), (255, 0, 0))
    img.paste((0, 255, 0), (10, 0, 20, 10))
    img.paste((0, 0, 255), (20, 0, 30, 10))

    square = center_square_crop(img)
    assert square.size == (10, 10)
    assert square.getcolors() == [(100, (0, 255, 0))]


def test_center_square_crop_truncates_odd_offsets():
    img = Image.new("L", (10, 13), 0)
    img.paste(255, (0, 1, 10, 11))  # rows 1..10 white
    square = center_square_crop(img)
    assert square.size == (10, 10)
    assert square.getcolors() == [(100, 255)]


@pytest.mark.parametrize(
    "size",
    [(4000, 3000), (3000, 4000), (1201, 1199), (50, 700), (700, 50), (1, 1), (999, 1000)],
)
def test_normalize_is_always_square_and_bounded(size):
    result = normalize(Image.new("RGB", size), 1200)
    assert result.width == result.height
    assert result.width <= 1200


def test_normalize_4000x3000_yields_900_square():
    assert normalize(Image.new("RGB", (4000, 3000)), 1200).size == (900, 900)


def test_normalize_is_deterministic_and_leaves_input_alone():
    img = gradient_image((400, 250))
    before = img.tobytes()

    first = normalize(img, 200)
    second = normalize(img, 200)

    assert first is not img
    assert first.tobytes() == second.tobytes()
    assert img.size == (400, 250)
    assert img.tobytes() == before


def test_normalize_keeps_alpha():
    img = Image.new("RGBA", (80, 40), (10, 20, 30, 0))
    assert normalize(img, 1200).mode == "RGBA"


def test_shrink_floors_dimensions():
    img = noise_image((100, 60))
    assert shrink(img, 0.255).size == (25, 15)


def test_shrink_never_reaches_zero():
    assert shrink(Image.new("RGB", (10, 10)), 0.001).size == (1, 1)
