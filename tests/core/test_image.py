"""Tests for the Image buffer."""

import numpy as np
import pytest

from pixelkit import (
    F32,
    GRAY,
    RGB,
    RGBA,
    U8,
    U16,
    AllocationError,
    BoundsError,
    DimensionError,
    Image,
    Invert,
    Kernel,
    Point,
    Size,
)
from pixelkit.config import reset_settings


def test_new_is_zero_filled_with_exact_length():
    image = Image.new((7, 5), U8, RGBA)
    assert image.size == Size(7, 5)
    assert image.data.size == 7 * 5 * 4
    assert not image.data.any()


def test_set_f_writes_native_sample():
    image = Image.new((1000, 1000), U8, RGB)
    image.set_f((3, 15), 0, 1.0)
    assert image.data[image.index((3, 15))] == 255
    assert image.index(Point(3, 15)) == (15 * 1000 + 3) * 3


def test_get_pixel_returns_normalized_copy():
    image = Image.new((2, 2), U16, RGB)
    image.set_pixel((1, 1), [1.0, 0.5, 0.0])
    pixel = image.get_pixel((1, 1))
    assert pixel[0] == pytest.approx(1.0)
    assert pixel[1] == pytest.approx(32768 / 65535)
    pixel[0] = 0.0
    assert image.get_f((1, 1), 0) == pytest.approx(1.0)


@pytest.mark.parametrize("point", [(-1, 0), (0, -1), (4, 0), (0, 3)])
def test_out_of_range_access_raises(point):
    image = Image.new((4, 3))
    with pytest.raises(BoundsError):
        image.get_pixel(point)


def test_channel_index_is_checked():
    image = Image.new((2, 2), F32, GRAY)
    with pytest.raises(BoundsError):
        image.set_f((0, 0), 1, 0.5)
    with pytest.raises(DimensionError):
        image.set_pixel((0, 0), [0.1, 0.2])


def test_invalid_sizes_and_buffers():
    with pytest.raises(DimensionError):
        Image.new((0, 4))
    with pytest.raises(DimensionError):
        Image((2, 2), U8, RGB, data=np.zeros(5, dtype=np.uint8))


def test_allocation_limit(monkeypatch):
    monkeypatch.setenv("PIXELKIT_MAX_IMAGE_PIXELS", "100")
    reset_settings()
    try:
        with pytest.raises(AllocationError):
            Image.new((20, 20))
    finally:
        monkeypatch.delenv("PIXELKIT_MAX_IMAGE_PIXELS")
        reset_settings()


def test_new_like_variants(gradient):
    like = gradient.new_like()
    assert (like.size, like.sample_type, like.color) == (gradient.size, F32, RGB)
    assert not like.data.any()

    gray = gradient.new_like_with(U8, GRAY)
    assert (gray.size, gray.sample_type, gray.color) == (gradient.size, U8, GRAY)
    assert gray.data.size == gradient.width * gradient.height


def test_from_array_infers_tags():
    array = np.zeros((3, 4, 4), dtype=np.uint8)
    image = Image.from_array(array)
    assert (image.width, image.height, image.sample_type, image.color) == (4, 3, U8, RGBA)
    array[0, 0, 0] = 9
    assert image.data[0] == 0


def test_row_major_layout(gradient):
    pixels = gradient.pixels()
    assert np.shares_memory(pixels, gradient.data)
    assert pixels[2, 5, 1] == gradient.data[(2 * gradient.width + 5) * 3 + 1]


def test_convert_and_equality(gradient):
    eight_bit = gradient.convert(U8)
    assert eight_bit.sample_type == U8
    assert eight_bit != gradient
    assert eight_bit == eight_bit.copy()
    assert eight_bit.convert(F32).get_pixel((11, 7))[0] == pytest.approx(1.0)


def test_run_in_place_elementwise(gradient_u8):
    original = gradient_u8.copy()
    gradient_u8.run_in_place(Invert())
    assert gradient_u8 != original
    gradient_u8.run_in_place(Invert())
    assert gradient_u8 == original


def test_run_in_place_neighbourhood_reads_snapshot(gradient):
    expected = gradient.new_like()
    blur = Kernel(np.full((3, 3), 1.0 / 9.0))
    blur.eval([gradient], expected)

    gradient.run_in_place(blur)
    np.testing.assert_array_equal(gradient.data, expected.data)


def test_apply_returns_destination(gradient):
    dest = gradient.new_like()
    assert dest.apply(Invert(), [gradient]) is dest
    assert dest.get_pixel((0, 0))[0] == pytest.approx(1.0)


@pytest.mark.parametrize("point", [(-0.5, 0), (0.5, 1), (1, 2.0)])
def test_fractional_coordinates_raise(point):
    image = Image.new((4, 3))
    with pytest.raises(BoundsError):
        image.get_pixel(point)


def test_numpy_integer_coordinates_are_accepted():
    image = Image.new((4, 3), U8, GRAY)
    image.set_f((np.int64(3), np.int32(2)), 0, 1.0)
    assert image.get_f((3, 2), 0) == 1.0
