"""Tests for affine resampling."""

import numpy as np
import pytest

from pixelkit import F64, BoundsError, DimensionError, Filter, Image, Transform
from pixelkit.core.filters import transform


@pytest.fixture
def numbered():
    """4x3 gray image whose pixel value encodes its position."""

    values = np.arange(12, dtype=np.float64).reshape(3, 4) / 16.0
    return Image.from_array(values)


def _apply(flt, source, size):
    return Image.new(size, source.sample_type, source.color).apply(flt, [source])


def test_rotate90_turns_clockwise(numbered):
    out = _apply(transform.rotate90(numbered.size, (3, 4)), numbered, (3, 4))
    expected = np.rot90(numbered.to_array(), k=-1)
    np.testing.assert_array_equal(out.to_array(), expected)


def test_rotate180(numbered):
    out = _apply(transform.rotate180(numbered.size), numbered, numbered.size)
    np.testing.assert_array_equal(out.to_array(), np.rot90(numbered.to_array(), k=2))


def test_rotate270_turns_counter_clockwise(numbered):
    out = _apply(transform.rotate270(numbered.size, (3, 4)), numbered, (3, 4))
    np.testing.assert_array_equal(out.to_array(), np.rot90(numbered.to_array(), k=1))


def test_quarter_turns_need_transposed_destination():
    with pytest.raises(DimensionError):
        transform.rotate90((4, 3), (4, 3))
    with pytest.raises(DimensionError):
        transform.rotate270((4, 3), (3, 3))


def test_four_quarter_turns_restore_image(numbered):
    image = numbered
    for _ in range(4):
        image = _apply(transform.rotate90(image.size, image.size.transposed()), image, image.size.transposed())
    assert image == numbered


def test_scale_two_matches_resize(make_image):
    source = make_image(6, 5, sample_type=F64)
    target = (2 * source.width - 1, 2 * source.height - 1)

    scaled = _apply(transform.scale(2.0, 2.0), source, target)
    resized = _apply(transform.resize(source.size, target), source, target)

    np.testing.assert_array_equal(scaled.data, resized.data)


def test_resize_keeps_corners(make_image):
    source = make_image(6, 5, sample_type=F64)
    out = _apply(transform.resize(source.size, (11, 9)), source, (11, 9))
    np.testing.assert_array_equal(out.get_pixel((0, 0)), source.get_pixel((0, 0)))
    np.testing.assert_array_equal(out.get_pixel((10, 8)), source.get_pixel((5, 4)))


def test_half_pixel_samples_average_two_taps(numbered):
    out = _apply(transform.translate(-0.5, 0.0), numbered, (3, 3))
    expected = (numbered.get_f((1, 0), 0) + numbered.get_f((2, 0), 0)) / 2.0
    assert out.get_f((1, 0), 0) == pytest.approx(expected)


def test_samples_outside_source_raise(numbered):
    with pytest.raises(BoundsError):
        _apply(transform.translate(1.0, 0.0), numbered, numbered.size)


def test_then_composes_matrices():
    combined = transform.translate(2.0, 1.0).then(transform.scale(3.0))
    np.testing.assert_allclose(combined.map_point(6.0, 3.0), (0.0, 0.0))
    np.testing.assert_allclose(combined.matrix @ combined.inverse, np.eye(3), atol=1e-12)


def test_singular_matrix_is_rejected():
    with pytest.raises(DimensionError):
        Transform([[1.0, 2.0, 0.0], [2.0, 4.0, 0.0]])
    with pytest.raises(DimensionError):
        transform.scale(0.0)


def test_bulk_path_matches_per_pixel_path(make_image):
    source = make_image(9, 9, sample_type=F64)
    # central 5x5 window of a 30 degree turn about the middle pixel
    flt = transform.rotate(30.0, (4.0, 4.0)).then(transform.translate(-2.0, -2.0))
    size = (5, 5)

    bulk = _apply(flt, source, size)
    per_pixel = Image.new(size, source.sample_type, source.color)
    Filter.eval_rows(flt, [source], per_pixel, 0, per_pixel.height)

    np.testing.assert_allclose(bulk.data, per_pixel.data, rtol=0, atol=1e-12)


def test_resize_to_single_pixel_is_invertible(make_image):
    source = make_image(6, 5, sample_type=F64)
    flt = transform.resize(source.size, (1, 1))
    np.testing.assert_array_equal(flt.matrix @ flt.inverse, np.eye(3))

    out = _apply(flt, source, (1, 1))
    np.testing.assert_array_equal(out.get_pixel((0, 0)), source.get_pixel((0, 0)))


def test_resize_from_single_column_repeats_it(make_image):
    source = make_image(1, 4, sample_type=F64)
    flt = transform.resize(source.size, (3, 4))
    assert flt.matrix[0, 0] == 0.0
    assert flt.inverse[0, 0] == 0.0

    out = _apply(flt, source, (3, 4)).to_array()
    np.testing.assert_array_equal(out[:, 0], source.to_array()[:, 0])
    np.testing.assert_array_equal(out[:, 2], source.to_array()[:, 0])
