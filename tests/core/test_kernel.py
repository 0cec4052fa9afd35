"""Tests for convolution kernels."""

import numpy as np
import pytest

from pixelkit import F64, GRAY, DimensionError, Filter, Image, Kernel
from pixelkit.core.filters import kernel


def _impulse(size=(7, 7), point=(3, 3)):
    image = Image.new(size, F64, GRAY)
    image.set_f(point, 0, 1.0)
    return image


def test_kernel_requires_odd_square_weights():
    with pytest.raises(DimensionError):
        Kernel([[1.0, 2.0]])
    with pytest.raises(DimensionError):
        Kernel(np.ones((4, 4)))
    weights = Kernel(np.ones((3, 3))).weights
    with pytest.raises(ValueError):
        weights[0, 0] = 2.0


def test_identity_kernel_copies(gradient):
    identity = Kernel([[0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 0.0]])
    out = gradient.new_like().apply(identity, [gradient])
    assert out == gradient


def test_impulse_response_is_flipped_kernel():
    weights = np.arange(9, dtype=np.float64).reshape(3, 3)
    out = _impulse().new_like().apply(Kernel(weights), [_impulse()])
    window = out.to_array()[2:5, 2:5, 0]
    np.testing.assert_array_equal(window, weights[::-1, ::-1])


def test_edges_are_replicated():
    source = Image.new((5, 1), F64, GRAY)
    source.store_normalized(0, np.array([[[0.1], [0.2], [0.3], [0.4], [0.5]]]))
    out = source.new_like().apply(kernel.box_blur(3), [source])
    assert out.get_f((0, 0), 0) == pytest.approx((0.1 * 2 + 0.2) / 3)
    assert out.get_f((4, 0), 0) == pytest.approx((0.5 * 2 + 0.4) / 3)


def test_sobel_on_uniform_image_is_zero():
    source = Image.new((6, 6), F64, GRAY)
    source.data[...] = 0.7
    out = source.new_like().apply(kernel.sobel(), [source])
    np.testing.assert_allclose(out.data, 0.0, atol=1e-12)


def test_sobel_responds_to_horizontal_step():
    source = Image.new((6, 3), F64, GRAY)
    source.pixels()[:, 3:, 0] = 1.0
    out = source.new_like().apply(kernel.sobel(), [source])
    assert out.get_f((2, 1), 0) == pytest.approx(-4.0)
    assert out.get_f((0, 1), 0) == 0.0


def test_presets_and_normalization():
    assert kernel.gaussian_5x5().weights.sum() == pytest.approx(1.0)
    assert kernel.gaussian(7, 1.5).weights.sum() == pytest.approx(1.0)
    assert kernel.sharpen().weights.sum() == pytest.approx(1.0)
    assert kernel.edge_detect().weights.sum() == pytest.approx(0.0)
    assert Kernel(np.full((3, 3), 2.0)).normalized() == kernel.box_blur(3)
    with pytest.raises(DimensionError):
        kernel.edge_detect().normalized()
    with pytest.raises(DimensionError):
        kernel.gaussian(3, 0.0)


def test_bulk_path_matches_per_pixel_path(make_image):
    source = make_image(10, 9, sample_type=F64)
    flt = kernel.gaussian_5x5()

    bulk = source.new_like().apply(flt, [source])
    per_pixel = source.new_like()
    Filter.eval_rows(flt, [source], per_pixel, 0, per_pixel.height)

    np.testing.assert_allclose(bulk.data, per_pixel.data, rtol=0, atol=1e-12)


def test_row_ranges_only_write_their_rows(make_image):
    source = make_image(sample_type=F64)
    out = source.new_like()
    kernel.box_blur(3).eval_rows([source], out, 2, 5)
    pixels = out.pixels()
    assert not pixels[:2].any()
    assert not pixels[5:].any()
    assert pixels[2:5].any()


def test_kernel_rejects_mismatched_output(gradient):
    with pytest.raises(DimensionError):
        Image.new((3, 3)).apply(kernel.sharpen(), [gradient])
