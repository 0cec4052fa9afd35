"""Tests for two-stage filter pipelines."""

import numpy as np

from pixelkit import F32, GRAY, RGB, Convert, Crop, Filter, Image, Invert, Point, Region, Size
from pixelkit.core.filters import kernel


def _per_pixel(flt, inputs, output):
    Filter.eval_rows(flt, inputs, output, 0, output.height)
    return output


def test_size_changing_first_stage_per_pixel_matches_eval(gradient):
    pipeline = Crop(Region.new((2, 2), (4, 4))).and_then(Invert())

    expected = Image.new((4, 4), F32, RGB).apply(pipeline, [gradient])
    actual = _per_pixel(pipeline, [gradient], Image.new((4, 4), F32, RGB))

    np.testing.assert_array_equal(actual.data, expected.data)


def test_compute_at_reads_the_first_stage(gradient):
    pipeline = Crop(Region.new((2, 2), (4, 4))).and_then(Invert())
    px = np.empty(3)
    pipeline.compute_at(Point(0, 0), [gradient], px)
    np.testing.assert_allclose(px, 1.0 - gradient.get_pixel((2, 2)))


def test_compute_at_sees_input_changes(gradient):
    pipeline = Invert().and_then(Invert())
    before = gradient.get_pixel((1, 1))
    px = np.empty(3)
    pipeline.compute_at(Point(1, 1), [gradient], px)
    np.testing.assert_allclose(px, before, atol=1e-6)

    gradient.set_pixel((1, 1), [0.0, 0.0, 0.0])
    pipeline.compute_at(Point(1, 1), [gradient], px)

    np.testing.assert_allclose(px, 0.0, atol=1e-6)


def test_color_changing_first_stage_per_pixel_matches_eval(gradient):
    pipeline = Convert(GRAY).and_then(kernel.box_blur(3))

    expected = gradient.new_like_with(color=GRAY).apply(pipeline, [gradient])
    actual = _per_pixel(pipeline, [gradient], gradient.new_like_with(color=GRAY))

    np.testing.assert_allclose(actual.data, expected.data, rtol=0, atol=1e-6)


def test_pipeline_reports_natural_output_shape():
    pipeline = Crop(((1, 1), (5, 3))).and_then(Convert(GRAY)).and_then(Invert())
    assert pipeline.output_size(Size(12, 8)) == Size(5, 3)
    assert pipeline.output_color(RGB) == GRAY
    assert Invert().output_size(Size(12, 8)) == Size(12, 8)
