"""Tests for sample types and color models."""

import numpy as np
import pytest

from pixelkit import DimensionError
from pixelkit.core.types import (
    F32,
    F64,
    GRAY,
    RGB,
    RGBA,
    U8,
    U16,
    XYZ,
    color_model_for_name,
    default_color_for_channels,
    sample_type_for_dtype,
)


def test_type_names_are_distinct():
    names = [t.name for t in (U8, U16, F32, F64)]
    assert len(set(names)) == len(names)
    assert F32.name != F64.name
    assert U8.name == "uint8"


def test_integer_round_trip_through_normalized():
    samples = np.arange(256, dtype=np.uint8)
    normalized = U8.to_normalized(samples)
    assert normalized.dtype == np.float64
    assert normalized[-1] == pytest.approx(1.0)
    np.testing.assert_array_equal(U8.from_normalized(normalized), samples)


def test_integer_conversion_rounds_and_clamps():
    out = U8.from_normalized(np.array([-0.5, 0.5, 1.5]))
    np.testing.assert_array_equal(out, [0, 128, 255])
    assert U16.from_normalized(np.array([1.0]))[0] == 65535


def test_float_types_keep_natural_range():
    values = np.array([-0.25, 1.5])
    np.testing.assert_array_equal(F32.from_normalized(values), values.astype(np.float32))
    assert F32.is_float and not U8.is_float


def test_sample_type_lookup():
    assert sample_type_for_dtype(np.uint16) is U16
    with pytest.raises(DimensionError):
        sample_type_for_dtype(np.int32)


def test_color_models():
    assert (GRAY.channels, RGB.channels, RGBA.channels, XYZ.channels) == (1, 3, 3 + 1, 3)
    assert RGBA.has_alpha and not RGB.has_alpha
    assert RGBA.color_channels == 3
    assert color_model_for_name("RGBA") is RGBA
    assert default_color_for_channels(1) is GRAY
    with pytest.raises(DimensionError):
        color_model_for_name("cmyk")
