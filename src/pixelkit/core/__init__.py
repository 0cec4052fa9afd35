"""Filter evaluation engine: images, filters and concurrent evaluation."""

from __future__ import annotations

from .executor import AsyncMode, EvaluationPool, apply_async, eval_concurrent
from .filter import AndThen, ElementwiseFilter, Filter, float_like_output, like_input, like_output
from .geometry import Point, Region, Size
from .hash import Hash
from .image import Image
from .types import F32, F64, GRAY, RGB, RGBA, U8, U16, XYZ, ColorModel, SampleType

__all__ = [
    "AndThen",
    "AsyncMode",
    "ColorModel",
    "ElementwiseFilter",
    "EvaluationPool",
    "F32",
    "F64",
    "Filter",
    "GRAY",
    "Hash",
    "Image",
    "Point",
    "RGB",
    "RGBA",
    "Region",
    "SampleType",
    "Size",
    "U16",
    "U8",
    "XYZ",
    "apply_async",
    "eval_concurrent",
    "float_like_output",
    "like_input",
    "like_output",
]
