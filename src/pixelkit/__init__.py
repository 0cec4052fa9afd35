"""pixelkit: generic pixel buffers and a pluggable per-pixel filter engine."""

from __future__ import annotations

from .core import (
    F32,
    F64,
    GRAY,
    RGB,
    RGBA,
    U8,
    U16,
    XYZ,
    AndThen,
    AsyncMode,
    ColorModel,
    ElementwiseFilter,
    EvaluationPool,
    Filter,
    Hash,
    Image,
    Point,
    Region,
    SampleType,
    Size,
    apply_async,
    eval_concurrent,
)
from .core.filters import (
    Blend,
    Brightness,
    Contrast,
    Convert,
    Crop,
    Invert,
    Kernel,
    Saturation,
    Transform,
)
from .errors import (
    AllocationError,
    BoundsError,
    ColorspaceError,
    DimensionError,
    FilterEvaluationError,
    ImageIOError,
    PixelkitError,
)

__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "AndThen",
    "AsyncMode",
    "Blend",
    "BoundsError",
    "Brightness",
    "ColorModel",
    "ColorspaceError",
    "Contrast",
    "Convert",
    "Crop",
    "DimensionError",
    "ElementwiseFilter",
    "EvaluationPool",
    "F32",
    "F64",
    "Filter",
    "FilterEvaluationError",
    "GRAY",
    "Hash",
    "Image",
    "ImageIOError",
    "Invert",
    "Kernel",
    "PixelkitError",
    "Point",
    "RGB",
    "RGBA",
    "Region",
    "SampleType",
    "Saturation",
    "Size",
    "Transform",
    "U16",
    "U8",
    "XYZ",
    "apply_async",
    "eval_concurrent",
]
