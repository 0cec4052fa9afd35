"""Reference filters built on the :class:`~pixelkit.core.filter.Filter` contract.

- pointwise: elementwise tone adjustments, inversion and blending
- convert: color-model conversion
- crop: region extraction
- kernel: NxN convolution with edge replication
- transform: affine resampling
"""

from __future__ import annotations

from . import kernel, transform
from .convert import Convert
from .crop import Crop
from .kernel import Kernel
from .pointwise import Blend, Brightness, Contrast, Invert, Saturation
from .transform import Transform

__all__ = [
    "Blend",
    "Brightness",
    "Contrast",
    "Convert",
    "Crop",
    "Invert",
    "Kernel",
    "Saturation",
    "Transform",
    "kernel",
    "transform",
]
