"""Linear color maths shared by the conversion filters and the fingerprint.

Every helper works on ``(..., channels)`` arrays with explicit per-channel
arithmetic rather than ``matmul`` so a single pixel and a whole row block go
through exactly the same floating point operations.
"""

from __future__ import annotations

import numpy as np

# Rec.709 luma coefficients
LUMA_WEIGHTS: tuple[float, float, float] = (0.2126, 0.7152, 0.0722)

# Linear sRGB (D65) to CIE XYZ
RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)
XYZ_TO_RGB = np.linalg.inv(RGB_TO_XYZ)

RGB_TO_XYZ.setflags(write=False)
XYZ_TO_RGB.setflags(write=False)


def luma(rgb: np.ndarray) -> np.ndarray:
    """Return the luma of the first three channels of *rgb*."""

    w_r, w_g, w_b = LUMA_WEIGHTS
    return rgb[..., 0] * w_r + rgb[..., 1] * w_g + rgb[..., 2] * w_b


def apply_matrix(values: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Multiply each 3-channel pixel in *values* by *matrix*."""

    out = np.empty(values.shape[:-1] + (3,), dtype=np.float64)
    for row in range(3):
        out[..., row] = (
            values[..., 0] * matrix[row, 0]
            + values[..., 1] * matrix[row, 1]
            + values[..., 2] * matrix[row, 2]
        )
    return out


def mix(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    """Equivalent of GLSL's ``mix`` helper."""

    return a * (1.0 - t) + b * t


__all__ = ["LUMA_WEIGHTS", "RGB_TO_XYZ", "XYZ_TO_RGB", "apply_matrix", "luma", "mix"]
