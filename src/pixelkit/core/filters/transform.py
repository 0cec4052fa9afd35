"""Affine resampling: rotation, scale, resize and translation.

Every geometric operation is a single 3x3 affine matrix.  Evaluation maps
each destination pixel through the *inverse* matrix to a source coordinate,
samples the source at the floor and at the ceiling of that coordinate and
writes the average of the two samples.  This is a deliberately coarse 2-tap
interpolation, not bilinear filtering.

Samples outside the source raise :class:`~pixelkit.errors.BoundsError`;
callers size the destination so that every sample stays in range (the
rotation helpers below do this for quarter turns).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from ...errors import BoundsError, DimensionError
from ..filter import Filter
from ..geometry import Point, Size, SizeLike

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..image import Image

# cos/sin for quarter turns, indexed by the number of 90 degree steps
_QUARTER_TURNS = ((1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0))


def _affine(a: float, b: float, c: float, d: float, e: float, f: float) -> np.ndarray:
    return np.array([[a, b, c], [d, e, f], [0.0, 0.0, 1.0]], dtype=np.float64)


def _as_matrix(matrix: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    values = np.array(matrix, dtype=np.float64)
    if values.shape == (2, 3):
        values = np.vstack([values, [0.0, 0.0, 1.0]])
    if values.shape != (3, 3):
        raise DimensionError(f"Affine matrix must be 2x3 or 3x3, got shape {values.shape}")
    return values


def _cos_sin(degrees: float) -> tuple[float, float]:
    """Return ``(cos, sin)`` of *degrees*, exact for multiples of 90."""

    if float(degrees) % 90.0 == 0.0:
        return _QUARTER_TURNS[int(float(degrees) // 90.0) % 4]
    radians = math.radians(degrees)
    return math.cos(radians), math.sin(radians)


def _rotation_about(degrees: float, cx: float, cy: float) -> np.ndarray:
    cos, sin = _cos_sin(degrees)
    return _affine(
        cos, -sin, cx - cos * cx + sin * cy,
        sin, cos, cy - sin * cx - cos * cy,
    )


class Transform(Filter):
    """Resample the input through a 2D affine transform.

    ``matrix`` maps source coordinates to destination coordinates.  When
    ``inverse`` is not supplied it is computed with :func:`numpy.linalg.inv`;
    the constructors in this module pass exact inverses instead.
    """

    def __init__(
        self,
        matrix: Sequence[Sequence[float]] | np.ndarray,
        inverse: Optional[Sequence[Sequence[float]] | np.ndarray] = None,
    ) -> None:
        forward = _as_matrix(matrix)
        if inverse is None:
            try:
                backward = np.linalg.inv(forward)
            except np.linalg.LinAlgError as exc:
                raise DimensionError("Affine matrix is not invertible") from exc
        else:
            backward = _as_matrix(inverse)
        forward.setflags(write=False)
        backward.setflags(write=False)
        self._matrix = forward
        self._inverse = backward
        self._a, self._b, self._c = (float(v) for v in backward[0])
        self._d, self._e, self._f = (float(v) for v in backward[1])

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def inverse(self) -> np.ndarray:
        return self._inverse

    def then(self, other: "Transform") -> "Transform":
        """Return the single transform applying this one, then *other*."""

        return Transform(other.matrix @ self._matrix, self._inverse @ other.inverse)

    def map_point(self, x, y):
        """Map destination coordinates (scalars or arrays) to source coordinates."""

        return (
            self._a * x + self._b * y + self._c,
            self._d * x + self._e * y + self._f,
        )

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        if inputs[0].channels != output.channels:
            raise DimensionError(f"{self!r} cannot change {inputs[0].color} into {output.color}")

    def compute_at(self, point: Point, inputs: Sequence["Image"], px: np.ndarray) -> None:
        source = inputs[0]
        sx, sy = self.map_point(float(point.x), float(point.y))
        low = source.get_pixel((math.floor(sx), math.floor(sy)))
        high = source.get_pixel((math.ceil(sx), math.ceil(sy)))
        px[:] = (low + high) / 2.0

    def eval_rows(
        self,
        inputs: Sequence["Image"],
        output: "Image",
        start: int,
        stop: int,
    ) -> None:
        if stop <= start:
            return
        source = inputs[0]
        xs = np.arange(output.width, dtype=np.float64)
        ys = np.arange(start, stop, dtype=np.float64)
        grid_x, grid_y = np.meshgrid(xs, ys)
        sx, sy = self.map_point(grid_x, grid_y)

        x0 = np.floor(sx).astype(np.int64)
        y0 = np.floor(sy).astype(np.int64)
        x1 = np.ceil(sx).astype(np.int64)
        y1 = np.ceil(sy).astype(np.int64)
        outside = (
            (x0 < 0) | (y0 < 0) | (x1 >= source.width) | (y1 >= source.height)
        )
        if outside.any():
            row, column = (int(v[0]) for v in np.nonzero(outside))
            raise BoundsError(
                f"Destination pixel ({column}, {start + row}) samples source "
                f"({sx[row, column]:.3f}, {sy[row, column]:.3f}) outside the "
                f"{source.width}x{source.height} image"
            )

        native = source.pixels()
        low = source.sample_type.to_normalized(native[y0, x0])
        high = source.sample_type.to_normalized(native[y1, x1])
        output.store_normalized(start, (low + high) / 2.0)

    def __repr__(self) -> str:
        return f"Transform({self._matrix[:2].tolist()})"


def rotate(degrees: float, center: tuple[float, float] = (0.0, 0.0)) -> Transform:
    """Rotate clockwise (in image coordinates) by *degrees* about *center*."""

    cx, cy = float(center[0]), float(center[1])
    return Transform(_rotation_about(degrees, cx, cy), _rotation_about(-degrees, cx, cy))


def rotate90(source: SizeLike, destination: SizeLike) -> Transform:
    """Quarter turn clockwise from *source* into the transposed *destination*."""

    src, dst = Size(*source), Size(*destination)
    if dst != src.transposed():
        raise DimensionError(f"rotate90 needs a {src.height}x{src.width} destination, got {dst.width}x{dst.height}")
    pivot = (src.height - 1) / 2.0
    return rotate(90.0, (pivot, pivot))


def rotate180(size: SizeLike) -> Transform:
    """Half turn in place."""

    src = Size(*size)
    return rotate(180.0, ((src.width - 1) / 2.0, (src.height - 1) / 2.0))


def rotate270(source: SizeLike, destination: SizeLike) -> Transform:
    """Quarter turn counter-clockwise from *source* into the transposed *destination*."""

    src, dst = Size(*source), Size(*destination)
    if dst != src.transposed():
        raise DimensionError(f"rotate270 needs a {src.height}x{src.width} destination, got {dst.width}x{dst.height}")
    pivot = (src.width - 1) / 2.0
    return rotate(270.0, (pivot, pivot))


def scale(x: float, y: Optional[float] = None) -> Transform:
    """Scale by *x* horizontally and *y* (default *x*) vertically."""

    sx = float(x)
    sy = sx if y is None else float(y)
    if sx == 0.0 or sy == 0.0:
        raise DimensionError("Scale factors must be non-zero")
    return Transform(_affine(sx, 0.0, 0.0, 0.0, sy, 0.0), _affine(1.0 / sx, 0.0, 0.0, 0.0, 1.0 / sy, 0.0))


def _span_ratio(source: int, target: int) -> float:
    """Source pixels advanced per target pixel so both corner pixels line up."""

    if target <= 1:
        # a single target pixel only ever samples the origin
        return 1.0
    return (source - 1) / (target - 1)


def resize(source: SizeLike, target: SizeLike) -> Transform:
    """Map the corner pixels of *source* onto the corner pixels of *target*.

    Evaluating into a destination of exactly *target* size keeps every
    sample inside *source*.  Stretching a single source pixel along an axis
    collapses that axis of the inverse to zero; ``matrix`` then holds its
    pseudo-inverse (zero on that axis) and ``matrix @ inverse`` is not the
    identity.
    """

    src, dst = Size(*source), Size(*target)
    rx = _span_ratio(src.width, dst.width)
    ry = _span_ratio(src.height, dst.height)
    forward = _affine(1.0 / rx if rx else 0.0, 0.0, 0.0, 0.0, 1.0 / ry if ry else 0.0, 0.0)
    return Transform(forward, _affine(rx, 0.0, 0.0, 0.0, ry, 0.0))


def translate(dx: float, dy: float) -> Transform:
    return Transform(_affine(1.0, 0.0, dx, 0.0, 1.0, dy), _affine(1.0, 0.0, -dx, 0.0, 1.0, -dy))


__all__ = [
    "Transform",
    "resize",
    "rotate",
    "rotate180",
    "rotate270",
    "rotate90",
    "scale",
    "translate",
]
