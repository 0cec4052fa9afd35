"""Square convolution kernels with edge replication.

Samples that fall outside the source are clamped to the nearest edge pixel.
The bulk path runs a Numba-compiled loop that accumulates in the same order
as :meth:`Kernel.compute_at`, so both produce identical values.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np
from numba import jit

from ...errors import DimensionError
from ..filter import Filter
from ..geometry import Point

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..image import Image


@jit(nopython=True, cache=True)
def _convolve_rows(
    band: np.ndarray,
    weights: np.ndarray,
    out: np.ndarray,
    band_start: int,
    height: int,
    start: int,
    stop: int,
) -> None:
    """JIT-compiled convolution of rows ``[start, stop)``.

    ``band`` holds the normalized source rows from ``band_start`` onwards,
    enough to cover every clamped sample the rows need.
    """
    size = weights.shape[0]
    radius = size // 2
    width = band.shape[1]
    channels = band.shape[2]

    for y in range(start, stop):
        for x in range(width):
            for c in range(channels):
                out[y - start, x, c] = 0.0
            for ky in range(size):
                sy = min(max(y + ky - radius, 0), height - 1) - band_start
                for kx in range(size):
                    sx = min(max(x + kx - radius, 0), width - 1)
                    weight = weights[ky, kx]
                    for c in range(channels):
                        out[y - start, x, c] += weight * band[sy, sx, c]


class Kernel(Filter):
    """Immutable odd-sized square matrix of convolution weights."""

    def __init__(self, weights: Sequence[Sequence[float]] | np.ndarray) -> None:
        matrix = np.array(weights, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise DimensionError(f"Kernel weights must be square, got shape {matrix.shape}")
        if matrix.shape[0] % 2 == 0:
            raise DimensionError(f"Kernel size must be odd, got {matrix.shape[0]}")
        matrix.setflags(write=False)
        self._weights = matrix

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def size(self) -> int:
        return self._weights.shape[0]

    @property
    def radius(self) -> int:
        return self.size // 2

    def normalized(self) -> "Kernel":
        """Return a copy whose weights sum to one."""

        total = float(self._weights.sum())
        if total == 0.0:
            raise DimensionError("Cannot normalize a kernel whose weights sum to zero")
        return Kernel(self._weights / total)

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        source = inputs[0]
        if source.size != output.size or source.channels != output.channels:
            raise DimensionError(
                f"Kernel needs matching input and output, got {source!r} and {output!r}"
            )

    def compute_at(self, point: Point, inputs: Sequence["Image"], px: np.ndarray) -> None:
        source = inputs[0]
        radius = self.radius
        acc = np.zeros(px.shape[0], dtype=np.float64)
        for ky in range(self.size):
            sy = min(max(point.y + ky - radius, 0), source.height - 1)
            for kx in range(self.size):
                sx = min(max(point.x + kx - radius, 0), source.width - 1)
                acc += self._weights[ky, kx] * source.get_pixel((sx, sy))
        px[:] = acc

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
        band_start = max(0, start - self.radius)
        band_stop = min(source.height, stop + self.radius)
        band = source.normalized(band_start, band_stop)
        out = np.empty((stop - start, output.width, output.channels), dtype=np.float64)
        _convolve_rows(band, self._weights, out, band_start, source.height, start, stop)
        output.store_normalized(start, out)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Kernel):
            return NotImplemented
        return np.array_equal(self._weights, other._weights)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Kernel({self._weights.tolist()})"


def edge_detect() -> Kernel:
    """3x3 Laplacian-style edge detector."""
    return Kernel([[-1.0, -1.0, -1.0], [-1.0, 8.0, -1.0], [-1.0, -1.0, -1.0]])


def sharpen() -> Kernel:
    return Kernel([[0.0, -1.0, 0.0], [-1.0, 5.0, -1.0], [0.0, -1.0, 0.0]])


def sobel() -> Kernel:
    """Horizontal Sobel gradient."""
    return Kernel([[1.0, 0.0, -1.0], [2.0, 0.0, -2.0], [1.0, 0.0, -1.0]])


def sobel_y() -> Kernel:
    """Vertical Sobel gradient."""
    return Kernel([[1.0, 2.0, 1.0], [0.0, 0.0, 0.0], [-1.0, -2.0, -1.0]])


def box_blur(size: int = 3) -> Kernel:
    return Kernel(np.full((size, size), 1.0 / (size * size)))


def gaussian_5x5() -> Kernel:
    """5x5 binomial approximation of a Gaussian blur."""
    row = np.array([1.0, 4.0, 6.0, 4.0, 1.0])
    return Kernel(np.outer(row, row) / 256.0)


def gaussian(size: int, sigma: float) -> Kernel:
    """Return a normalized ``size`` x ``size`` Gaussian blur kernel."""

    if sigma <= 0.0:
        raise DimensionError(f"Gaussian sigma must be positive, got {sigma}")
    radius = size // 2
    row = np.array(
        [math.exp(-((i - radius) ** 2) / (2.0 * sigma * sigma)) for i in range(size)],
        dtype=np.float64,
    )
    return Kernel(np.outer(row, row)).normalized()


__all__ = [
    "Kernel",
    "box_blur",
    "edge_detect",
    "gaussian",
    "gaussian_5x5",
    "sharpen",
    "sobel",
    "sobel_y",
]
