"""Perceptual content fingerprint.

The fingerprint is an average hash over luma.  The image is divided into a
fixed grid of cells and every cell contributes two bits: one set when its
mean luma is above the mean of all cells (structure), one set when it is
above mid-gray (level).  The level plane keeps uniform images of different
brightness apart.

It is meant for approximate equality and regression checks, not as a
cryptographic digest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from .color import luma
from .types import XYZ

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .image import Image

GRID_ROWS = 8
GRID_COLUMNS = 16
CELL_COUNT = GRID_ROWS * GRID_COLUMNS
HASH_BITS = 2 * CELL_COUNT
MID_GRAY = 0.5


@dataclass(frozen=True)
class Hash:
    """Fixed-size fingerprint of image content."""

    bits: int
    size: int = HASH_BITS

    def diff(self, other: "Hash") -> int:
        """Return the number of differing bits between two fingerprints."""

        if self.size != other.size:
            raise ValueError(f"Cannot compare {self.size}-bit and {other.size}-bit hashes")
        return bin(self.bits ^ other.bits).count("1")

    def hex(self) -> str:
        return f"{self.bits:0{self.size // 4}x}"

    def __str__(self) -> str:
        return self.hex()


def _luma_plane(image: "Image") -> np.ndarray:
    values = image.normalized()
    color = image.color
    if color == XYZ:
        return values[..., 1]
    if color.color_channels >= 3:
        return luma(values)
    return values[..., 0]


def _cell_bounds(length: int, cells: int) -> list[tuple[int, int]]:
    """Split ``[0, length)`` into *cells* ranges holding at least one index each."""

    bounds = []
    for index in range(cells):
        start = min(length * index // cells, length - 1)
        stop = max(length * (index + 1) // cells, start + 1)
        bounds.append((start, stop))
    return bounds


def compute_hash(image: "Image") -> Hash:
    """Return the :class:`Hash` of *image*'s current pixels."""

    plane = _luma_plane(image)
    rows = _cell_bounds(image.height, GRID_ROWS)
    columns = _cell_bounds(image.width, GRID_COLUMNS)
    cells = np.array(
        [[plane[r0:r1, c0:c1].mean() for c0, c1 in columns] for r0, r1 in rows],
        dtype=np.float64,
    )
    threshold = cells.mean()

    # bits [0, CELL_COUNT) are relative, [CELL_COUNT, HASH_BITS) absolute
    bits = 0
    for position, value in enumerate(cells.flat):
        if value > threshold:
            bits |= 1 << position
        if value > MID_GRAY:
            bits |= 1 << (CELL_COUNT + position)
    return Hash(bits)


__all__ = ["CELL_COUNT", "GRID_COLUMNS", "GRID_ROWS", "HASH_BITS", "MID_GRAY", "Hash", "compute_hash"]
