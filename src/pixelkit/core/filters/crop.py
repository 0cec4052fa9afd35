"""Region crop implemented as a block copy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

from ...errors import BoundsError, DimensionError
from ..filter import Filter
from ..geometry import Point, Region, Size

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..image import Image


class Crop(Filter):
    """Copy ``region`` of the input into a destination of exactly its size."""

    def __init__(self, region: Region | tuple) -> None:
        self.region = region if isinstance(region, Region) else Region.new(*region)

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        source = inputs[0]
        if not self.region.fits_within(source.size):
            raise BoundsError(
                f"Crop region {tuple(self.region.origin)}+{tuple(self.region.size)} exceeds "
                f"the {source.width}x{source.height} source"
            )
        if output.size != self.region.size:
            raise DimensionError(
                f"Crop destination must be {self.region.width}x{self.region.height}, "
                f"got {output.width}x{output.height}"
            )
        if output.channels != source.channels:
            raise DimensionError(f"Crop cannot change {source.color} into {output.color}")

    def output_size(self, size: Size) -> Size:
        return self.region.size

    def compute_at(self, point: Point, inputs: Sequence["Image"], px: np.ndarray) -> None:
        origin = self.region.origin
        px[:] = inputs[0].get_pixel((origin.x + point.x, origin.y + point.y))

    def _copy_rows(self, source: "Image", output: "Image", start: int, stop: int) -> None:
        x, y = self.region.origin
        block = source.rows(y + start, y + stop)[:, x : x + self.region.width]
        if source.sample_type == output.sample_type:
            output.rows(start, stop)[...] = block
        else:
            output.store_normalized(start, source.sample_type.to_normalized(block))

    def eval_rows(
        self,
        inputs: Sequence["Image"],
        output: "Image",
        start: int,
        stop: int,
    ) -> None:
        self._copy_rows(inputs[0], output, start, stop)

    def eval(self, inputs: Sequence["Image"], output: "Image") -> None:
        sources = list(inputs)
        self.check(sources, output)
        self._copy_rows(sources[0], output, 0, output.height)

    def __repr__(self) -> str:
        return f"Crop({tuple(self.region.origin)}, {tuple(self.region.size)})"


__all__ = ["Crop"]
