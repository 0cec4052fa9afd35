"""Elementwise tone filters and two-input blending."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

import numpy as np

from ...errors import DimensionError
from ..color import luma, mix
from ..filter import ElementwiseFilter, Filter
from ..geometry import Point
from ..types import XYZ, ColorModel

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..image import Image


def _clamp(values: np.ndarray) -> np.ndarray:
    return np.clip(values, 0.0, 1.0)


def _on_color_channels(
    values: np.ndarray,
    color: ColorModel,
    func: Callable[[np.ndarray], np.ndarray],
) -> np.ndarray:
    """Apply *func* to the non-alpha channels, passing alpha through."""

    out = np.array(values, dtype=np.float64)
    count = color.color_channels
    out[..., :count] = func(out[..., :count])
    return out


class Invert(ElementwiseFilter):
    """Replace every channel (alpha included) with ``max - value``."""

    def map_pixels(self, values: np.ndarray, color: ColorModel) -> np.ndarray:
        return 1.0 - np.asarray(values, dtype=np.float64)


class Contrast(ElementwiseFilter):
    """Scale each color channel's distance from mid-gray by ``factor``."""

    def __init__(self, factor: float) -> None:
        self.factor = float(factor)

    def map_pixels(self, values: np.ndarray, color: ColorModel) -> np.ndarray:
        return _on_color_channels(
            values, color, lambda v: _clamp((v - 0.5) * self.factor + 0.5)
        )

    def __repr__(self) -> str:
        return f"Contrast({self.factor})"


class Brightness(ElementwiseFilter):
    """Add ``amount`` to each color channel in normalized space."""

    def __init__(self, amount: float) -> None:
        self.amount = float(amount)

    def map_pixels(self, values: np.ndarray, color: ColorModel) -> np.ndarray:
        return _on_color_channels(values, color, lambda v: _clamp(v + self.amount))

    def __repr__(self) -> str:
        return f"Brightness({self.amount})"


class Saturation(ElementwiseFilter):
    """Blend each pixel between its luma gray and itself by ``factor``.

    ``0`` yields gray, ``1`` is the identity and values above ``1``
    exaggerate color.  Gray images pass through unchanged.
    """

    def __init__(self, factor: float) -> None:
        self.factor = float(factor)

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        if inputs[0].color == XYZ:
            raise DimensionError(f"{self!r} does not support {XYZ} images")

    def map_pixels(self, values: np.ndarray, color: ColorModel) -> np.ndarray:
        if color.color_channels < 3:
            return np.array(values, dtype=np.float64)

        def saturate(rgb: np.ndarray) -> np.ndarray:
            gray = luma(rgb)[..., None]
            return _clamp(gray + (rgb - gray) * self.factor)

        return _on_color_channels(values, color, saturate)

    def __repr__(self) -> str:
        return f"Saturation({self.factor})"


class Blend(Filter):
    """Mix two equally sized images: ``a * (1 - weight) + b * weight``."""

    input_count = 2

    def __init__(self, weight: float) -> None:
        self.weight = float(weight)

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        for source in inputs:
            if source.size != output.size or source.channels != output.channels:
                raise DimensionError(
                    f"{self!r} inputs must match the {output.width}x{output.height} "
                    f"{output.color} destination, got {source!r}"
                )

    def compute_at(self, point: Point, inputs: Sequence["Image"], px: np.ndarray) -> None:
        px[:] = mix(inputs[0].get_pixel(point), inputs[1].get_pixel(point), self.weight)

    def eval_rows(
        self,
        inputs: Sequence["Image"],
        output: "Image",
        start: int,
        stop: int,
    ) -> None:
        first = inputs[0].normalized(start, stop)
        second = inputs[1].normalized(start, stop)
        output.store_normalized(start, mix(first, second, self.weight))

    def __repr__(self) -> str:
        return f"Blend({self.weight})"


__all__ = ["Blend", "Brightness", "Contrast", "Invert", "Saturation"]
