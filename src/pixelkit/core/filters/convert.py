"""Color-model conversion filter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

from ...errors import DimensionError
from ..color import RGB_TO_XYZ, XYZ_TO_RGB, apply_matrix, luma
from ..filter import ElementwiseFilter
from ..types import GRAY, RGB, RGBA, XYZ, ColorModel

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..image import Image


def _to_rgb(values: np.ndarray, color: ColorModel) -> np.ndarray:
    if color == GRAY:
        return np.repeat(values[..., :1], 3, axis=-1)
    if color == XYZ:
        return apply_matrix(values, XYZ_TO_RGB)
    return values[..., :3].astype(np.float64, copy=True)


def _from_rgb(rgb: np.ndarray, alpha: np.ndarray, target: ColorModel) -> np.ndarray:
    if target == GRAY:
        return luma(rgb)[..., None]
    if target == XYZ:
        return apply_matrix(rgb, RGB_TO_XYZ)
    if target == RGBA:
        return np.concatenate([rgb, alpha[..., None]], axis=-1)
    return rgb


class Convert(ElementwiseFilter):
    """Convert pixels from the input's color model into ``target``.

    RGB reduces to gray through Rec.709 luma, gray expands by replication,
    alpha is dropped or added as opaque, and XYZ goes through the linear
    sRGB (D65) matrix.  XYZ to gray keeps the Y channel.
    """

    def __init__(self, target: ColorModel) -> None:
        self.target = target

    def output_color(self, color: ColorModel) -> ColorModel:
        return self.target

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        if output.color != self.target:
            raise DimensionError(f"{self!r} needs a {self.target} destination, got {output.color}")

    def map_pixels(self, values: np.ndarray, color: ColorModel) -> np.ndarray:
        if color == self.target:
            return np.array(values, dtype=np.float64)
        if color == XYZ and self.target == GRAY:
            return np.array(values[..., 1:2], dtype=np.float64)
        if color.has_alpha:
            alpha = values[..., -1]
        else:
            alpha = np.ones(values.shape[:-1], dtype=np.float64)
        return _from_rgb(_to_rgb(values, color), alpha, self.target)

    def __repr__(self) -> str:
        return f"Convert({self.target.name})"


__all__ = ["Convert"]
