"""Sample types and color models understood by :class:`~pixelkit.core.image.Image`.

Both sets are closed: every image is tagged with exactly one
:class:`SampleType` (how a channel is stored) and one :class:`ColorModel`
(how many channels a pixel has and what they mean).  Filters work on
normalized ``float64`` values so they never need to know the storage width.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import DimensionError


@dataclass(frozen=True)
class SampleType:
    """Numeric storage of a single channel."""

    name: str
    dtype: np.dtype
    max_value: float

    @property
    def is_float(self) -> bool:
        return np.issubdtype(self.dtype, np.floating)

    def to_normalized(self, values: np.ndarray) -> np.ndarray:
        """Return *values* as ``float64`` scaled so ``max_value`` maps to ``1.0``."""

        array = np.asarray(values, dtype=np.float64)
        if self.is_float:
            return array
        return array / self.max_value

    def from_normalized(self, values: np.ndarray) -> np.ndarray:
        """Return normalized *values* converted into this storage type.

        Integer types round to nearest and clamp into ``[0, max_value]``.
        Float types keep their natural range and are only cast.
        """

        array = np.asarray(values, dtype=np.float64)
        if self.is_float:
            return array.astype(self.dtype)
        scaled = np.rint(array * self.max_value)
        return np.clip(scaled, 0.0, self.max_value).astype(self.dtype)

    def __str__(self) -> str:
        return self.name


U8 = SampleType("uint8", np.dtype(np.uint8), 255.0)
U16 = SampleType("uint16", np.dtype(np.uint16), 65535.0)
F32 = SampleType("float", np.dtype(np.float32), 1.0)
F64 = SampleType("double", np.dtype(np.float64), 1.0)

SAMPLE_TYPES: tuple[SampleType, ...] = (U8, U16, F32, F64)


def sample_type_for_dtype(dtype: np.dtype | type) -> SampleType:
    """Return the :class:`SampleType` storing channels as *dtype*."""

    resolved = np.dtype(dtype)
    for sample_type in SAMPLE_TYPES:
        if sample_type.dtype == resolved:
            return sample_type
    raise DimensionError(f"Unsupported sample dtype: {resolved}")


@dataclass(frozen=True)
class ColorModel:
    """Fixed channel layout of a pixel."""

    name: str
    channel_names: tuple[str, ...]

    @property
    def channels(self) -> int:
        return len(self.channel_names)

    @property
    def has_alpha(self) -> bool:
        return self.channel_names[-1] == "a"

    @property
    def color_channels(self) -> int:
        """Number of channels excluding alpha."""

        return self.channels - 1 if self.has_alpha else self.channels

    def __str__(self) -> str:
        return self.name


GRAY = ColorModel("gray", ("y",))
RGB = ColorModel("rgb", ("r", "g", "b"))
RGBA = ColorModel("rgba", ("r", "g", "b", "a"))
XYZ = ColorModel("xyz", ("x", "y", "z"))

COLOR_MODELS: tuple[ColorModel, ...] = (GRAY, RGB, RGBA, XYZ)


def color_model_for_name(name: str) -> ColorModel:
    """Return the :class:`ColorModel` called *name* (case-insensitive)."""

    lowered = name.lower()
    for model in COLOR_MODELS:
        if model.name == lowered:
            return model
    raise DimensionError(f"Unknown color model: {name!r}")


def default_color_for_channels(channels: int) -> ColorModel:
    """Return the color model assumed for an array with *channels* channels."""

    for model in (GRAY, RGB, RGBA):
        if model.channels == channels:
            return model
    raise DimensionError(f"No default color model has {channels} channels")


__all__ = [
    "COLOR_MODELS",
    "ColorModel",
    "F32",
    "F64",
    "GRAY",
    "RGB",
    "RGBA",
    "SAMPLE_TYPES",
    "SampleType",
    "U16",
    "U8",
    "XYZ",
    "color_model_for_name",
    "default_color_for_channels",
    "sample_type_for_dtype",
]
