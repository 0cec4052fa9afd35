"""Named colorspace conversion between sRGB-encoded and linear values."""

from __future__ import annotations

import numpy as np

from ..core.image import Image
from ..errors import ColorspaceError

_ALIASES = {
    "srgb": "srgb",
    "linear": "linear",
    "lnf": "linear",
    "lin_srgb": "linear",
}


def _resolve(name: str) -> str:
    try:
        return _ALIASES[name.lower()]
    except KeyError:
        raise ColorspaceError(f"Unknown colorspace: {name!r}") from None


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """Decode the sRGB transfer curve."""

    v = np.maximum(np.asarray(values, dtype=np.float64), 0.0)
    return np.where(v <= 0.04045, v / 12.92, np.power((v + 0.055) / 1.055, 2.4))


def linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """Encode linear values with the sRGB transfer curve."""

    v = np.maximum(np.asarray(values, dtype=np.float64), 0.0)
    return np.where(v <= 0.0031308, v * 12.92, 1.055 * np.power(v, 1.0 / 2.4) - 0.055)


def convert_colorspace(image: Image, source: str, target: str) -> Image:
    """Return a copy of *image* re-encoded from *source* into *target*.

    Alpha channels are left untouched.
    """

    src = _resolve(source)
    dst = _resolve(target)
    result = image.new_like()
    values = image.normalized()
    if src != dst:
        count = image.color.color_channels
        curve = srgb_to_linear if dst == "linear" else linear_to_srgb
        values[..., :count] = curve(values[..., :count])
    result.store_normalized(0, values)
    return result


__all__ = ["convert_colorspace", "linear_to_srgb", "srgb_to_linear"]
