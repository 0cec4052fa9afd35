"""Pillow-backed image decoding, encoding and metadata access.

The engine only ever sees :class:`~pixelkit.core.image.Image` values; this
module translates between them and Pillow images.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

import numpy as np
from PIL import Image as PILImage
from PIL import PngImagePlugin, UnidentifiedImageError

from ..core.filters.convert import Convert
from ..core.image import Image
from ..core.types import F32, GRAY, RGB, RGBA, U8, U16, XYZ, ColorModel, SampleType
from ..errors import ImageIOError
from ..utils.logging import logger

MetadataValue = Union[str, int, float]

_MODE_LAYOUT: dict[str, tuple[SampleType, ColorModel]] = {
    "L": (U8, GRAY),
    "RGB": (U8, RGB),
    "RGBA": (U8, RGBA),
    "I;16": (U16, GRAY),
    "F": (F32, GRAY),
}
_SIXTEEN_BIT_MODES = ("I;16", "I;16B", "I;16L", "I;16N", "I")
_SIXTEEN_BIT_SUFFIXES = (".png", ".tif", ".tiff")
_JPEG_SUFFIXES = (".jpg", ".jpeg")


def _pixels_from_pil(pil_image: PILImage.Image) -> tuple[np.ndarray, ColorModel]:
    """Return ``(array, color)`` for *pil_image*, normalising exotic modes."""

    mode = pil_image.mode
    if mode in _SIXTEEN_BIT_MODES and mode != "I;16":
        array = np.clip(np.asarray(pil_image, dtype=np.int64), 0, 65535).astype(np.uint16)
        return array, GRAY
    if mode not in _MODE_LAYOUT:
        has_alpha = "A" in mode or "transparency" in pil_image.info
        pil_image = pil_image.convert("RGBA" if has_alpha else "RGB")
        mode = pil_image.mode
    sample_type, color = _MODE_LAYOUT[mode]
    return np.asarray(pil_image, dtype=sample_type.dtype), color


def from_pil(pil_image: PILImage.Image) -> Image:
    """Return a new :class:`Image` holding the pixels of *pil_image*."""

    array, color = _pixels_from_pil(pil_image)
    return Image.from_array(array, color)


def to_pil(image: Image, *, allow_16bit: bool = True) -> PILImage.Image:
    """Return a Pillow image for *image*.

    XYZ pixels are converted to RGB first.  Samples are quantised to 8 bits,
    except 16-bit gray which is kept as ``I;16`` when *allow_16bit* is set.
    """

    if image.color == XYZ:
        rgb = image.new_like_with(color=RGB)
        Convert(RGB).eval([image], rgb)
        image = rgb

    if image.color == GRAY and image.sample_type == U16 and allow_16bit:
        return PILImage.fromarray(np.ascontiguousarray(image.pixels()[:, :, 0]))

    eight_bit = image if image.sample_type == U8 else image.convert(U8)
    pixels = eight_bit.pixels()
    if eight_bit.color == GRAY:
        pixels = pixels[:, :, 0]
    return PILImage.fromarray(np.ascontiguousarray(pixels))


def open_image(
    path: Union[str, Path],
    sample_type: Optional[SampleType] = None,
    color: Optional[ColorModel] = None,
) -> Image:
    """Decode the image at *path*.

    Args:
        path: Image file to read.
        sample_type: Optional storage type for the returned image.
        color: Optional color model for the returned image.

    Raises:
        ImageIOError: If the file is missing or cannot be decoded.
    """

    file_path = Path(path)
    if not file_path.is_file():
        raise ImageIOError(f"Image file not found: {file_path}")

    try:
        with PILImage.open(file_path) as handle:
            handle.load()
            image = from_pil(handle)
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageIOError(f"Unable to decode image: {file_path}") from exc

    logger.debug("Decoded %s as %r", file_path, image)

    if sample_type is not None and sample_type != image.sample_type:
        image = image.convert(sample_type)
    if color is not None and color != image.color:
        converted = image.new_like_with(color=color)
        Convert(color).eval([image], converted)
        image = converted
    return image


def _png_info(metadata: Mapping[str, Any]) -> PngImagePlugin.PngInfo:
    info = PngImagePlugin.PngInfo()
    for key, value in metadata.items():
        info.add_text(str(key), str(value))
    return info


def save_image(
    image: Image,
    path: Union[str, Path],
    metadata: Optional[Mapping[str, MetadataValue]] = None,
) -> Path:
    """Encode *image* to *path*, choosing the format from the extension.

    ``metadata`` is written as PNG text chunks and is only accepted for
    ``.png`` outputs.

    Raises:
        ImageIOError: If encoding fails or metadata targets a non-PNG file.
    """

    file_path = Path(path)
    suffix = file_path.suffix.lower()
    pil_image = to_pil(image, allow_16bit=suffix in _SIXTEEN_BIT_SUFFIXES)
    if suffix in _JPEG_SUFFIXES and pil_image.mode == "RGBA":
        pil_image = pil_image.convert("RGB")

    options: dict[str, Any] = {}
    if metadata:
        if suffix != ".png":
            raise ImageIOError(f"Metadata can only be written to PNG files, not {file_path.name}")
        options["pnginfo"] = _png_info(metadata)

    try:
        pil_image.save(file_path, **options)
    except (OSError, ValueError, KeyError) as exc:
        raise ImageIOError(f"Unable to encode image: {file_path}") from exc

    logger.debug("Encoded %r to %s", image, file_path)
    return file_path


def read_metadata(path: Union[str, Path]) -> dict[str, MetadataValue]:
    """Return the scalar metadata attributes stored in the file at *path*."""

    file_path = Path(path)
    if not file_path.is_file():
        raise ImageIOError(f"Image file not found: {file_path}")

    try:
        with PILImage.open(file_path) as handle:
            handle.load()
            entries: dict[str, Any] = dict(handle.info)
            entries.update(getattr(handle, "text", {}) or {})
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageIOError(f"Unable to read metadata: {file_path}") from exc

    attributes: dict[str, MetadataValue] = {}
    for key, value in entries.items():
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            attributes[str(key)] = value
    return attributes


__all__ = ["from_pil", "open_image", "read_metadata", "save_image", "to_pil"]
