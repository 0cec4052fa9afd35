"""Image I/O collaborator: file decoding, encoding and metadata."""

from __future__ import annotations

from .colorspace import convert_colorspace
from .image_io import from_pil, open_image, read_metadata, save_image, to_pil

__all__ = [
    "convert_colorspace",
    "from_pil",
    "open_image",
    "read_metadata",
    "save_image",
    "to_pil",
]
