"""Conversion of engine images into Qt textures for on-screen display."""

from __future__ import annotations

import numpy as np
from PySide6.QtGui import QImage

from ..core.filters.convert import Convert
from ..core.image import Image
from ..core.types import RGB, U8, XYZ
from ..errors import DimensionError

_FORMATS = {
    1: QImage.Format.Format_Grayscale8,
    3: QImage.Format.Format_RGB888,
    4: QImage.Format.Format_RGBA8888,
}


def to_qimage(image: Image) -> QImage:
    """Return an 8-bit :class:`QImage` copy of *image*."""

    if image.color == XYZ:
        rgb = image.new_like_with(color=RGB)
        Convert(RGB).eval([image], rgb)
        image = rgb
    eight_bit = image if image.sample_type == U8 else image.convert(U8)

    pixels = np.ascontiguousarray(eight_bit.pixels())
    height, width, channels = pixels.shape
    # ``QImage`` does not own foreign buffers; ``copy`` detaches it from the
    # temporary bytes object before that goes out of scope.
    qimage = QImage(pixels.tobytes(), width, height, width * channels, _FORMATS[channels])
    return qimage.copy()


class ImageTexture:
    """Displayable texture owned by a single window.

    The texture keeps the latest image and rebuilds its ``QImage`` lazily
    after :meth:`update` marks it dirty.
    """

    def __init__(self, image: Image, *, allow_resize: bool = False) -> None:
        self._image = image
        self._allow_resize = allow_resize
        self._texture: QImage | None = None
        self._dirty = True

    @property
    def image(self) -> Image:
        return self._image

    @property
    def dirty(self) -> bool:
        return self._dirty

    def update(self, image: Image) -> None:
        """Replace the displayed image; the texture is rebuilt on next access."""

        if not self._allow_resize and image.size != self._image.size:
            raise DimensionError(
                f"Texture is {self._image.width}x{self._image.height}, "
                f"cannot show a {image.width}x{image.height} image"
            )
        self._image = image
        self._dirty = True

    def texture(self) -> QImage:
        if self._dirty or self._texture is None:
            self._texture = to_qimage(self._image)
            self._dirty = False
        return self._texture


__all__ = ["ImageTexture", "to_qimage"]
