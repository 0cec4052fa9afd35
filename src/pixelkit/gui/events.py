"""Display events translated into image-pixel coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.geometry import Point, Size, SizeLike
from ..errors import DimensionError


class EventKind(str, Enum):
    POINTER = "pointer"
    BUTTON = "button"
    KEY = "key"
    RESIZE = "resize"
    CLOSE = "close"


def map_to_image(x: float, y: float, view_size: SizeLike, image_size: SizeLike) -> Point:
    """Scale widget coordinates into image pixels, clamped to the image.

    Parameters
    ----------
    x, y:
        Position reported by the windowing layer, in view pixels.
    view_size:
        Current size of the surface presenting the image.
    image_size:
        Size of the displayed image.
    """

    view = Size(*view_size)
    image = Size(*image_size)
    if view.width <= 0 or view.height <= 0:
        raise DimensionError(f"View size must be positive, got {view.width}x{view.height}")

    px = math.floor(x * image.width / view.width)
    py = math.floor(y * image.height / view.height)
    return Point(
        max(0, min(image.width - 1, px)),
        max(0, min(image.height - 1, py)),
    )


@dataclass(frozen=True)
class DisplayEvent:
    """Input event handed to application code by the display layer.

    Positions are already expressed in image pixels.
    """

    kind: EventKind
    position: Optional[Point] = None
    button: Optional[int] = None
    key: Optional[int] = None
    pressed: bool = False
    size: Optional[Size] = None

    @classmethod
    def pointer(
        cls,
        x: float,
        y: float,
        view_size: SizeLike,
        image_size: SizeLike,
    ) -> "DisplayEvent":
        return cls(EventKind.POINTER, position=map_to_image(x, y, view_size, image_size))

    @classmethod
    def button_event(
        cls,
        button: int,
        pressed: bool,
        x: float,
        y: float,
        view_size: SizeLike,
        image_size: SizeLike,
    ) -> "DisplayEvent":
        return cls(
            EventKind.BUTTON,
            position=map_to_image(x, y, view_size, image_size),
            button=button,
            pressed=pressed,
        )

    @classmethod
    def key_event(cls, key: int, pressed: bool) -> "DisplayEvent":
        return cls(EventKind.KEY, key=key, pressed=pressed)

    @classmethod
    def resized(cls, size: SizeLike) -> "DisplayEvent":
        return cls(EventKind.RESIZE, size=Size(*size))

    @classmethod
    def closed(cls) -> "DisplayEvent":
        return cls(EventKind.CLOSE)


__all__ = ["DisplayEvent", "EventKind", "map_to_image"]
