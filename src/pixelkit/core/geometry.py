"""Integer geometry used to address pixels and sub-areas of an image.

Coordinates are row-major with the origin at the top-left corner: ``x`` grows
to the right and ``y`` grows downwards.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple, Union

from ..errors import DimensionError


class Point(NamedTuple):
    """Pixel coordinate."""

    x: int
    y: int


class Size(NamedTuple):
    """Image or region dimensions in pixels."""

    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def __mul__(self, factor: object) -> "Size":  # type: ignore[override]
        if not isinstance(factor, int):
            return NotImplemented
        return Size(self.width * factor, self.height * factor)

    __rmul__ = __mul__

    def transposed(self) -> "Size":
        """Return the size with width and height swapped."""

        return Size(self.height, self.width)


PointLike = Union[Point, Tuple[int, int]]
SizeLike = Union[Size, Tuple[int, int]]


def as_point(value: PointLike) -> Point:
    x, y = value
    return Point(int(x), int(y))


def as_size(value: SizeLike) -> Size:
    """Return *value* as a :class:`Size`, rejecting empty dimensions."""

    width, height = value
    size = Size(int(width), int(height))
    if size.width <= 0 or size.height <= 0:
        raise DimensionError(f"Image dimensions must be positive, got {size.width}x{size.height}")
    return size


class Region(NamedTuple):
    """Axis-aligned rectangle: an origin point plus a size."""

    origin: Point
    size: Size

    @classmethod
    def new(cls, origin: PointLike, size: SizeLike) -> "Region":
        return cls(as_point(origin), as_size(size))

    @property
    def x(self) -> int:
        return self.origin.x

    @property
    def y(self) -> int:
        return self.origin.y

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height

    @property
    def right(self) -> int:
        """Exclusive right edge."""

        return self.origin.x + self.size.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""

        return self.origin.y + self.size.height

    @property
    def rows(self) -> range:
        return range(self.origin.y, self.bottom)

    @property
    def columns(self) -> range:
        return range(self.origin.x, self.right)

    def fits_within(self, bounds: SizeLike) -> bool:
        """Return ``True`` when the whole region lies inside *bounds*."""

        width, height = bounds
        return (
            self.origin.x >= 0
            and self.origin.y >= 0
            and self.right <= width
            and self.bottom <= height
        )

    def contains(self, point: PointLike) -> bool:
        x, y = point
        return self.origin.x <= x < self.right and self.origin.y <= y < self.bottom


__all__ = ["Point", "PointLike", "Region", "Size", "SizeLike", "as_point", "as_size"]
