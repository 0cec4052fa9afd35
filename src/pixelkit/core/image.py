"""Channel-packed pixel buffer generic over sample type and color model."""

from __future__ import annotations

import logging
import operator
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

import numpy as np

from ..config import get_settings
from ..errors import AllocationError, BoundsError, DimensionError
from .executor import AsyncMode, apply_async
from .geometry import Point, PointLike, Region, Size, SizeLike, as_size
from .hash import Hash, compute_hash
from .types import F32, RGB, ColorModel, SampleType, default_color_for_channels, sample_type_for_dtype

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from concurrent.futures import Executor

    from .executor import EvaluationPool
    from .filter import Filter

_LOGGER = logging.getLogger(__name__)


def _allocate(size: Size, sample_type: SampleType, color: ColorModel) -> np.ndarray:
    """Return a zero-filled flat buffer for *size* pixels."""

    limit = get_settings().max_image_pixels
    if size.area > limit:
        raise AllocationError(
            f"Refusing to allocate {size.width}x{size.height} image "
            f"({size.area} pixels exceeds the limit of {limit})"
        )
    try:
        return np.zeros(size.area * color.channels, dtype=sample_type.dtype)
    except MemoryError as exc:
        raise AllocationError(
            f"Unable to allocate {size.width}x{size.height} {color} {sample_type} image"
        ) from exc


class Image:
    """Rectangular pixel store.

    ``data`` is a flat array of ``width * height * channels`` samples laid out
    row-major; the channel block of pixel ``(x, y)`` starts at
    ``(y * width + x) * channels``.  Dimensions, sample type and color model
    never change after construction: resizing or converting always produces a
    new :class:`Image`.

    Single-pixel accessors work in normalized floating point (see
    :meth:`SampleType.to_normalized`).  Coordinates outside the image raise
    :class:`~pixelkit.errors.BoundsError`; they are never clamped.
    """

    __slots__ = ("_width", "_height", "_sample_type", "_color", "_data")

    def __init__(
        self,
        size: SizeLike,
        sample_type: SampleType = F32,
        color: ColorModel = RGB,
        data: Optional[np.ndarray] = None,
    ) -> None:
        resolved = as_size(size)
        self._width = resolved.width
        self._height = resolved.height
        self._sample_type = sample_type
        self._color = color
        if data is None:
            self._data = _allocate(resolved, sample_type, color)
            return

        buffer = np.ascontiguousarray(data, dtype=sample_type.dtype).reshape(-1)
        expected = resolved.area * color.channels
        if buffer.size != expected:
            raise DimensionError(
                f"Pixel buffer holds {buffer.size} samples, expected {expected} "
                f"for a {resolved.width}x{resolved.height} {color} image"
            )
        self._data = buffer

    # ------------------------------------------------------------------
    # Construction
    @classmethod
    def new(
        cls,
        size: SizeLike,
        sample_type: SampleType = F32,
        color: ColorModel = RGB,
    ) -> "Image":
        """Allocate a zero-filled image."""

        return cls(size, sample_type, color)

    @classmethod
    def from_array(cls, array: np.ndarray, color: Optional[ColorModel] = None) -> "Image":
        """Return an image holding a copy of an ``(h, w)`` or ``(h, w, c)`` array."""

        values = np.asarray(array)
        if values.ndim == 2:
            values = values[:, :, None]
        if values.ndim != 3:
            raise DimensionError(f"Expected a 2-D or 3-D array, got shape {values.shape}")
        height, width, channels = values.shape
        model = color if color is not None else default_color_for_channels(channels)
        if model.channels != channels:
            raise DimensionError(f"{model} needs {model.channels} channels, array has {channels}")
        sample_type = sample_type_for_dtype(values.dtype)
        return cls((width, height), sample_type, model, values.copy())

    def new_like(self) -> "Image":
        """Return an empty image with the same dimensions, sample type and color."""

        return Image(self.size, self._sample_type, self._color)

    def new_like_with(
        self,
        sample_type: Optional[SampleType] = None,
        color: Optional[ColorModel] = None,
    ) -> "Image":
        """Return an empty image with the same dimensions and new tags."""

        return Image(
            self.size,
            sample_type if sample_type is not None else self._sample_type,
            color if color is not None else self._color,
        )

    def copy(self) -> "Image":
        return Image(self.size, self._sample_type, self._color, self._data.copy())

    def convert(self, sample_type: SampleType) -> "Image":
        """Return a copy of this image stored as *sample_type*."""

        if sample_type == self._sample_type:
            return self.copy()
        converted = sample_type.from_normalized(self._sample_type.to_normalized(self._data))
        return Image(self.size, sample_type, self._color, converted)

    # ------------------------------------------------------------------
    # Properties
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Size:
        return Size(self._width, self._height)

    @property
    def sample_type(self) -> SampleType:
        return self._sample_type

    @property
    def color(self) -> ColorModel:
        return self._color

    @property
    def channels(self) -> int:
        return self._color.channels

    @property
    def data(self) -> np.ndarray:
        return self._data

    def region(self) -> Region:
        """Return the region covering the whole image."""

        return Region(Point(0, 0), self.size)

    # ------------------------------------------------------------------
    # Addressing
    def in_bounds(self, point: PointLike) -> bool:
        x, y = point
        return 0 <= x < self._width and 0 <= y < self._height

    def _check_point(self, point: PointLike) -> tuple[int, int]:
        try:
            x, y = operator.index(point[0]), operator.index(point[1])
        except TypeError:
            raise BoundsError(f"Pixel coordinates must be integers, got {tuple(point)!r}") from None
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise BoundsError(f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} image")
        return x, y

    def _check_channel(self, channel: int) -> int:
        if not 0 <= channel < self.channels:
            raise BoundsError(f"Channel {channel} is outside the {self._color} color model")
        return channel

    def index(self, point: PointLike) -> int:
        """Return the flat index of the first channel of *point*."""

        x, y = self._check_point(point)
        return (y * self._width + x) * self.channels

    def get_pixel(self, point: PointLike) -> np.ndarray:
        """Return the normalized channel values of *point* as a new array."""

        start = self.index(point)
        return self._sample_type.to_normalized(self._data[start : start + self.channels])

    def get_f(self, point: PointLike, channel: int) -> float:
        start = self.index(point)
        value = self._data[start + self._check_channel(channel)]
        return float(self._sample_type.to_normalized(value))

    def set_f(self, point: PointLike, channel: int, value: float) -> None:
        """Store one normalized channel value, converting to the native type."""

        start = self.index(point)
        self._data[start + self._check_channel(channel)] = self._sample_type.from_normalized(value)

    def set_pixel(self, point: PointLike, values: Sequence[float]) -> None:
        """Store every channel of *point* from normalized *values*."""

        start = self.index(point)
        samples = np.asarray(values, dtype=np.float64).reshape(-1)
        if samples.size != self.channels:
            raise DimensionError(f"{self._color} pixels have {self.channels} channels, got {samples.size}")
        self._data[start : start + self.channels] = self._sample_type.from_normalized(samples)

    # ------------------------------------------------------------------
    # Row access
    def pixels(self) -> np.ndarray:
        """Return an ``(h, w, c)`` view over the buffer."""

        return self._data.reshape(self._height, self._width, self.channels)

    def rows(self, start: int, stop: int) -> np.ndarray:
        """Return a writable view of the rows ``[start, stop)``."""

        if not 0 <= start <= stop <= self._height:
            raise BoundsError(f"Rows [{start}, {stop}) are outside the image height {self._height}")
        return self.pixels()[start:stop]

    def normalized(self, start: int = 0, stop: Optional[int] = None) -> np.ndarray:
        """Return a normalized ``float64`` copy of the rows ``[start, stop)``."""

        end = self._height if stop is None else stop
        return np.array(self._sample_type.to_normalized(self.rows(start, end)), dtype=np.float64)

    def store_normalized(self, start: int, values: np.ndarray) -> None:
        """Write normalized ``(rows, w, c)`` *values* starting at row *start*."""

        block = np.asarray(values)
        target = self.rows(start, start + block.shape[0])
        if block.shape != target.shape:
            raise DimensionError(f"Row block shape {block.shape} does not match {target.shape}")
        target[...] = self._sample_type.from_normalized(block)

    def to_array(self) -> np.ndarray:
        """Return a copy of the pixels as an ``(h, w, c)`` array."""

        return self.pixels().copy()

    # ------------------------------------------------------------------
    # Filters
    def apply(self, flt: "Filter", inputs: Iterable["Image"]) -> "Image":
        """Evaluate *flt* synchronously with this image as the destination."""

        flt.eval(list(inputs), self)
        return self

    async def apply_async(
        self,
        mode: AsyncMode | str | None,
        flt: "Filter",
        inputs: Iterable["Image"],
        *,
        executor: "EvaluationPool | Executor | None" = None,
    ) -> "Image":
        """Evaluate *flt* into this image one row partition at a time.

        ``mode=None`` uses the configured default partitioning.
        """

        return await apply_async(mode, flt, inputs, self, executor=executor)

    def run_in_place(self, flt: "Filter") -> "Image":
        """Evaluate *flt* with this image as both its sole input and destination.

        Elementwise filters read and write each row block directly.  Any
        other filter reads from a snapshot taken before evaluation starts.
        """

        if getattr(flt, "elementwise", False):
            flt.eval([self], self)
        else:
            _LOGGER.debug("Snapshotting %s for in-place %r", self, flt)
            flt.eval([self.copy()], self)
        return self

    def hash(self) -> Hash:
        """Return the perceptual fingerprint of the current pixels."""

        return compute_hash(self)

    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return (
            self.size == other.size
            and self._sample_type == other._sample_type
            and self._color == other._color
            and np.array_equal(self._data, other._data)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Image({self._width}x{self._height}, {self._sample_type}, {self._color})"


__all__ = ["Image"]
