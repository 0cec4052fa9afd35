"""Exception hierarchy shared by the pixelkit engine and its collaborators."""

from __future__ import annotations

from typing import Mapping


class PixelkitError(Exception):
    """Base class for every error raised by pixelkit."""


class BoundsError(PixelkitError, IndexError):
    """Raised when a coordinate or region falls outside an image."""


class DimensionError(PixelkitError, ValueError):
    """Raised when image shapes, channel counts or input counts do not match."""


class AllocationError(PixelkitError, MemoryError):
    """Raised when a pixel buffer of the requested size cannot be allocated."""


class ImageIOError(PixelkitError, OSError):
    """Raised when an image cannot be decoded, encoded or inspected."""


class ColorspaceError(PixelkitError, ValueError):
    """Raised for unknown or unsupported named colorspaces."""


class FilterEvaluationError(PixelkitError):
    """Raised after a concurrent evaluation joined with failed partitions.

    ``failures`` maps each failed ``(start, stop)`` row range to the exception
    it raised.  Rows written by the partitions that succeeded are left in
    place.
    """

    def __init__(
        self,
        message: str,
        failures: Mapping[tuple[int, int], BaseException] | None = None,
    ) -> None:
        super().__init__(message)
        self.failures: dict[tuple[int, int], BaseException] = dict(failures or {})


__all__ = [
    "AllocationError",
    "BoundsError",
    "ColorspaceError",
    "DimensionError",
    "FilterEvaluationError",
    "ImageIOError",
    "PixelkitError",
]
