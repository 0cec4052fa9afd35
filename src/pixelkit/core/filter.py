"""Filter contract: a pointwise primitive plus derived bulk evaluation.

A :class:`Filter` only has to implement :meth:`Filter.compute_at`, which
computes one destination pixel from one or more source images.  Whole-image
evaluation (:meth:`Filter.eval`) and row-range evaluation
(:meth:`Filter.eval_rows`, used by the concurrent executor) are derived from
it.  Filters with a natural bulk implementation override ``eval_rows`` (or
``eval``) but share their arithmetic with ``compute_at`` so every path
produces the same pixels.
"""

from __future__ import annotations

import threading
import zlib
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Sequence

import numpy as np

from ..errors import DimensionError
from .geometry import Point, Size
from .types import F32, ColorModel

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .image import Image


class Filter(ABC):
    """Base class for every image transformation."""

    elementwise: bool = False
    """``True`` when the output at P depends only on the first input at P."""

    input_count: Optional[int] = 1
    """Number of source images expected, ``None`` for "one or more"."""

    @abstractmethod
    def compute_at(self, point: Point, inputs: Sequence["Image"], px: np.ndarray) -> None:
        """Write the normalized output channels for *point* into *px*.

        ``px`` always has exactly as many entries as the destination color
        model has channels.  Implementations must not depend on evaluation
        order so points can be computed concurrently.
        """

    def output_size(self, size: Size) -> Size:
        """Return the natural destination size for a first input of *size*."""

        return size

    def output_color(self, color: ColorModel) -> ColorModel:
        """Return the destination color model produced from *color* inputs."""

        return color

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        """Validate *inputs* and *output* before any pixel is written."""

        if not inputs:
            raise DimensionError(f"{self!r} needs at least one input image")
        if self.input_count is not None and len(inputs) != self.input_count:
            raise DimensionError(
                f"{self!r} expects {self.input_count} input image(s), got {len(inputs)}"
            )

    def eval_rows(
        self,
        inputs: Sequence["Image"],
        output: "Image",
        start: int,
        stop: int,
    ) -> None:
        """Evaluate the destination rows ``[start, stop)``.

        Only rows inside the range are written, which is what lets the
        concurrent executor hand disjoint ranges to separate workers.
        """

        width = output.width
        px = np.empty(output.channels, dtype=np.float64)
        row = np.empty((1, width, output.channels), dtype=np.float64)
        for y in range(start, stop):
            for x in range(width):
                self.compute_at(Point(x, y), inputs, px)
                row[0, x] = px
            output.store_normalized(y, row)

    def eval(self, inputs: Sequence["Image"], output: "Image") -> None:
        """Evaluate the filter over every pixel of *output*."""

        sources = list(inputs)
        self.check(sources, output)
        self.eval_rows(sources, output, 0, output.height)

    def and_then(
        self,
        other: "Filter",
        intermediate: Optional["IntermediateFactory"] = None,
    ) -> "AndThen":
        """Return a pipeline running this filter, then *other* on its result."""

        return AndThen(self, other, intermediate)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


IntermediateFactory = Callable[[Sequence["Image"], "Image"], "Image"]
"""Allocates the buffer between two pipeline stages from ``(inputs, output)``."""


def like_output(inputs: Sequence["Image"], output: "Image") -> "Image":
    """Intermediate matching the destination's size, sample type and color."""

    return output.new_like()


def like_input(inputs: Sequence["Image"], output: "Image") -> "Image":
    """Intermediate matching the first input's sample type and color."""

    return output.new_like_with(inputs[0].sample_type, inputs[0].color)


def float_like_output(inputs: Sequence["Image"], output: "Image") -> "Image":
    """Destination-shaped intermediate stored as 32-bit floats."""

    return output.new_like_with(sample_type=F32)


class AndThen(Filter):
    """Two-stage pipeline: ``first`` into an intermediate, then ``second``.

    The intermediate is allocated per evaluation by ``intermediate`` (the
    destination's shape and tags by default) and is the sole input of the
    second stage.  Pipelines nest, so ``a.and_then(b).and_then(c)`` and
    ``a.and_then(b.and_then(c))`` run the same stages in the same order.
    """

    input_count = None

    def __init__(
        self,
        first: Filter,
        second: Filter,
        intermediate: Optional[IntermediateFactory] = None,
    ) -> None:
        self.first = first
        self.second = second
        self.intermediate = intermediate if intermediate is not None else like_output
        self._lock = threading.Lock()
        self._materialised: Optional[tuple[tuple, "Image"]] = None

    def stages(self) -> Iterator[Filter]:
        """Yield the non-pipeline filters in evaluation order."""

        for stage in (self.first, self.second):
            if isinstance(stage, AndThen):
                yield from stage.stages()
            else:
                yield stage

    def _run_first(self, inputs: Sequence["Image"], output: "Image") -> "Image":
        buffer = self.intermediate(inputs, output)
        self.first.eval(inputs, buffer)
        return buffer

    def output_size(self, size: Size) -> Size:
        return self.second.output_size(self.first.output_size(size))

    def output_color(self, color: ColorModel) -> ColorModel:
        return self.second.output_color(self.first.output_color(color))

    def _first_stage(self, inputs: Sequence["Image"]) -> "Image":
        """Return the first stage evaluated over *inputs* for per-pixel access.

        The intermediate is shaped from the pipeline's natural destination
        and reused until an input changes identity or content.
        """

        key = tuple(
            (id(image), image.size, image.sample_type, image.color, zlib.crc32(image.data))
            for image in inputs
        )
        with self._lock:
            cached = self._materialised
            if cached is not None and cached[0] == key:
                return cached[1]
            source = inputs[0]
            template = type(source)(
                self.output_size(source.size),
                source.sample_type,
                self.output_color(source.color),
            )
            buffer = self._run_first(inputs, template)
            self._materialised = (key, buffer)
            return buffer

    def compute_at(self, point: Point, inputs: Sequence["Image"], px: np.ndarray) -> None:
        # the second stage may read any pixel of the first
        self.second.compute_at(point, [self._first_stage(inputs)], px)

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        self.first.check(inputs, self.intermediate(inputs, output))

    def eval_rows(
        self,
        inputs: Sequence["Image"],
        output: "Image",
        start: int,
        stop: int,
    ) -> None:
        buffer = self._run_first(inputs, output)
        self.second.check([buffer], output)
        self.second.eval_rows([buffer], output, start, stop)

    def eval(self, inputs: Sequence["Image"], output: "Image") -> None:
        sources = list(inputs)
        buffer = self._run_first(sources, output)
        self.second.eval([buffer], output)

    def __repr__(self) -> str:
        return f"{self.first!r}.and_then({self.second!r})"


class ElementwiseFilter(Filter):
    """Filter whose output pixel depends only on the input pixel at the same point.

    Sub-classes implement :meth:`map_pixels` over ``(..., channels)`` arrays;
    the per-pixel and row-block paths both go through it.
    """

    elementwise = True

    @abstractmethod
    def map_pixels(self, values: np.ndarray, color: ColorModel) -> np.ndarray:
        """Return the normalized output for normalized input *values* in *color*."""

    def check(self, inputs: Sequence["Image"], output: "Image") -> None:
        super().check(inputs, output)
        source = inputs[0]
        if source.size != output.size:
            raise DimensionError(
                f"{self!r} needs equal sizes, got {source.width}x{source.height} "
                f"input and {output.width}x{output.height} output"
            )
        expected = self.output_color(source.color)
        if expected.channels != output.channels:
            raise DimensionError(
                f"{self!r} produces {expected.channels} channel(s) from {source.color}, "
                f"destination is {output.color}"
            )

    def compute_at(self, point: Point, inputs: Sequence["Image"], px: np.ndarray) -> None:
        source = inputs[0]
        values = source.get_pixel(point)
        px[:] = self.map_pixels(values[None, :], source.color)[0]

    def eval_rows(
        self,
        inputs: Sequence["Image"],
        output: "Image",
        start: int,
        stop: int,
    ) -> None:
        source = inputs[0]
        output.store_normalized(start, self.map_pixels(source.normalized(start, stop), source.color))


__all__ = [
    "AndThen",
    "ElementwiseFilter",
    "Filter",
    "IntermediateFactory",
    "float_like_output",
    "like_input",
    "like_output",
]
