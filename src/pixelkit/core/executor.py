"""Row-parallel filter evaluation.

Architecture:
    apply_async -> AsyncMode partitions -> ThreadPoolExecutor(N) -> Filter.eval_rows

The destination rows are split into disjoint ``(start, stop)`` ranges and
every range is evaluated by its own unit of work.  Units only ever write
their own rows and only read the (shared, read-only) source images, so they
need no locking.  The call returns once every unit has finished; failures
are collected after that join and reported together.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from ..config import get_settings
from ..errors import FilterEvaluationError
from .filter import AndThen, Filter

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .image import Image

_LOGGER = logging.getLogger(__name__)

Partition = tuple[int, int]


class AsyncMode(str, Enum):
    """How the destination rows are split into units of work."""

    ROW = "row"
    """One partition per row."""

    BLOCK = "block"
    """One contiguous band of rows per worker."""

    def partitions(self, height: int, workers: int = 1) -> list[Partition]:
        """Return disjoint, ordered row ranges covering ``[0, height)``."""

        if height <= 0:
            return []
        if self is AsyncMode.ROW:
            return [(y, y + 1) for y in range(height)]
        count = max(1, min(workers, height))
        bounds = [height * index // count for index in range(count + 1)]
        return [(bounds[index], bounds[index + 1]) for index in range(count)]


class EvaluationPool:
    """Owns the thread pool that runs evaluation partitions."""

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers or get_settings().max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="pixelkit-eval",
        )
        _LOGGER.debug("Created evaluation pool with %d workers", self.max_workers)

    @property
    def executor(self) -> ThreadPoolExecutor:
        return self._executor

    def shutdown(self) -> None:
        """Shut down the thread pool, waiting for queued partitions."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "EvaluationPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


_DEFAULT_POOL: Optional[EvaluationPool] = None
_POOL_LOCK = threading.Lock()


def get_default_pool() -> EvaluationPool:
    """Return the lazily-created pool shared by calls without an executor."""

    global _DEFAULT_POOL
    with _POOL_LOCK:
        if _DEFAULT_POOL is None:
            _DEFAULT_POOL = EvaluationPool()
        return _DEFAULT_POOL


def shutdown_default_pool() -> None:
    """Shut down the shared pool; the next evaluation creates a fresh one."""

    global _DEFAULT_POOL
    with _POOL_LOCK:
        pool, _DEFAULT_POOL = _DEFAULT_POOL, None
    if pool is not None:
        pool.shutdown()


def _resolve_mode(mode: "AsyncMode | str | None") -> AsyncMode:
    if mode is None:
        return AsyncMode(get_settings().default_mode)
    return AsyncMode(mode)


def _resolve_executor(executor: "EvaluationPool | Executor | None") -> tuple[Executor, int]:
    if executor is None:
        executor = get_default_pool()
    if isinstance(executor, EvaluationPool):
        return executor.executor, executor.max_workers
    return executor, get_settings().max_workers


def _raise_failures(
    flt: Filter,
    partitions: Sequence[Partition],
    outcomes: Iterable[Optional[BaseException]],
) -> None:
    failures = {
        partition: outcome
        for partition, outcome in zip(partitions, outcomes)
        if outcome is not None
    }
    if not failures:
        return
    _LOGGER.warning(
        "%d of %d partition(s) failed while evaluating %r",
        len(failures),
        len(partitions),
        flt,
    )
    first = next(iter(failures.values()))
    raise FilterEvaluationError(
        f"{len(failures)} partition(s) failed while evaluating {flt!r}: {first}",
        failures,
    ) from first


async def apply_async(
    mode: AsyncMode | str | None,
    flt: Filter,
    inputs: Iterable["Image"],
    output: "Image",
    *,
    executor: "EvaluationPool | Executor | None" = None,
) -> "Image":
    """Evaluate *flt* into *output* with one concurrent unit per row partition.

    Pipelines run stage by stage: the first stage is joined into its
    intermediate buffer before the second stage is scheduled.

    Raises:
        DimensionError, BoundsError: If validation fails before scheduling.
        FilterEvaluationError: If any partition failed, once all have joined.
    """

    mode = _resolve_mode(mode)
    sources = list(inputs)

    if isinstance(flt, AndThen):
        buffer = flt.intermediate(sources, output)
        await apply_async(mode, flt.first, sources, buffer, executor=executor)
        await apply_async(mode, flt.second, [buffer], output, executor=executor)
        return output

    flt.check(sources, output)
    pool, workers = _resolve_executor(executor)
    partitions = mode.partitions(output.height, workers)
    _LOGGER.debug("Scheduling %d %s partition(s) for %r", len(partitions), mode.value, flt)

    loop = asyncio.get_running_loop()
    futures = [
        loop.run_in_executor(pool, flt.eval_rows, sources, output, start, stop)
        for start, stop in partitions
    ]
    results = await asyncio.gather(*futures, return_exceptions=True)
    _raise_failures(
        flt,
        partitions,
        (result if isinstance(result, BaseException) else None for result in results),
    )
    return output


def eval_concurrent(
    mode: AsyncMode | str | None,
    flt: Filter,
    inputs: Iterable["Image"],
    output: "Image",
    *,
    executor: "EvaluationPool | Executor | None" = None,
) -> "Image":
    """Blocking counterpart of :func:`apply_async` for callers without a loop."""

    mode = _resolve_mode(mode)
    sources = list(inputs)

    if isinstance(flt, AndThen):
        buffer = flt.intermediate(sources, output)
        eval_concurrent(mode, flt.first, sources, buffer, executor=executor)
        eval_concurrent(mode, flt.second, [buffer], output, executor=executor)
        return output

    flt.check(sources, output)
    pool, workers = _resolve_executor(executor)
    partitions = mode.partitions(output.height, workers)
    _LOGGER.debug("Submitting %d %s partition(s) for %r", len(partitions), mode.value, flt)

    futures: list[Future[None]] = [
        pool.submit(flt.eval_rows, sources, output, start, stop) for start, stop in partitions
    ]
    wait(futures)
    _raise_failures(flt, partitions, (future.exception() for future in futures))
    return output


__all__ = [
    "AsyncMode",
    "EvaluationPool",
    "Partition",
    "apply_async",
    "eval_concurrent",
    "get_default_pool",
    "shutdown_default_pool",
]
