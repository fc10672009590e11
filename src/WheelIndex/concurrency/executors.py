"""Executor factory and batch helpers used for bounded I/O fan-out."""

from __future__ import annotations

from concurrent import futures
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

Executor = futures.Executor

T = TypeVar("T")
R = TypeVar("R")


def create_executor(workers: int, name: str = "wheelindex-io") -> Tuple[Optional[Executor], bool]:
    """
    Return a thread pool suitable for IO-bound work.

    Args:
        workers: Desired concurrency level.
        name: Thread name prefix, visible in thread dumps and log records.

    Returns:
        Tuple of (executor, needs_shutdown). ``(None, False)`` means the caller
        should run the work inline. Caller is responsible for shutting down the
        returned executor when ``needs_shutdown`` is ``True``.
    """
    if workers <= 1:
        return None, False
    return futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix=name), True


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    if size < 1:
        raise ValueError("size must be >= 1")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def map_in_batches(
    func: Callable[[T], R],
    items: Iterable[T],
    batch_size: int,
    *,
    name: str = "wheelindex-io",
) -> List[R]:
    """
    Apply ``func`` to ``items`` with at most ``batch_size`` calls in flight.

    Each batch is fully resolved before the next one is submitted, so memory
    and outstanding requests stay bounded by ``batch_size``. Results keep the
    input order. Exceptions raised by ``func`` propagate; callers that must not
    fail should catch inside ``func``.
    """
    materialized = list(items)
    executor, needs_shutdown = create_executor(min(batch_size, len(materialized)), name)
    results: List[R] = []
    try:
        for batch in chunked(materialized, batch_size):
            if executor is None:
                results.extend(func(item) for item in batch)
            else:
                results.extend(executor.map(func, batch))
    finally:
        if needs_shutdown and executor is not None:
            executor.shutdown(wait=True)
    return results
