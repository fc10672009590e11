"""Fan-out destination writing every page to several stores at once."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Dict, Iterator, List, Sequence, Tuple

from ..concurrency import create_executor
from ..errors import DestinationWriteError
from .base import DestinationStore

logger = logging.getLogger(__name__)


class MirroredDestination:
    """Write identical pages to every destination; list from the primary.

    The first destination is the primary. A write succeeds only when every
    destination accepted it; otherwise :class:`DestinationWriteError` names the
    stores that failed.
    """

    def __init__(self, destinations: Sequence[DestinationStore]) -> None:
        if not destinations:
            raise ValueError("MirroredDestination needs at least one destination")
        self.destinations = list(destinations)
        self.name = "+".join(d.name for d in self.destinations)
        names = [d.name for d in self.destinations]
        # Failure labels must stay distinct even when two stores share a name.
        self._labels = [
            name if names.count(name) == 1 else f"{name}[{position}]"
            for position, name in enumerate(names)
        ]

    @property
    def primary(self) -> DestinationStore:
        return self.destinations[0]

    def put(self, key: str, content: str, *, content_type: str, cache_control: str) -> None:
        failures: Dict[str, BaseException] = {}
        executor, needs_shutdown = create_executor(len(self.destinations), "wheelindex-put")
        try:
            if executor is None:
                for label, destination in zip(self._labels, self.destinations):
                    try:
                        destination.put(
                            key, content, content_type=content_type, cache_control=cache_control
                        )
                    except Exception as e:
                        failures[label] = e
            else:
                pending: List[Tuple[str, Future]] = [
                    (
                        label,
                        executor.submit(
                            destination.put,
                            key,
                            content,
                            content_type=content_type,
                            cache_control=cache_control,
                        ),
                    )
                    for label, destination in zip(self._labels, self.destinations)
                ]
                for label, future in pending:
                    error = future.exception()
                    if error is not None:
                        failures[label] = error
        finally:
            if needs_shutdown and executor is not None:
                executor.shutdown(wait=True)

        if failures:
            for name, error in failures.items():
                logger.error(f"Failed to write {key} to {name}: {error}")
            raise DestinationWriteError(key, failures)

    def list_keys(self, prefix: str) -> Iterator[str]:
        return self.primary.list_keys(prefix)
