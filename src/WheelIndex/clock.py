"""Elapsed-time tracking for soft run deadlines.

The run never aborts on time. Instead the pipeline asks :class:`RunClock`
whether a threshold has passed before starting optional, expensive work and
skips that work when it has.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

__all__ = ["RunClock"]


class RunClock:
    """Monotonic clock measuring time since the start of a run."""

    def __init__(self, now: Callable[[], float] = time.monotonic, start: Optional[float] = None):
        self._now = now
        self.started = now() if start is None else start

    def elapsed(self) -> float:
        return self._now() - self.started

    def exceeded(self, seconds: float) -> bool:
        """True once more than ``seconds`` have elapsed."""
        return self.elapsed() > seconds
