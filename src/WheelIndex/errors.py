# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.errors",
#   "purpose": "Error taxonomy and logging helpers for index generation.",
#   "sections": [
#     {
#       "id": "indexgenerationerror",
#       "name": "IndexGenerationError",
#       "anchor": "class-indexgenerationerror",
#       "kind": "class"
#     },
#     {
#       "id": "configurationerror",
#       "name": "ConfigurationError",
#       "anchor": "class-configurationerror",
#       "kind": "class"
#     },
#     {
#       "id": "objectnotfounderror",
#       "name": "ObjectNotFoundError",
#       "anchor": "class-objectnotfounderror",
#       "kind": "class"
#     },
#     {
#       "id": "destinationwriteerror",
#       "name": "DestinationWriteError",
#       "anchor": "class-destinationwriteerror",
#       "kind": "class"
#     },
#     {
#       "id": "log-feed-failure",
#       "name": "log_feed_failure",
#       "anchor": "function-log-feed-failure",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Error taxonomy and logging helpers for index generation.

Responsibilities
----------------
- Define :class:`ConfigurationError`, raised before any feed is processed when
  the configuration cannot support a run.
- Define :class:`ObjectNotFoundError`, the "missing key" signal raised by source
  stores. Enrichment treats it as expected for sibling ``.metadata`` objects.
- Define :class:`DestinationWriteError`, raised when a mirror rejects a page.
- Centralise structured logging of feed-level failures through
  :func:`log_feed_failure`.

Design Notes
------------
- Per-object enrichment failures never surface as exceptions to callers; they
  are logged where they occur and the affected field is left empty.
- Feed-level failures are caught at the feed boundary by the pipeline and
  recorded in the run summary instead of aborting the run.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

__all__ = (
    "IndexGenerationError",
    "ConfigurationError",
    "ObjectNotFoundError",
    "DestinationWriteError",
    "log_feed_failure",
)

LOGGER = logging.getLogger(__name__)


class IndexGenerationError(Exception):
    """Base class for errors raised by WheelIndex."""


class ConfigurationError(IndexGenerationError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class ObjectNotFoundError(IndexGenerationError):
    """Raised by a source store when the requested key does not exist."""

    def __init__(self, key: str, *, bucket: Optional[str] = None) -> None:
        location = f"s3://{bucket}/{key}" if bucket else key
        super().__init__(f"Object not found: {location}")
        self.key = key
        self.bucket = bucket


class DestinationWriteError(IndexGenerationError):
    """Raised when one or more destinations fail to store a page."""

    def __init__(self, key: str, failures: dict[str, BaseException]) -> None:
        names = ", ".join(sorted(failures))
        super().__init__(f"Failed to write {key} to: {names}")
        self.key = key
        self.failures = failures


def log_feed_failure(
    logger: logging.Logger,
    *,
    prefix: str,
    error: BaseException,
    duration_s: float,
    **details: Any,
) -> None:
    """Log a feed-level failure with the fields the run summary records.

    Args:
        logger: Logger to emit through.
        prefix: Feed prefix that failed.
        error: Exception caught at the feed boundary.
        duration_s: Seconds spent on the feed before it failed.
        **details: Extra structured fields.
    """
    extra_fields = {
        "feed": prefix,
        "error_type": type(error).__name__,
        "error": str(error),
        "duration_s": round(duration_s, 3),
    }
    extra_fields.update(details)
    logger.error(
        "Failed to process '%s': %s",
        prefix,
        error,
        exc_info=(type(error), error, error.__traceback__),
        extra={"extra_fields": extra_fields},
    )
