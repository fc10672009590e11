# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.catalog.filter",
#   "purpose": "Select indexable artifacts from a raw source listing.",
#   "sections": [
#     {
#       "id": "has-accepted-extension",
#       "name": "has_accepted_extension",
#       "anchor": "function-has-accepted-extension",
#       "kind": "function"
#     },
#     {
#       "id": "in-accepted-directory",
#       "name": "in_accepted_directory",
#       "anchor": "function-in-accepted-directory",
#       "kind": "function"
#     },
#     {
#       "id": "accept-key",
#       "name": "accept_key",
#       "anchor": "function-accept-key",
#       "kind": "function"
#     },
#     {
#       "id": "filter-keys",
#       "name": "filter_keys",
#       "anchor": "function-filter-keys",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Select indexable artifacts from a raw source listing.

Most objects under a bucket are irrelevant to the index (logs, partial
uploads, deprecated subdirectories). A key is kept only when it has an
accepted extension and lives either directly in the feed root or in a direct
child directory whose name fully matches one of the accepted patterns.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Pattern, Sequence, Union

from .models import CatalogEntry, dirname

logger = logging.getLogger(__name__)

PatternLike = Union[str, Pattern[str]]


def has_accepted_extension(key: str, extensions: Sequence[str]) -> bool:
    return any(key.endswith(f".{ext.lstrip('.')}") for ext in extensions)


def in_accepted_directory(key: str, prefix: str, patterns: Sequence[PatternLike]) -> bool:
    """Return True when ``key`` sits in the feed root or an accepted subdirectory."""
    root = prefix.rstrip("/")
    parent = dirname(key)
    if parent == root:
        return True
    if not parent.startswith(root + "/"):
        return False
    relative = parent[len(root) + 1 :]
    if "/" in relative:
        return False
    return any(re.fullmatch(pattern, relative) for pattern in patterns)


def accept_key(
    key: str,
    prefix: str,
    extensions: Sequence[str],
    patterns: Sequence[PatternLike],
) -> bool:
    return has_accepted_extension(key, extensions) and in_accepted_directory(
        key, prefix, patterns
    )


def filter_keys(
    keys: Iterable[str],
    prefix: str,
    extensions: Sequence[str],
    patterns: Sequence[PatternLike],
) -> Iterator[CatalogEntry]:
    """Yield catalog entries for the keys that belong in the index.

    Args:
        keys: Raw source keys, typically streamed from a paginated listing.
        prefix: Feed prefix (a trailing ``/`` is ignored).
        extensions: Accepted file extensions without the leading dot.
        patterns: Regexes (strings or compiled) a subdirectory name must match.

    Yields:
        Entries with ``+`` encoded in ``key``. Order follows the input.
    """
    for key in keys:
        if not accept_key(key, prefix, extensions, patterns):
            logger.debug("Skipping %s - does not match acceptance criteria", key)
            continue
        yield CatalogEntry.from_source_key(key)
