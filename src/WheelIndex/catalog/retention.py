# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.catalog.retention",
#   "purpose": "Keep-N-most-recent retention for rolling feeds.",
#   "sections": [
#     {
#       "id": "retentionkey",
#       "name": "RetentionKey",
#       "anchor": "class-retentionkey",
#       "kind": "class"
#     },
#     {
#       "id": "retentionresult",
#       "name": "RetentionResult",
#       "anchor": "class-retentionresult",
#       "kind": "class"
#     },
#     {
#       "id": "retention-key",
#       "name": "retention_key",
#       "anchor": "function-retention-key",
#       "kind": "function"
#     },
#     {
#       "id": "compare-versions",
#       "name": "compare_versions",
#       "anchor": "function-compare-versions",
#       "kind": "function"
#     },
#     {
#       "id": "sort-newest-first",
#       "name": "sort_newest_first",
#       "anchor": "function-sort-newest-first",
#       "kind": "function"
#     },
#     {
#       "id": "retained-entries",
#       "name": "retained_entries",
#       "anchor": "function-retained-entries",
#       "kind": "function"
#     },
#     {
#       "id": "allowed-entries",
#       "name": "allowed_entries",
#       "anchor": "function-allowed-entries",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Keep-N-most-recent retention for rolling feeds.

Nightly feeds accumulate artifacts without bound, so only the most recent
versions of allow-listed packages are published. Retention decisions are made
per :class:`RetentionKey` (package name plus version with any local/platform
suffix removed), which means the CUDA, ROCm, and CPU builds of one nightly
share a single slot and are kept or pruned together.

Ordering:
  - Versions are compared with :mod:`packaging.version` (PEP 440).
  - When either side fails to parse, the raw strings are compared in reverse
    lexical order instead.
  - Keys are pre-sorted by label, so ties resolve the same way on every pass.
"""

from __future__ import annotations

import functools
import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Tuple

from packaging.version import InvalidVersion, Version

from .models import CatalogEntry

logger = logging.getLogger(__name__)

FALLBACK_VERSION = "0.0.0"

_LOCAL_SUFFIX = re.compile(r"(\+|%2B).*")


class RetentionKey(NamedTuple):
    """Package name plus normalized version; the unit of retention."""

    name: str
    version: Optional[str]

    @property
    def label(self) -> str:
        if self.version is None:
            return self.name
        return f"{self.name}-{self.version}"

    @property
    def comparable_version(self) -> str:
        return self.version or FALLBACK_VERSION


@dataclass(frozen=True)
class RetentionResult:
    """Outcome of a retention pass."""

    kept: Tuple[CatalogEntry, ...]
    kept_keys: FrozenSet[RetentionKey]
    pruned_keys: FrozenSet[RetentionKey]


def retention_key(entry: CatalogEntry) -> RetentionKey:
    """Derive the retention unit for ``entry``.

    ``torch-2.1.0.dev20231120%2Bcu118-cp311-cp311-linux_x86_64.whl`` maps to
    ``RetentionKey("torch", "2.1.0.dev20231120")``. A filename without any
    ``-`` is its own key with no version.
    """
    filename = entry.filename
    parts = filename.split("-")
    if len(parts) < 2:
        return RetentionKey(filename, None)
    normalized = _LOCAL_SUFFIX.sub("", f"{parts[0]}-{parts[1]}")
    name, _, version = normalized.partition("-")
    return RetentionKey(name, version or None)


def compare_versions(left: str, right: str) -> int:
    """Three-way comparison sorting newer versions first."""
    try:
        parsed_left, parsed_right = Version(left), Version(right)
    except InvalidVersion:
        if left == right:
            return 0
        return -1 if left > right else 1
    if parsed_left == parsed_right:
        return 0
    return -1 if parsed_left > parsed_right else 1


def _compare_keys(left: RetentionKey, right: RetentionKey) -> int:
    return compare_versions(left.comparable_version, right.comparable_version)


def sort_newest_first(keys: Iterable[RetentionKey]) -> List[RetentionKey]:
    by_label = sorted(set(keys), key=lambda key: key.label)
    return sorted(by_label, key=functools.cmp_to_key(_compare_keys))


def retained_entries(
    entries: Iterable[CatalogEntry],
    allow_list: AbstractSet[str],
    keep_threshold: int,
) -> RetentionResult:
    """Apply the rolling-feed retention policy.

    Args:
        entries: Catalog entries of one feed.
        allow_list: Lower-cased package names eligible for publication.
        keep_threshold: Maximum number of versions kept per package.

    Returns:
        A :class:`RetentionResult` whose ``kept`` preserves input order.
    """
    materialized = tuple(entries)
    keys_by_entry = [retention_key(entry) for entry in materialized]

    counts: Dict[str, int] = defaultdict(int)
    to_prune = set()
    for key in sort_newest_first(keys_by_entry):
        package = key.name.lower()
        if package not in allow_list:
            to_prune.add(key)
            continue
        if counts[package] >= keep_threshold:
            to_prune.add(key)
        else:
            counts[package] += 1

    kept = tuple(
        entry for entry, key in zip(materialized, keys_by_entry) if key not in to_prune
    )
    kept_keys = frozenset(keys_by_entry) - to_prune
    logger.debug(
        "Retention kept %d of %d versions (%d entries of %d)",
        len(kept_keys),
        len(kept_keys) + len(to_prune),
        len(kept),
        len(materialized),
    )
    return RetentionResult(kept=kept, kept_keys=kept_keys, pruned_keys=frozenset(to_prune))


def allowed_entries(
    entries: Iterable[CatalogEntry], allow_list: AbstractSet[str]
) -> Tuple[CatalogEntry, ...]:
    """Keep every version of allow-listed packages."""
    return tuple(entry for entry in entries if retention_key(entry).name.lower() in allow_list)
