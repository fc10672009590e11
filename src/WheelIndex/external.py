"""Discovery of packages published to the destination by other processes.

Some packages are uploaded with their own ``<subdir>/<package>/index.html`` and
never appear in the source listing. They still have to be linked from the
subdirectory's package listing, so each feed lists the primary destination
before it writes anything and folds the names it finds into its own.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Set

from .storage.base import DestinationStore

logger = logging.getLogger(__name__)

__all__ = ["discover_standalone_packages", "merge_package_names"]

PAGE_NAME = "index.html"


def _package_from_key(key: str, subdirectory: str) -> Optional[str]:
    rest = key[len(subdirectory) + 1 :]
    parts = rest.split("/")
    if len(parts) != 2 or parts[1] != PAGE_NAME or not parts[0]:
        return None
    return parts[0].replace("-", "_")


def discover_standalone_packages(
    destination: DestinationStore, subdirectories: Iterable[str]
) -> Dict[str, Set[str]]:
    """Return package names that already have a page in the destination.

    Args:
        destination: Store to list; mirrors list from their primary.
        subdirectories: Subdirectories to inspect, e.g. ``whl/cu121``.

    Returns:
        Mapping of subdirectory to the package names found there, with ``-``
        converted back to ``_``.
    """
    found: Dict[str, Set[str]] = {}
    for subdirectory in subdirectories:
        subdir = subdirectory.rstrip("/")
        names: Set[str] = set()
        for key in destination.list_keys(f"{subdir}/"):
            name = _package_from_key(key, subdir)
            if name:
                names.add(name)
        found[subdir] = names
        logger.info(f"Found {len(names)} existing packages in {subdir}")
    return found


def merge_package_names(known: Iterable[str], discovered: Iterable[str]) -> Set[str]:
    """Union ``discovered`` into ``known``, skipping case-insensitive duplicates."""
    merged = set(known)
    seen = {name.lower() for name in merged}
    for name in discovered:
        if name.lower() not in seen:
            merged.add(name)
            seen.add(name.lower())
    return merged
