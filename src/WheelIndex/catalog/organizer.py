# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.catalog.organizer",
#   "purpose": "Group catalog entries by subdirectory and package name.",
#   "sections": [
#     {
#       "id": "package-name",
#       "name": "package_name",
#       "anchor": "function-package-name",
#       "kind": "function"
#     },
#     {
#       "id": "filelisting",
#       "name": "FileListing",
#       "anchor": "class-filelisting",
#       "kind": "class"
#     },
#     {
#       "id": "packageindex",
#       "name": "PackageIndex",
#       "anchor": "class-packageindex",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Group catalog entries by subdirectory and package name.

:class:`PackageIndex` is an immutable view over the entries of one feed.
Views returned by :meth:`PackageIndex.files_for` are :class:`FileListing`
objects: finite, restartable iterables that recompute their contents from the
owning index on every iteration.

Root entries (files directly under the feed prefix) are visible from every
subdirectory view, mirroring how the published pages have always behaved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple

from .models import CatalogEntry

__all__ = ["package_name", "FileListing", "PackageIndex"]


def package_name(entry: CatalogEntry) -> str:
    """Lower-cased filename text before the first ``-``."""
    return entry.filename.split("-", 1)[0].lower()


class FileListing:
    """Restartable view of the entries matching a subdirectory/package filter."""

    def __init__(
        self,
        index: "PackageIndex",
        subdirectory: Optional[str] = None,
        package: Optional[str] = None,
    ) -> None:
        self._index = index
        self.subdirectory = index.resolve_subdirectory(subdirectory)
        self.package = package

    def __iter__(self) -> Iterator[CatalogEntry]:
        scope = self.subdirectory + "/"
        for entry in self._index.entries:
            if self.package is not None and package_name(entry) != self.package:
                continue
            if self._index.is_root(entry) or entry.key.startswith(scope):
                yield entry

    def __repr__(self) -> str:
        return f"FileListing(subdirectory={self.subdirectory!r}, package={self.package!r})"


@dataclass(frozen=True)
class PackageIndex:
    """Immutable grouping of catalog entries under one feed prefix."""

    entries: Tuple[CatalogEntry, ...]
    prefix: str

    def __init__(self, entries: Iterable[CatalogEntry], prefix: str) -> None:
        object.__setattr__(self, "entries", tuple(entries))
        object.__setattr__(self, "prefix", prefix.rstrip("/"))

    def __len__(self) -> int:
        return len(self.entries)

    def resolve_subdirectory(self, subdirectory: Optional[str] = None) -> str:
        if not subdirectory:
            return self.prefix
        return subdirectory.rstrip("/")

    def subdirectories(self) -> Set[str]:
        """Distinct parent directories of all entries, excluding the feed root."""
        return {
            entry.directory
            for entry in self.entries
            if entry.directory and entry.directory != self.prefix
        }

    def is_root(self, entry: CatalogEntry) -> bool:
        return entry.directory == self.prefix

    package_name = staticmethod(package_name)

    def files_for(
        self, subdirectory: Optional[str] = None, package: Optional[str] = None
    ) -> FileListing:
        return FileListing(self, subdirectory, package)

    def package_names(self, subdirectory: Optional[str] = None) -> List[str]:
        return sorted({package_name(entry) for entry in self.files_for(subdirectory)})

    def filter(self, predicate: Callable[[CatalogEntry], bool]) -> "PackageIndex":
        return PackageIndex((entry for entry in self.entries if predicate(entry)), self.prefix)

    def replace_entries(self, entries: Iterable[CatalogEntry]) -> "PackageIndex":
        return PackageIndex(entries, self.prefix)
