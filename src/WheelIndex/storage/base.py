# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.storage.base",
#   "purpose": "Collaborator interfaces for source and destination stores.",
#   "sections": [
#     {
#       "id": "objecthead",
#       "name": "ObjectHead",
#       "anchor": "class-objecthead",
#       "kind": "class"
#     },
#     {
#       "id": "sourcestore",
#       "name": "SourceStore",
#       "anchor": "class-sourcestore",
#       "kind": "class"
#     },
#     {
#       "id": "destinationstore",
#       "name": "DestinationStore",
#       "anchor": "class-destinationstore",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Collaborator interfaces for source and destination stores.

The index engine only needs three capabilities from the outside world:
listing keys, reading per-object metadata from the source, and writing or
listing pages in a destination. Concrete backends live beside this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Protocol, runtime_checkable

__all__ = ["ObjectHead", "SourceStore", "DestinationStore"]


@dataclass(frozen=True)
class ObjectHead:
    """Subset of a HEAD response the engine consumes.

    Attributes:
        size: Content length in bytes, when reported.
        checksum_base64: Native SHA-256 checksum, base64 encoded, when stored.
        metadata: User metadata attached to the object.
    """

    size: Optional[int] = None
    checksum_base64: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class SourceStore(Protocol):
    """Read-only view of the bucket holding the artifacts."""

    def list_keys(self, prefix: str) -> Iterator[str]:
        """Yield every key under ``prefix``, paging transparently."""
        ...

    def head_object(self, key: str) -> ObjectHead:
        """Return metadata for ``key``.

        Raises:
            ObjectNotFoundError: If ``key`` does not exist.
        """
        ...


@runtime_checkable
class DestinationStore(Protocol):
    """Store receiving rendered pages."""

    name: str

    def put(self, key: str, content: str, *, content_type: str, cache_control: str) -> None:
        """Create or overwrite ``key``."""
        ...

    def list_keys(self, prefix: str) -> Iterator[str]:
        """Yield every key under ``prefix``."""
        ...
