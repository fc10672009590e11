# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.catalog.models",
#   "purpose": "Catalog entry value types and key encoding helpers.",
#   "sections": [
#     {
#       "id": "encode-key",
#       "name": "encode_key",
#       "anchor": "function-encode-key",
#       "kind": "function"
#     },
#     {
#       "id": "decode-key",
#       "name": "decode_key",
#       "anchor": "function-decode-key",
#       "kind": "function"
#     },
#     {
#       "id": "objectmetadata",
#       "name": "ObjectMetadata",
#       "anchor": "class-objectmetadata",
#       "kind": "class"
#     },
#     {
#       "id": "catalogentry",
#       "name": "CatalogEntry",
#       "anchor": "class-catalogentry",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Catalog entry value types.

A :class:`CatalogEntry` is one artifact candidate found under a feed prefix.
Entries are frozen: enrichment produces new entries through
:meth:`CatalogEntry.with_metadata` rather than mutating shared state.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, replace
from typing import Optional

__all__ = [
    "ENCODED_PLUS",
    "encode_key",
    "decode_key",
    "basename",
    "dirname",
    "ObjectMetadata",
    "CatalogEntry",
]

ENCODED_PLUS = "%2B"


def encode_key(key: str) -> str:
    """Percent-encode ``+`` so the key is safe inside URLs."""
    return key.replace("+", ENCODED_PLUS)


def decode_key(key: str) -> str:
    """Restore ``+`` characters encoded by :func:`encode_key`."""
    return key.replace(ENCODED_PLUS, "+")


def basename(key: str) -> str:
    return posixpath.basename(key)


def dirname(key: str) -> str:
    return posixpath.dirname(key)


@dataclass(frozen=True)
class ObjectMetadata:
    """Integrity data gathered for one source object."""

    checksum: Optional[str] = None
    size: Optional[int] = None
    metadata_checksum: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.checksum is None and self.size is None and self.metadata_checksum is None


@dataclass(frozen=True, order=True)
class CatalogEntry:
    """One artifact under a feed prefix.

    Attributes:
        key: Storage/display identity with ``+`` encoded as ``%2B``.
        original_key: Key as stored in the source bucket, used for lookups.
        checksum: Lowercase-hex SHA-256 of the artifact, once enriched.
        size: Artifact size in bytes, once enriched.
        metadata_checksum: Lowercase-hex SHA-256 of the sibling ``.metadata``
            object (PEP 658/714), once enriched.
    """

    key: str
    original_key: str
    checksum: Optional[str] = None
    size: Optional[int] = None
    metadata_checksum: Optional[str] = None

    @classmethod
    def from_source_key(cls, source_key: str) -> "CatalogEntry":
        """Build an entry from a raw source key."""
        decoded = decode_key(source_key)
        return cls(key=encode_key(decoded), original_key=decoded)

    @property
    def filename(self) -> str:
        return basename(self.key)

    @property
    def directory(self) -> str:
        return dirname(self.key)

    @property
    def display_name(self) -> str:
        return decode_key(self.filename)

    def with_metadata(self, metadata: ObjectMetadata) -> "CatalogEntry":
        return replace(
            self,
            checksum=metadata.checksum,
            size=metadata.size,
            metadata_checksum=metadata.metadata_checksum,
        )
