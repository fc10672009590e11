# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.catalog.__init__",
#   "purpose": "Artifact catalog: filtering, retention, organization, enrichment.",
#   "sections": []
# }
# === /NAVMAP ===

"""
Artifact catalog for WheelIndex.

Turns a raw, possibly huge listing of source keys into the organized set of
entries that the renderers publish:
  - :mod:`.filter` keeps keys with accepted extensions and directories
  - :mod:`.retention` prunes rolling feeds to the newest N versions per package
  - :mod:`.organizer` groups entries by subdirectory and package name
  - :mod:`.enrichment` attaches checksums and sibling metadata hashes
"""

from __future__ import annotations

from WheelIndex.catalog.enrichment import decode_checksum, enrich_entries, fetch_metadata_batch
from WheelIndex.catalog.filter import accept_key, filter_keys
from WheelIndex.catalog.models import CatalogEntry, ObjectMetadata, decode_key, encode_key
from WheelIndex.catalog.organizer import FileListing, PackageIndex, package_name
from WheelIndex.catalog.retention import (
    RetentionKey,
    RetentionResult,
    allowed_entries,
    retained_entries,
    retention_key,
)

__all__ = [
    "CatalogEntry",
    "ObjectMetadata",
    "encode_key",
    "decode_key",
    "accept_key",
    "filter_keys",
    "RetentionKey",
    "RetentionResult",
    "retention_key",
    "retained_entries",
    "allowed_entries",
    "FileListing",
    "PackageIndex",
    "package_name",
    "decode_checksum",
    "enrich_entries",
    "fetch_metadata_batch",
]
