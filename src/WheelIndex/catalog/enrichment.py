# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.catalog.enrichment",
#   "purpose": "Attach checksums, sizes, and sibling metadata hashes to entries.",
#   "sections": [
#     {
#       "id": "decode-checksum",
#       "name": "decode_checksum",
#       "anchor": "function-decode-checksum",
#       "kind": "function"
#     },
#     {
#       "id": "parse-checksum",
#       "name": "parse_checksum",
#       "anchor": "function-parse-checksum",
#       "kind": "function"
#     },
#     {
#       "id": "fetch-object-metadata",
#       "name": "fetch_object_metadata",
#       "anchor": "function-fetch-object-metadata",
#       "kind": "function"
#     },
#     {
#       "id": "fetch-metadata-batch",
#       "name": "fetch_metadata_batch",
#       "anchor": "function-fetch-metadata-batch",
#       "kind": "function"
#     },
#     {
#       "id": "enrich-entries",
#       "name": "enrich_entries",
#       "anchor": "function-enrich-entries",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Attach checksums, sizes, and sibling metadata hashes to entries.

Integrity data lets pip skip downloads it already has (``#sha256=`` URL
fragments, PEP 503) and fetch core metadata without the wheel (PEP 658/714).

Lookups:
  - ``HEAD <original_key>`` yields the size and the native SHA-256 checksum.
    Older objects carry the digest in user metadata instead.
  - ``HEAD <original_key>.metadata`` yields the sibling metadata checksum.
    Most artifacts have no sibling, so "not found" is silent.

Failures never propagate: an entry whose lookup fails is published without
integrity data. Lookups run concurrently in fixed-size batches.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from ..concurrency import map_in_batches
from ..errors import ObjectNotFoundError
from ..storage.base import ObjectHead, SourceStore
from .models import CatalogEntry, ObjectMetadata

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50

METADATA_SUFFIX = ".metadata"

# Multipart uploads report "<base64 digest-of-digests>-<part count>", which is
# not the SHA-256 of the content.
MULTIPART_CHECKSUM = re.compile(r"^[A-Za-z0-9+/=]+=-[0-9]+$")

HEX_SHA256 = re.compile(r"^[0-9a-f]{64}$")

FALLBACK_METADATA_FIELDS: Tuple[str, ...] = ("checksum-sha256", "x-amz-meta-checksum-sha256")


def decode_checksum(value: str) -> Optional[str]:
    """Decode a base64 SHA-256 checksum to lowercase hex.

    Returns ``None`` for multipart composite digests and undecodable input.

    >>> decode_checksum("YWJj")
    '616263'
    """
    if MULTIPART_CHECKSUM.match(value):
        logger.warning("Skipping multipart checksum (not a content digest): %s", value)
        return None
    try:
        return base64.b64decode(value, validate=True).hex()
    except (binascii.Error, ValueError):
        logger.warning("Discarding undecodable checksum: %r", value)
        return None


def parse_checksum(head: ObjectHead) -> Optional[str]:
    """Extract the artifact checksum from a HEAD result."""
    if head.checksum_base64:
        decoded = decode_checksum(head.checksum_base64)
        if decoded:
            return decoded
    return _checksum_from_user_metadata(head.metadata)


def _checksum_from_user_metadata(metadata: Mapping[str, str]) -> Optional[str]:
    for field_name in FALLBACK_METADATA_FIELDS:
        value = metadata.get(field_name)
        if not value:
            continue
        candidate = value.strip().lower()
        if HEX_SHA256.match(candidate):
            return candidate
        logger.warning("Discarding malformed %s metadata value: %r", field_name, value)
    return None


def _fetch_sibling_checksum(source: SourceStore, key: str) -> Optional[str]:
    sibling = f"{key}{METADATA_SUFFIX}"
    try:
        head = source.head_object(sibling)
    except ObjectNotFoundError:
        return None
    except Exception as e:
        logger.error("Error fetching metadata object %s: %s", sibling, e)
        return None
    if not head.checksum_base64:
        return None
    return decode_checksum(head.checksum_base64)


def fetch_object_metadata(source: SourceStore, key: str) -> ObjectMetadata:
    """Look up integrity data for one source key.

    Args:
        source: Source store collaborator.
        key: Unencoded source key (``CatalogEntry.original_key``).

    Returns:
        Metadata; empty when the main lookup fails.
    """
    try:
        head = source.head_object(key)
    except Exception as e:
        logger.error("Error fetching metadata for %s: %s", key, e)
        return ObjectMetadata()

    return ObjectMetadata(
        checksum=parse_checksum(head),
        size=head.size,
        metadata_checksum=_fetch_sibling_checksum(source, key),
    )


def fetch_metadata_batch(
    source: SourceStore,
    keys: Sequence[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Dict[str, ObjectMetadata]:
    """Fetch metadata for ``keys`` with at most ``batch_size`` lookups in flight."""
    unique_keys = list(dict.fromkeys(keys))
    results = map_in_batches(
        lambda key: fetch_object_metadata(source, key),
        unique_keys,
        batch_size,
        name="wheelindex-head",
    )
    return dict(zip(unique_keys, results))


def enrich_entries(
    entries: Iterable[CatalogEntry],
    source: SourceStore,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Tuple[CatalogEntry, ...]:
    """Return copies of ``entries`` carrying integrity metadata.

    Entries whose lookups failed come back unchanged.
    """
    materialized = tuple(entries)
    metadata = fetch_metadata_batch(
        source, [entry.original_key for entry in materialized], batch_size
    )
    enriched = []
    missing = 0
    for entry in materialized:
        found = metadata.get(entry.original_key)
        if found is None or found.is_empty:
            missing += 1
            enriched.append(entry)
        else:
            enriched.append(entry.with_metadata(found))
    if missing:
        logger.info("No metadata for %d of %d objects", missing, len(materialized))
    return tuple(enriched)
