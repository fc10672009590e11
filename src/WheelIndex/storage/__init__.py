# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.storage.__init__",
#   "purpose": "Source and destination stores plus builders from configuration.",
#   "sections": [
#     {
#       "id": "build-source-store",
#       "name": "build_source_store",
#       "anchor": "function-build-source-store",
#       "kind": "function"
#     },
#     {
#       "id": "build-destination",
#       "name": "build_destination",
#       "anchor": "function-build-destination",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Source and destination stores plus builders from configuration."""

from __future__ import annotations

from typing import Optional, Union

from WheelIndex.config.models import DestinationConfig, IndexConfig
from WheelIndex.storage.base import DestinationStore, ObjectHead, SourceStore
from WheelIndex.storage.local import LocalDirectoryDestination
from WheelIndex.storage.mirror import MirroredDestination
from WheelIndex.storage.s3 import S3DestinationStore, S3SourceStore, create_s3_client

__all__ = [
    "ObjectHead",
    "SourceStore",
    "DestinationStore",
    "S3SourceStore",
    "S3DestinationStore",
    "LocalDirectoryDestination",
    "MirroredDestination",
    "create_s3_client",
    "build_source_store",
    "build_destination",
]


def build_source_store(config: IndexConfig) -> S3SourceStore:
    """Create the boto3-backed source store described by ``config.source``."""
    source = config.source
    client = create_s3_client(
        region=source.region,
        access_key_id=source.access_key_id,
        secret_access_key=source.secret_access_key,
        max_pool_connections=max(10, config.metadata_batch_size),
    )
    return S3SourceStore(client, source.bucket or "")


def _build_one(destination: DestinationConfig) -> Union[S3DestinationStore, LocalDirectoryDestination]:
    if destination.kind == "local":
        return LocalDirectoryDestination(destination.root_dir or ".", name=destination.name)
    client = create_s3_client(
        region=destination.region,
        endpoint_url=destination.endpoint_url,
        access_key_id=destination.access_key_id,
        secret_access_key=destination.secret_access_key,
    )
    return S3DestinationStore(client, destination.bucket or "", name=destination.name)


def build_destination(
    config: IndexConfig, *, output_dir: Optional[str] = None
) -> MirroredDestination:
    """Create the destination fan-out.

    Args:
        config: Validated configuration.
        output_dir: When set, pages go to this local directory instead of the
            configured destinations.
    """
    if output_dir is not None:
        return MirroredDestination([LocalDirectoryDestination(output_dir, name="local")])
    return MirroredDestination([_build_one(d) for d in config.destinations])
