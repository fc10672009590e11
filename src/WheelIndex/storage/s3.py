# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.storage.s3",
#   "purpose": "boto3-backed source and destination stores.",
#   "sections": [
#     {
#       "id": "create-s3-client",
#       "name": "create_s3_client",
#       "anchor": "function-create-s3-client",
#       "kind": "function"
#     },
#     {
#       "id": "s3sourcestore",
#       "name": "S3SourceStore",
#       "anchor": "class-s3sourcestore",
#       "kind": "class"
#     },
#     {
#       "id": "s3destinationstore",
#       "name": "S3DestinationStore",
#       "anchor": "class-s3destinationstore",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""boto3-backed source and destination stores.

Provides:
  - Paginated key listing (``list_objects_v2``)
  - HEAD lookups with native SHA-256 checksums (``ChecksumMode=ENABLED``)
  - Page uploads to any S3-compatible endpoint, including Cloudflare R2

Retries and backoff are left to botocore's own retry configuration.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from ..errors import ObjectNotFoundError
from .base import ObjectHead

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchKey"})


def create_s3_client(
    *,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    max_pool_connections: int = 50,
) -> Any:
    """Create an S3 client.

    Static credentials are used when both halves are supplied; otherwise
    boto3's default chain (environment, profile, IAM role) applies.

    Args:
        region: AWS region, or ``"auto"`` for R2.
        endpoint_url: Custom endpoint for S3-compatible stores.
        access_key_id: Optional static access key.
        secret_access_key: Optional static secret key.
        max_pool_connections: HTTP connection pool size; keep it at or above
            the metadata batch size.
    """
    kwargs: dict[str, Any] = {
        "region_name": region,
        "config": BotoConfig(
            max_pool_connections=max_pool_connections,
            retries={"mode": "standard"},
        ),
    }
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    if access_key_id and secret_access_key:
        kwargs["aws_access_key_id"] = access_key_id
        kwargs["aws_secret_access_key"] = secret_access_key
    return boto3.client("s3", **kwargs)


def _iter_keys(client: Any, bucket: str, prefix: str) -> Iterator[str]:
    paginator = client.get_paginator("list_objects_v2")
    for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
        for obj in page.get("Contents", []):
            key = obj.get("Key")
            if key:
                yield key


class S3SourceStore:
    """Read-only access to the bucket holding the artifacts."""

    def __init__(self, client: Any, bucket: str) -> None:
        self.client = client
        self.bucket = bucket

    def list_keys(self, prefix: str) -> Iterator[str]:
        logger.debug(f"Listing s3://{self.bucket}/{prefix}")
        yield from _iter_keys(self.client, self.bucket, prefix)

    def head_object(self, key: str) -> ObjectHead:
        try:
            response = self.client.head_object(Bucket=self.bucket, Key=key, ChecksumMode="ENABLED")
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(key, bucket=self.bucket) from e
            raise

        size = response.get("ContentLength")
        return ObjectHead(
            size=int(size) if size is not None else None,
            checksum_base64=response.get("ChecksumSHA256"),
            metadata=dict(response.get("Metadata") or {}),
        )


class S3DestinationStore:
    """S3-compatible bucket receiving rendered pages."""

    def __init__(self, client: Any, bucket: str, *, name: Optional[str] = None) -> None:
        self.client = client
        self.bucket = bucket
        self.name = name or bucket

    def put(self, key: str, content: str, *, content_type: str, cache_control: str) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=content.encode("utf-8"),
            ContentType=content_type,
            CacheControl=cache_control,
        )
        logger.debug(f"Uploaded s3://{self.bucket}/{key}")

    def list_keys(self, prefix: str) -> Iterator[str]:
        yield from _iter_keys(self.client, self.bucket, prefix)
