# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.config.models",
#   "purpose": "Pydantic v2 Configuration Models for WheelIndex.",
#   "sections": [
#     {
#       "id": "sourceconfig",
#       "name": "SourceConfig",
#       "anchor": "class-sourceconfig",
#       "kind": "class"
#     },
#     {
#       "id": "destinationconfig",
#       "name": "DestinationConfig",
#       "anchor": "class-destinationconfig",
#       "kind": "class"
#     },
#     {
#       "id": "feedconfig",
#       "name": "FeedConfig",
#       "anchor": "class-feedconfig",
#       "kind": "class"
#     },
#     {
#       "id": "timingpolicy",
#       "name": "TimingPolicy",
#       "anchor": "class-timingpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "publishpolicy",
#       "name": "PublishPolicy",
#       "anchor": "class-publishpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "indexconfig",
#       "name": "IndexConfig",
#       "anchor": "class-indexconfig",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Pydantic v2 Configuration Models for WheelIndex

Provides strict, typed configuration for every stage of index generation:
- Source object store (bucket, region, optional static credentials)
- Destination stores that receive the rendered pages
- Feed definitions (prefix, page layout, rolling retention)
- Soft-deadline timing thresholds
- Top-level IndexConfig as single source of truth

All models use extra="forbid" for strict validation. Environment variables
and CLI overrides follow: file < env < CLI precedence.
"""

from __future__ import annotations

import re
from typing import ClassVar, Dict, FrozenSet, List, Literal, Optional, Pattern

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import defaults

# ============================================================================
# Object Stores
# ============================================================================


class SourceConfig(BaseModel):
    """Object store holding the artifacts being indexed."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    bucket: Optional[str] = Field(default=None, description="Source bucket name")
    region: Optional[str] = Field(default=None, description="Source bucket region")
    access_key_id: Optional[str] = Field(
        default=None, description="Static access key (omit to use the ambient IAM role)"
    )
    secret_access_key: Optional[str] = Field(
        default=None, description="Static secret key (omit to use the ambient IAM role)"
    )

    @model_validator(mode="after")
    def validate_credential_pair(self) -> "SourceConfig":
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ValueError(
                "Either provide both access_key_id and secret_access_key, "
                "or neither (for IAM role)"
            )
        return self


class DestinationConfig(BaseModel):
    """Store that receives rendered index pages."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    name: str = Field(default="primary", description="Label used in logs")
    kind: Literal["s3", "local"] = Field(
        default="s3", description="Destination backend: S3-compatible store or local directory"
    )
    bucket: Optional[str] = Field(default=None, description="Bucket name (kind='s3')")
    region: Optional[str] = Field(default=None, description="Region (kind='s3')")
    endpoint_url: Optional[str] = Field(
        default=None, description="Custom endpoint for S3-compatible stores (e.g. R2)"
    )
    access_key_id: Optional[str] = Field(default=None, description="Static access key")
    secret_access_key: Optional[str] = Field(default=None, description="Static secret key")
    root_dir: Optional[str] = Field(default=None, description="Output directory (kind='local')")

    @model_validator(mode="after")
    def validate_backend_fields(self) -> "DestinationConfig":
        if self.kind == "s3" and not self.bucket:
            raise ValueError(f"destination '{self.name}': bucket is required for kind='s3'")
        if self.kind == "local" and not self.root_dir:
            raise ValueError(f"destination '{self.name}': root_dir is required for kind='local'")
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ValueError(
                f"destination '{self.name}': provide both access_key_id and "
                "secret_access_key, or neither"
            )
        return self


# ============================================================================
# Feeds
# ============================================================================


class FeedConfig(BaseModel):
    """One top-level artifact family processed independently."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    prefix: str = Field(description="Key prefix of the feed (e.g. 'whl/nightly')")
    layout: Literal["simple", "listing"] = Field(
        default="simple",
        description="simple: PEP 503 package pages; listing: raw file listing",
    )
    rolling: bool = Field(
        default=False, description="Apply keep-N-most-recent retention (nightly feeds)"
    )
    allow_list_only: bool = Field(
        default=False, description="Drop packages missing from the allow-list (no version cap)"
    )
    listing_package: str = Field(
        default="libtorch", description="Package whose files appear on listing pages"
    )
    enrich: Optional[bool] = Field(
        default=None,
        description="Fetch checksums and sizes; defaults to True for simple feeds",
    )

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        stripped = v.strip().rstrip("/")
        if not stripped:
            raise ValueError("prefix must not be empty")
        return stripped

    @property
    def wants_enrichment(self) -> bool:
        if self.enrich is None:
            return self.layout == "simple"
        return self.enrich


# ============================================================================
# Policies
# ============================================================================


class TimingPolicy(BaseModel):
    """Soft wall-clock thresholds measured from the start of a run."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    listing_warn_seconds: float = Field(
        default=20.0, description="Warn when listing leaves the run past this point"
    )
    enrichment_deadline_seconds: float = Field(
        default=40.0, description="Skip metadata enrichment once this much time has elapsed"
    )
    total_warn_seconds: float = Field(
        default=40.0, description="Warn after each feed once this much time has elapsed"
    )

    @field_validator("listing_warn_seconds", "enrichment_deadline_seconds", "total_warn_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Timing thresholds must be >= 0")
        return v


class PublishPolicy(BaseModel):
    """HTTP metadata attached to every page written to a destination."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    content_type: str = Field(default="text/html", description="Content-Type of pages")
    cache_control: str = Field(
        default="no-cache,no-store,must-revalidate", description="Cache-Control of pages"
    )


# ============================================================================
# Top-Level Configuration
# ============================================================================


class IndexConfig(BaseModel):
    """
    Single source of truth for WheelIndex configuration.

    Loaded from file (YAML/JSON), overlaid with environment variables,
    and finally overridden by CLI arguments. Precedence: file < env < CLI.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    run_id: Optional[str] = Field(
        default=None, description="Unique run identifier for traceability"
    )
    source: SourceConfig = Field(default_factory=SourceConfig, description="Source store")
    destinations: List[DestinationConfig] = Field(
        default_factory=list, description="Stores receiving identical copies of every page"
    )
    feeds: List[FeedConfig] = Field(
        default_factory=lambda: [FeedConfig.model_validate(f) for f in defaults.DEFAULT_FEEDS],
        description="Feeds processed in order",
    )
    package_allow_list: List[str] = Field(
        default_factory=lambda: list(defaults.PACKAGE_ALLOW_LIST),
        description="Package names retained on rolling feeds (case-insensitive)",
    )
    keep_threshold: int = Field(
        default=defaults.KEEP_THRESHOLD,
        description="Versions kept per package on rolling feeds",
    )
    accepted_extensions: List[str] = Field(
        default_factory=lambda: list(defaults.ACCEPTED_FILE_EXTENSIONS),
        description="File extensions (without the dot) that are indexed",
    )
    accepted_subdir_patterns: List[str] = Field(
        default_factory=lambda: list(defaults.ACCEPTED_SUBDIR_PATTERNS),
        description="Regexes a subdirectory name must fully match",
    )
    metadata_batch_size: int = Field(
        default=defaults.METADATA_BATCH_SIZE,
        description="Metadata lookups in flight at once",
    )
    requires_python: Dict[str, str] = Field(
        default_factory=lambda: dict(defaults.REQUIRES_PYTHON_OVERRIDES),
        description="Filename -> Requires-Python specifier forced onto package pages",
    )
    timing: TimingPolicy = Field(default_factory=TimingPolicy, description="Soft deadlines")
    publish: PublishPolicy = Field(default_factory=PublishPolicy, description="Page metadata")

    @field_validator("keep_threshold")
    @classmethod
    def validate_keep_threshold(cls, v: int) -> int:
        if v < 0:
            raise ValueError("keep_threshold must be >= 0")
        return v

    @field_validator("metadata_batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("metadata_batch_size must be >= 1")
        return v

    @field_validator("package_allow_list")
    @classmethod
    def normalize_allow_list(cls, v: List[str]) -> List[str]:
        return sorted({name.strip().lower() for name in v if name.strip()})

    @field_validator("accepted_extensions")
    @classmethod
    def normalize_extensions(cls, v: List[str]) -> List[str]:
        cleaned = [ext.strip().lstrip(".") for ext in v if ext.strip()]
        if not cleaned:
            raise ValueError("accepted_extensions must not be empty")
        return cleaned

    @field_validator("accepted_subdir_patterns")
    @classmethod
    def validate_patterns(cls, v: List[str]) -> List[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid subdirectory pattern {pattern!r}: {e}") from e
        return v

    @field_validator("feeds")
    @classmethod
    def validate_unique_feeds(cls, v: List[FeedConfig]) -> List[FeedConfig]:
        seen = set()
        for feed in v:
            if feed.prefix in seen:
                raise ValueError(f"Duplicate feed prefix: {feed.prefix}")
            seen.add(feed.prefix)
        return v

    @field_validator("destinations")
    @classmethod
    def validate_unique_destinations(cls, v: List[DestinationConfig]) -> List[DestinationConfig]:
        seen = set()
        for destination in v:
            if destination.name in seen:
                raise ValueError(
                    f"Duplicate destination name: {destination.name} "
                    "(give each destination its own 'name')"
                )
            seen.add(destination.name)
        return v

    @property
    def allow_list(self) -> FrozenSet[str]:
        return frozenset(self.package_allow_list)

    def compiled_subdir_patterns(self) -> List[Pattern[str]]:
        return [re.compile(pattern) for pattern in self.accepted_subdir_patterns]

    def feed(self, prefix: str) -> FeedConfig:
        """Return the feed configured for ``prefix``.

        Raises:
            KeyError: If no feed uses that prefix.
        """
        wanted = prefix.rstrip("/")
        for feed in self.feeds:
            if feed.prefix == wanted:
                return feed
        raise KeyError(wanted)

    def config_hash(self) -> str:
        """
        Compute deterministic SHA256 hash of config for reproducibility.

        Returns:
            Hex-encoded SHA256 hash of normalized config JSON.
        """
        import hashlib
        import json

        normalized = json.dumps(self.model_dump(mode="json"), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(normalized.encode()).hexdigest()
