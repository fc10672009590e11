# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.pipeline",
#   "purpose": "Run orchestration: feeds, soft deadlines, page publication.",
#   "sections": [
#     {
#       "id": "indexgenerator",
#       "name": "IndexGenerator",
#       "anchor": "class-indexgenerator",
#       "kind": "class"
#     },
#     {
#       "id": "build-generator",
#       "name": "build_generator",
#       "anchor": "function-build-generator",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Run orchestration for index generation.

One run processes the configured feeds in order. For each feed:

1. List the source prefix and keep accepted keys.
2. Rolling feeds keep the newest versions of allow-listed packages;
   allow-list-only feeds drop unknown packages.
3. Group entries by subdirectory and package.
4. Attach checksums and sizes, unless the run is already past the enrichment
   deadline.
5. Look up packages already published to the destination.
6. Render and write every page of every subdirectory.

A failing feed is logged and recorded in the run summary; the next feed still
runs. Time limits are soft: they only decide whether enrichment happens and
whether warnings are logged.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from .catalog.enrichment import enrich_entries
from .catalog.filter import filter_keys
from .catalog.organizer import PackageIndex
from .catalog.retention import allowed_entries, retained_entries
from .clock import RunClock
from .config.loader import ensure_runnable
from .config.models import FeedConfig, IndexConfig
from .errors import log_feed_failure
from .external import discover_standalone_packages, merge_package_names
from .rendering import (
    display_package_name,
    render_file_listing,
    render_package_listing,
    render_package_page,
)
from .storage import build_destination, build_source_store
from .storage.base import DestinationStore, SourceStore
from .summary import FeedResult, RunSummary

logger = logging.getLogger(__name__)

__all__ = ["IndexGenerator", "build_generator"]

PAGE_NAME = "index.html"


class IndexGenerator:
    """Regenerate the index pages of every configured feed.

    Args:
        config: Validated configuration.
        source: Store listing the artifacts and serving HEAD lookups.
        destination: Store receiving pages; usually a
            :class:`~WheelIndex.storage.MirroredDestination`.
        clock: Run clock; a new one starts when omitted.
    """

    def __init__(
        self,
        config: IndexConfig,
        source: SourceStore,
        destination: DestinationStore,
        *,
        clock: Optional[RunClock] = None,
    ) -> None:
        self.config = config
        self.source = source
        self.destination = destination
        self.clock = clock or RunClock()

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def list_feed(self, feed: FeedConfig) -> PackageIndex:
        """List and filter a feed, applying its retention policy."""
        started = time.monotonic()
        entries = tuple(
            filter_keys(
                self.source.list_keys(f"{feed.prefix}/"),
                feed.prefix,
                self.config.accepted_extensions,
                self.config.compiled_subdir_patterns(),
            )
        )
        logger.info(
            f"Found {len(entries)} objects for '{feed.prefix}' in "
            f"{time.monotonic() - started:.2f}s"
        )

        if self.clock.exceeded(self.config.timing.listing_warn_seconds):
            logger.warning(
                f"Elapsed time {self.clock.elapsed():.1f}s after listing '{feed.prefix}'"
            )

        if feed.rolling:
            result = retained_entries(
                entries, self.config.allow_list, self.config.keep_threshold
            )
            entries = result.kept
            logger.info(
                f"After retention: {len(entries)} objects for '{feed.prefix}' "
                f"({len(result.pruned_keys)} versions pruned)"
            )
        elif feed.allow_list_only:
            entries = allowed_entries(entries, self.config.allow_list)
            logger.info(f"After allow-list filtering: {len(entries)} objects for '{feed.prefix}'")

        return PackageIndex(entries, feed.prefix)

    def enrich(self, feed: FeedConfig, index: PackageIndex) -> Tuple[PackageIndex, bool]:
        """Attach integrity metadata when the feed wants it and time allows.

        Returns:
            The (possibly) enriched index and whether enrichment ran.
        """
        if not feed.wants_enrichment or len(index) == 0:
            return index, False
        deadline = self.config.timing.enrichment_deadline_seconds
        if self.clock.exceeded(deadline):
            logger.warning(
                f"Elapsed time {self.clock.elapsed():.1f}s before metadata fetch for "
                f"'{feed.prefix}' - skipping checksums"
            )
            return index, False

        started = time.monotonic()
        entries = enrich_entries(index.entries, self.source, self.config.metadata_batch_size)
        logger.info(f"Fetched metadata for '{feed.prefix}' in {time.monotonic() - started:.2f}s")
        return index.replace_entries(entries), True

    def _write(self, key: str, content: str) -> None:
        publish = self.config.publish
        self.destination.put(
            key,
            content,
            content_type=publish.content_type,
            cache_control=publish.cache_control,
        )
        logger.info(f"Uploaded {key}")

    def publish_simple(self, feed: FeedConfig, index: PackageIndex) -> int:
        """Write package listings and per-package pages; return the page count."""
        subdirectories = sorted(index.subdirectories())
        standalone = discover_standalone_packages(self.destination, subdirectories)
        pages = 0
        for subdir in subdirectories:
            known = index.package_names(subdir)
            names = merge_package_names(known, standalone.get(subdir, ()))
            for name in sorted(set(names) - set(known)):
                logger.info(f"Including standalone package '{name}' in {subdir}")

            self._write(f"{subdir}/{PAGE_NAME}", render_package_listing(names))
            pages += 1

            for name in sorted(names):
                files = list(index.files_for(subdir, name.lower()))
                if not files:
                    continue
                page = render_package_page(
                    files,
                    name,
                    include_checksums=not feed.rolling,
                    requires_python=self.config.requires_python,
                )
                compat = display_package_name(name.lower())
                self._write(f"{subdir}/{compat}/{PAGE_NAME}", page)
                pages += 1
        return pages

    def publish_listing(self, feed: FeedConfig, index: PackageIndex) -> int:
        """Write raw file listings for a non-Python feed; return the page count."""
        pages = 0
        for subdir in sorted(index.subdirectories()):
            files = list(index.files_for(subdir, feed.listing_package))
            if not files:
                continue
            self._write(
                f"{subdir}/{PAGE_NAME}", render_file_listing(files, subdir, index.prefix)
            )
            pages += 1
        return pages

    # ------------------------------------------------------------------
    # Feeds and runs
    # ------------------------------------------------------------------

    def process_feed(self, feed: FeedConfig) -> FeedResult:
        """Process one feed, converting any failure into a recorded result."""
        started = time.monotonic()
        logger.info(f"Processing prefix '{feed.prefix}'")
        try:
            index = self.list_feed(feed)
            index, enriched = self.enrich(feed, index)
            if feed.layout == "simple":
                pages = self.publish_simple(feed, index)
            else:
                pages = self.publish_listing(feed, index)
        except Exception as e:
            duration = time.monotonic() - started
            log_feed_failure(logger, prefix=feed.prefix, error=e, duration_s=duration)
            return FeedResult(
                prefix=feed.prefix,
                object_count=0,
                pages_written=0,
                duration_s=duration,
                error=str(e) or type(e).__name__,
            )

        duration = time.monotonic() - started
        logger.info(f"Completed '{feed.prefix}' in {duration:.2f}s")
        return FeedResult(
            prefix=feed.prefix,
            object_count=len(index),
            pages_written=pages,
            duration_s=duration,
            enriched=enriched,
        )

    def run(self, prefixes: Optional[Sequence[str]] = None) -> RunSummary:
        """Process the selected feeds (all of them by default) in order.

        Raises:
            KeyError: If a requested prefix is not configured.
        """
        feeds = (
            [self.config.feed(prefix) for prefix in prefixes]
            if prefixes
            else list(self.config.feeds)
        )
        summary = RunSummary(
            run_id=self.config.run_id or uuid.uuid4().hex,
            started_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        )
        for feed in feeds:
            summary.feeds.append(self.process_feed(feed))
            if self.clock.exceeded(self.config.timing.total_warn_seconds):
                logger.warning(
                    f"Total elapsed time {self.clock.elapsed():.1f}s after '{feed.prefix}'"
                )
        summary.duration_s = self.clock.elapsed()
        logger.info(
            f"Index generation completed in {summary.duration_s:.2f}s: "
            f"{summary.total_objects} objects, {len(summary.failures)} failed feeds",
            extra={"extra_fields": {"run_id": summary.run_id}},
        )
        return summary


def build_generator(config: IndexConfig, *, output_dir: Optional[str] = None) -> IndexGenerator:
    """Construct a generator with boto3-backed stores.

    Raises:
        ConfigurationError: If the configuration cannot support a run.
    """
    ensure_runnable(config, require_destinations=output_dir is None)
    return IndexGenerator(
        config,
        build_source_store(config),
        build_destination(config, output_dir=output_dir),
    )
