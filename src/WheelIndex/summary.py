"""Run summary builders and console reporting helpers.

Responsibilities
----------------
- Provide :class:`FeedResult` and :class:`RunSummary`, the per-feed and
  per-run outcomes returned by :class:`WheelIndex.pipeline.IndexGenerator`.
- Assemble a JSON-ready record via :func:`build_summary_record` for the CLI's
  ``--summary-path`` and for schedulers that inspect run outcomes.
- Expose :func:`emit_console_summary` to print the same information for
  humans.

Design Notes
------------
- A failed feed is recorded with ``object_count = 0`` and its error message;
  the run itself still completes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "FeedResult",
    "RunSummary",
    "build_summary_record",
    "emit_console_summary",
]


@dataclass(frozen=True)
class FeedResult:
    """Outcome of processing one feed."""

    prefix: str
    object_count: int
    pages_written: int
    duration_s: float
    enriched: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """Aggregated outcome of one generation run."""

    run_id: str
    started_at: str
    duration_s: float = 0.0
    feeds: List[FeedResult] = field(default_factory=list)

    @property
    def total_objects(self) -> int:
        return sum(feed.object_count for feed in self.feeds)

    @property
    def pages_written(self) -> int:
        return sum(feed.pages_written for feed in self.feeds)

    @property
    def failures(self) -> List[FeedResult]:
        return [feed for feed in self.feeds if not feed.ok]


def build_summary_record(summary: RunSummary) -> Dict[str, Any]:
    """Assemble the structured run summary record."""

    return {
        "run_id": summary.run_id,
        "started_at": summary.started_at,
        "duration_s": round(summary.duration_s, 3),
        "total_objects": summary.total_objects,
        "pages_written": summary.pages_written,
        "failed_feeds": [feed.prefix for feed in summary.failures],
        "feeds": [
            {
                "prefix": feed.prefix,
                "object_count": feed.object_count,
                "pages_written": feed.pages_written,
                "duration_s": round(feed.duration_s, 3),
                "enriched": feed.enriched,
                "error": feed.error,
            }
            for feed in summary.feeds
        ],
    }


def emit_console_summary(summary: RunSummary) -> None:
    """Pretty-print the run summary to stdout."""

    print(
        f"\nDone. Indexed {summary.total_objects} objects across {len(summary.feeds)} feeds, "
        f"wrote {summary.pages_written} pages in {summary.duration_s:.1f}s."
    )
    for feed in summary.feeds:
        status = "ok" if feed.ok else f"FAILED ({feed.error})"
        enrichment = "with checksums" if feed.enriched else "without checksums"
        print(
            f"  {feed.prefix}: {feed.object_count} objects, {feed.pages_written} pages, "
            f"{enrichment}, {feed.duration_s:.1f}s, {status}"
        )
    if summary.failures:
        print(f"Feeds failed: {len(summary.failures)}")
