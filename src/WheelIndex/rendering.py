# === NAVMAP v1 ===
# {
#   "module": "WheelIndex.rendering",
#   "purpose": "Deterministic HTML renderers for simple indexes and file listings.",
#   "sections": [
#     {
#       "id": "display-package-name",
#       "name": "display_package_name",
#       "anchor": "function-display-package-name",
#       "kind": "function"
#     },
#     {
#       "id": "render-package-listing",
#       "name": "render_package_listing",
#       "anchor": "function-render-package-listing",
#       "kind": "function"
#     },
#     {
#       "id": "render-package-page",
#       "name": "render_package_page",
#       "anchor": "function-render-package-page",
#       "kind": "function"
#     },
#     {
#       "id": "render-file-listing",
#       "name": "render_file_listing",
#       "anchor": "function-render-file-listing",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Deterministic HTML renderers for simple indexes and file listings.

Every page shares one skeleton and ends with a ``<!--TIMESTAMP <epoch>-->``
comment recording when it was generated; pip ignores the comment, and CDN
operators use it to spot stale pages. Apart from that line the output depends
only on the arguments.

Pages:
  - package listing: ``<subdir>/index.html``, one link per package (PEP 503)
  - package page: ``<subdir>/<package>/index.html``, one link per file
  - file listing: ``<subdir>/index.html`` for non-Python feeds such as libtorch
"""

from __future__ import annotations

import html
import time
from typing import Iterable, List, Mapping, Optional

from .catalog.models import CatalogEntry, dirname

__all__ = [
    "display_package_name",
    "render_package_listing",
    "render_package_page",
    "render_file_listing",
]


def display_package_name(name: str) -> str:
    return name.replace("_", "-")


def _timestamp_comment(timestamp: Optional[int]) -> str:
    if timestamp is None:
        timestamp = int(time.time())
    return f"<!--TIMESTAMP {timestamp}-->"


def _page(body: List[str], timestamp: Optional[int]) -> str:
    out = ["<!DOCTYPE html>", "<html>", "  <body>"]
    out.extend(body)
    out.append("  </body>")
    out.append("</html>")
    out.append(_timestamp_comment(timestamp))
    return "\n".join(out)


def render_package_listing(package_names: Iterable[str], *, timestamp: Optional[int] = None) -> str:
    """Render the PEP 503 project list for one subdirectory."""
    body = []
    for name in sorted(set(package_names)):
        shown = display_package_name(name)
        body.append(f'    <a href="{shown}/">{shown}</a><br/>')
    return _page(body, timestamp)


def render_package_page(
    entries: Iterable[CatalogEntry],
    package_name: str,
    *,
    include_checksums: bool = True,
    requires_python: Optional[Mapping[str, str]] = None,
    timestamp: Optional[int] = None,
) -> str:
    """Render the PEP 503 file list of one package.

    Args:
        entries: Files of the package.
        package_name: Name used in the page heading.
        include_checksums: Emit ``#sha256=`` fragments for known checksums.
            Rolling feeds pass ``False``: their artifacts are rebuilt under the
            same name, and stale fragments break installs behind caches.
        requires_python: Filename -> specifier table forcing a
            ``data-requires-python`` attribute.
        timestamp: Generation time; defaults to now.
    """
    overrides = requires_python or {}
    body = [f"    <h1>Links for {display_package_name(package_name.lower())}</h1>"]
    for entry in sorted(entries, key=lambda e: e.key):
        fragment = f"#sha256={entry.checksum}" if include_checksums and entry.checksum else ""
        attributes = ""
        if entry.metadata_checksum:
            digest = f"sha256={entry.metadata_checksum}"
            # PEP 714 renamed data-dist-info-metadata to data-core-metadata.
            attributes += f' data-dist-info-metadata="{digest}" data-core-metadata="{digest}"'
        specifier = overrides.get(entry.display_name) or overrides.get(entry.filename)
        if specifier:
            attributes += f' data-requires-python="{html.escape(specifier, quote=True)}"'
        body.append(f'    <a href="/{entry.key}{fragment}"{attributes}>{entry.display_name}</a><br/>')
    return _page(body, timestamp)


def render_file_listing(
    entries: Iterable[CatalogEntry],
    subdirectory: str,
    prefix: str,
    *,
    timestamp: Optional[int] = None,
) -> str:
    """Render a browsable listing of raw artifacts for one subdirectory.

    Root-level files only appear on the root page.
    """
    root = prefix.rstrip("/")
    subdir = subdirectory.rstrip("/")
    is_root_page = subdir == root
    lines = []
    for entry in entries:
        if not is_root_page and dirname(entry.key) == root:
            continue
        shown = entry.key
        if shown.startswith(subdir):
            shown = shown[len(subdir) :]
        shown = shown.lstrip("/")
        lines.append(f'    <a href="/{entry.key}">{shown}</a><br/>')
    return _page(sorted(lines), timestamp)
