"""Filesystem destination for previews and dry runs.

Writes each page to ``<root>/<key>`` so a generated tree can be inspected or
served locally before anything is published.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional, Union

logger = logging.getLogger(__name__)


class LocalDirectoryDestination:
    """Destination store backed by a local directory."""

    def __init__(self, root: Union[str, Path], *, name: Optional[str] = None) -> None:
        self.root = Path(root)
        self.name = name or str(self.root)

    def _path_for(self, key: str) -> Path:
        target = (self.root / key).resolve()
        root = self.root.resolve()
        if root != target and root not in target.parents:
            raise ValueError(f"Key escapes destination root: {key}")
        return target

    def put(self, key: str, content: str, *, content_type: str, cache_control: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug(f"Saved {path}")

    def list_keys(self, prefix: str) -> Iterator[str]:
        if not self.root.exists():
            return
        for path in sorted(self.root.rglob("*")):
            if not path.is_file():
                continue
            key = path.relative_to(self.root).as_posix()
            if key.startswith(prefix):
                yield key
