"""Structured logging helpers shared across index generation components."""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional, Union

__all__ = ["JSONFormatter", "mask_sensitive_data", "setup_logging"]

ROOT_LOGGER_NAME = "WheelIndex"
SENSITIVE_KEYS = {"access_key_id", "secret_access_key", "authorization", "token", "password"}


def mask_sensitive_data(payload: Dict[str, object]) -> Dict[str, object]:
    """Return a copy of ``payload`` with credential fields masked."""

    def _mask(value: object, key_hint: Optional[str] = None) -> object:
        if isinstance(value, dict):
            return {k: _mask(v, str(k).lower()) for k, v in value.items()}
        if isinstance(value, list):
            return [_mask(item, key_hint) for item in value]
        if key_hint and key_hint in SENSITIVE_KEYS and value:
            return "***masked***"
        return value

    return {k: _mask(v, k.lower()) for k, v in payload.items()}


class JSONFormatter(logging.Formatter):
    """Formatter emitting one masked JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, object] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_fields") and isinstance(record.extra_fields, dict):
            payload.update(record.extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(payload), default=str)


def _level_from_name(level: str) -> int:
    if not re.fullmatch(r"[A-Za-z]+", level or ""):
        return logging.INFO
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(
    *,
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    max_log_size_mb: int = 100,
    propagate: bool = False,
) -> logging.Logger:
    """Configure the ``WheelIndex`` logger.

    Console output uses ``LEVEL: message`` lines, or JSON when ``json_logs`` is
    set. ``log_file`` adds a rotating JSON-lines sidecar. Handlers installed by
    an earlier call are replaced.
    """

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_level_from_name(level))

    for handler in list(logger.handlers):
        if getattr(handler, "_wheelindex_managed", False):
            logger.removeHandler(handler)
            if isinstance(handler, logging.StreamHandler):
                stream = getattr(handler, "stream", None)
                if stream in (sys.stdout, sys.stderr):
                    continue
            handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        stream_handler.setFormatter(JSONFormatter())
    else:
        stream_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    stream_handler._wheelindex_managed = True  # type: ignore[attr-defined]
    logger.addHandler(stream_handler)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(max_log_size_mb * 1024 * 1024),
            backupCount=5,
        )
        file_handler.setFormatter(JSONFormatter())
        file_handler._wheelindex_managed = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    logger.propagate = propagate
    return logger
