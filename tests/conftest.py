"""Shared fixtures for WheelIndex tests."""

from __future__ import annotations

import logging

import pytest

from WheelIndex.config import IndexConfig


@pytest.fixture(autouse=True)
def _reset_wheelindex_logger():
    """Undo handlers and propagation changes made by ``setup_logging``."""
    yield
    logger = logging.getLogger("WheelIndex")
    for handler in list(logger.handlers):
        if getattr(handler, "_wheelindex_managed", False):
            logger.removeHandler(handler)
            handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep ambient WHEELINDEX_* variables out of config loading."""
    import os

    for key in list(os.environ):
        if key.startswith("WHEELINDEX_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_config():
    """Build an IndexConfig with a source bucket and one in-memory destination."""

    def _make(**overrides):
        data = {
            "source": {"bucket": "artifacts", "region": "us-east-1"},
            "destinations": [{"name": "r2", "kind": "s3", "bucket": "cdn", "region": "auto"}],
        }
        data.update(overrides)
        return IndexConfig.model_validate(data)

    return _make
