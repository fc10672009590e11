"""
WheelIndex Configuration Package

Public API for loading, validating, and introspecting WheelIndex configuration.

Example:
    from WheelIndex.config import load_config, ensure_runnable

    # Load from file with env/CLI overrides
    config = load_config(
        path="wheelindex.yaml",
        cli_overrides={"keep_threshold": 30},
    )
    ensure_runnable(config)
"""

from .loader import (
    ensure_runnable,
    export_config_schema,
    load_config,
    validate_config_file,
)
from .models import (
    DestinationConfig,
    FeedConfig,
    IndexConfig,
    PublishPolicy,
    SourceConfig,
    TimingPolicy,
)

__all__ = [
    # Models
    "IndexConfig",
    "SourceConfig",
    "DestinationConfig",
    "FeedConfig",
    "TimingPolicy",
    "PublishPolicy",
    # Loading/validation
    "load_config",
    "ensure_runnable",
    "validate_config_file",
    "export_config_schema",
]
