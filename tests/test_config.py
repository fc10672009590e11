"""Tests for configuration models and loading precedence."""

from __future__ import annotations

import json

import pytest
import yaml
from pydantic import ValidationError

from WheelIndex.config import (
    FeedConfig,
    IndexConfig,
    ensure_runnable,
    export_config_schema,
    load_config,
    validate_config_file,
)
from WheelIndex.errors import ConfigurationError


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


class TestModels:
    """Defaults and validators."""

    def test_defaults(self):
        config = IndexConfig()
        assert [f.prefix for f in config.feeds] == [
            "whl",
            "whl/nightly",
            "whl/test",
            "libtorch",
            "libtorch/nightly",
            "whl/test/variant",
            "whl/variant",
            "whl/preview/forge",
        ]
        assert config.keep_threshold == 60
        assert config.metadata_batch_size == 50
        assert config.feed("whl/nightly").rolling
        assert config.feed("libtorch").layout == "listing"
        assert "torch" in config.allow_list
        assert config.requires_python["networkx-3.3-py3-none-any.whl"] == ">=3.10"
        assert config.publish.cache_control == "no-cache,no-store,must-revalidate"

    def test_allow_list_is_normalized(self):
        config = IndexConfig(package_allow_list=["Pillow", " torch ", "torch", ""])
        assert config.package_allow_list == ["pillow", "torch"]

    def test_feed_prefix_is_normalized(self):
        assert FeedConfig(prefix="whl/nightly/").prefix == "whl/nightly"
        with pytest.raises(ValidationError):
            FeedConfig(prefix="/")

    def test_wants_enrichment_defaults_by_layout(self):
        assert FeedConfig(prefix="whl").wants_enrichment
        assert not FeedConfig(prefix="libtorch", layout="listing").wants_enrichment
        assert not FeedConfig(prefix="whl", enrich=False).wants_enrichment

    def test_duplicate_feed_prefixes_rejected(self):
        with pytest.raises(ValidationError):
            IndexConfig(feeds=[{"prefix": "whl"}, {"prefix": "whl/"}])

    def test_duplicate_destination_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate destination name"):
            IndexConfig(destinations=[{"bucket": "cdn-a"}, {"bucket": "cdn-b"}])
        config = IndexConfig(
            destinations=[{"name": "a", "bucket": "cdn-a"}, {"name": "b", "bucket": "cdn-b"}]
        )
        assert [d.name for d in config.destinations] == ["a", "b"]

    def test_credential_pair_is_enforced(self):
        with pytest.raises(ValidationError):
            IndexConfig(source={"bucket": "b", "region": "r", "access_key_id": "only-half"})

    def test_destination_backend_fields(self):
        with pytest.raises(ValidationError):
            IndexConfig(destinations=[{"kind": "s3"}])
        with pytest.raises(ValidationError):
            IndexConfig(destinations=[{"kind": "local"}])

    @pytest.mark.parametrize(
        "field,value",
        [
            ("keep_threshold", -1),
            ("metadata_batch_size", 0),
            ("accepted_extensions", []),
            ("accepted_subdir_patterns", ["cu[0-9"]),
            ("unknown_field", 1),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            IndexConfig.model_validate({field: value})

    def test_extensions_lose_leading_dot(self):
        assert IndexConfig(accepted_extensions=[".whl"]).accepted_extensions == ["whl"]

    def test_config_hash_is_stable(self):
        assert IndexConfig().config_hash() == IndexConfig().config_hash()
        assert IndexConfig().config_hash() != IndexConfig(keep_threshold=5).config_hash()

    def test_unknown_feed_lookup(self):
        with pytest.raises(KeyError):
            IndexConfig().feed("missing")


class TestLoader:
    """File < environment < CLI precedence."""

    def test_load_yaml(self, tmp_path):
        path = _write_yaml(
            tmp_path / "config.yaml",
            {"source": {"bucket": "pytorch", "region": "us-east-1"}, "keep_threshold": 10},
        )
        config = load_config(path=path)
        assert config.source.bucket == "pytorch"
        assert config.keep_threshold == 10

    def test_load_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"metadata_batch_size": 8}), encoding="utf-8")
        assert load_config(path=str(path)).metadata_batch_size == 8

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = _write_yaml(tmp_path / "config.yaml", {"source": {"bucket": "from-file"}})
        monkeypatch.setenv("WHEELINDEX_SOURCE__BUCKET", "from-env")
        monkeypatch.setenv("WHEELINDEX_KEEP_THRESHOLD", "7")
        monkeypatch.setenv("WHEELINDEX_TIMING__ENRICHMENT_DEADLINE_SECONDS", "12.5")
        config = load_config(path=path)
        assert config.source.bucket == "from-env"
        assert config.keep_threshold == 7
        assert config.timing.enrichment_deadline_seconds == 12.5

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("WHEELINDEX_KEEP_THRESHOLD", "7")
        config = load_config(cli_overrides={"keep_threshold": 3, "source": {"region": "eu-west-1"}})
        assert config.keep_threshold == 3
        assert config.source.region == "eu-west-1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(path=str(tmp_path / "absent.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("source: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path=str(path))

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path=str(path))

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            load_config(path=str(path))

    def test_validation_errors_are_wrapped(self, tmp_path):
        path = _write_yaml(tmp_path / "config.yaml", {"keep_threshold": -3})
        with pytest.raises(ConfigurationError):
            validate_config_file(path)

    def test_schema_export(self):
        schema = export_config_schema()
        assert "feeds" in schema["properties"]


class TestEnsureRunnable:
    """Settings checked before any feed runs."""

    def test_missing_bucket(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ensure_runnable(IndexConfig())
        assert exc_info.value.field == "source.bucket"

    def test_missing_region(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ensure_runnable(IndexConfig(source={"bucket": "b"}))
        assert exc_info.value.field == "source.region"

    def test_missing_destinations(self):
        config = IndexConfig(source={"bucket": "b", "region": "r"})
        with pytest.raises(ConfigurationError):
            ensure_runnable(config)
        ensure_runnable(config, require_destinations=False)

    def test_complete_config(self, make_config):
        ensure_runnable(make_config())
