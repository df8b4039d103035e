"""Tests for designctx.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from designctx.config import ConfigError, DesignCtxConfig, ExtractionConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, DesignCtxConfig)
    assert config.root == tmp_path.resolve()
    assert config.extraction == ExtractionConfig()
    assert config.cache.path is None
    assert config.cache.max_entries == 256
    assert config.metrics.max_samples == 500
    assert config.analysis.tech_stack is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".designctx.yml"
    config_file.write_text(
        """
extraction:
  enable_caching: false
  cache_ttl: 120
  enable_performance_metrics: "no"
  max_concurrent_extractions: 2
cache:
  path: .designctx/context_cache.json
  max_entries: 16
metrics:
  max_samples: 50
analysis:
  tech_stack: react
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.extraction.enable_caching is False
    assert config.extraction.cache_ttl == 120
    assert config.extraction.enable_performance_metrics is False
    assert config.extraction.max_concurrent_extractions == 2
    assert config.cache.path == tmp_path.resolve() / ".designctx/context_cache.json"
    assert config.cache.max_entries == 16
    assert config.metrics.max_samples == 50
    assert config.analysis.tech_stack == "react"


def test_load_config_ignores_invalid_values(tmp_path: Path) -> None:
    (tmp_path / ".designctx.yml").write_text(
        """
extraction:
  cache_ttl: -5
  max_concurrent_extractions: many
cache:
  max_entries: 0
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.extraction.cache_ttl == 3600
    assert config.extraction.max_concurrent_extractions == 5
    assert config.cache.max_entries == 256


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".designctx.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".designctx.yml").write_text("extraction: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_extraction_config_merges_request_options() -> None:
    defaults = ExtractionConfig(cache_ttl=60)

    merged = defaults.merged(
        {"enableCaching": False, "cacheTTL": 10, "maxConcurrentExtractions": 1, "extra": "kept out"}
    )

    assert merged.enable_caching is False
    assert merged.cache_ttl == 10
    assert merged.max_concurrent_extractions == 1
    assert merged.enable_performance_metrics is True
    assert defaults.cache_ttl == 60
    assert defaults.merged(None) == defaults
