"""Configuration loading for designctx (.designctx.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILENAME = ".designctx.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ExtractionConfig:
    """Default extraction options, overridable per request."""

    enable_caching: bool = True
    cache_ttl: int = 3600
    enable_performance_metrics: bool = True
    max_concurrent_extractions: int = 5

    def merged(self, options: Mapping[str, Any] | None) -> "ExtractionConfig":
        """Return a copy with camelCase request options applied on top."""
        if not options:
            return ExtractionConfig(
                enable_caching=self.enable_caching,
                cache_ttl=self.cache_ttl,
                enable_performance_metrics=self.enable_performance_metrics,
                max_concurrent_extractions=self.max_concurrent_extractions,
            )
        enable_caching = _as_bool(options.get("enableCaching"))
        cache_ttl = _as_int(options.get("cacheTTL"))
        metrics = _as_bool(options.get("enablePerformanceMetrics"))
        workers = _as_int(options.get("maxConcurrentExtractions"))
        return ExtractionConfig(
            enable_caching=self.enable_caching if enable_caching is None else enable_caching,
            cache_ttl=self.cache_ttl if cache_ttl is None or cache_ttl <= 0 else cache_ttl,
            enable_performance_metrics=(
                self.enable_performance_metrics if metrics is None else metrics
            ),
            max_concurrent_extractions=(
                self.max_concurrent_extractions if workers is None or workers <= 0 else workers
            ),
        )


@dataclass
class CacheConfig:
    """Settings for the bundled context cache."""

    path: Optional[Path] = None
    max_entries: int = 256


@dataclass
class MetricsConfig:
    """Bounds for the extraction metrics accumulator."""

    max_samples: int = 500


@dataclass
class AnalysisConfig:
    """Technical analysis defaults."""

    tech_stack: Optional[str] = None


@dataclass
class DesignCtxConfig:
    """Represents the settings defined in .designctx.yml."""

    root: Path
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)


def load_config(config_path: Path) -> DesignCtxConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DesignCtxConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    extraction = ExtractionConfig()
    extraction_data = _as_dict(data.get("extraction"))
    if extraction_data:
        enable_caching = _as_bool(extraction_data.get("enable_caching"))
        if enable_caching is not None:
            extraction.enable_caching = enable_caching
        cache_ttl = _as_int(extraction_data.get("cache_ttl"))
        if cache_ttl is not None and cache_ttl > 0:
            extraction.cache_ttl = cache_ttl
        metrics_enabled = _as_bool(extraction_data.get("enable_performance_metrics"))
        if metrics_enabled is not None:
            extraction.enable_performance_metrics = metrics_enabled
        workers = _as_int(extraction_data.get("max_concurrent_extractions"))
        if workers is not None and workers > 0:
            extraction.max_concurrent_extractions = workers

    cache = CacheConfig()
    cache_data = _as_dict(data.get("cache"))
    if cache_data:
        cache_path = _as_str(cache_data.get("path"))
        cache.path = root / cache_path if cache_path else None
        max_entries = _as_int(cache_data.get("max_entries"))
        if max_entries is not None and max_entries > 0:
            cache.max_entries = max_entries

    metrics = MetricsConfig()
    metrics_data = _as_dict(data.get("metrics"))
    if metrics_data:
        max_samples = _as_int(metrics_data.get("max_samples"))
        if max_samples is not None and max_samples > 0:
            metrics.max_samples = max_samples

    analysis_data = _as_dict(data.get("analysis"))
    analysis = AnalysisConfig(tech_stack=_as_str(analysis_data.get("tech_stack")))

    return DesignCtxConfig(
        root=root,
        extraction=extraction,
        cache=cache,
        metrics=metrics,
        analysis=analysis,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "AnalysisConfig",
    "CacheConfig",
    "ConfigError",
    "DesignCtxConfig",
    "ExtractionConfig",
    "MetricsConfig",
    "load_config",
]
