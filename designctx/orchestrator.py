"""Context orchestration: parallel facet extraction, merge, caching and fallback."""

from __future__ import annotations

import asyncio
import base64
from concurrent.futures import ThreadPoolExecutor
import functools
import inspect
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .analyzers.technical import TechnicalContextAnalyzer
from .config import DesignCtxConfig, ExtractionConfig
from .errors import CacheFault, ExtractionFault, OrchestrationFault
from .extractors.base import ComponentMapper, LayoutAnalyzer, NodeParser, PrototypeMapper
from .extractors.components import DefaultComponentMapper
from .extractors.layout import DefaultLayoutAnalyzer
from .extractors.nodes import DefaultNodeParser
from .extractors.prototypes import DefaultPrototypeMapper
from .extractors.style_models import StyleSystem
from .extractors.styles import StyleExtractor
from .failsafe import build_fallback_context, format_reason, utc_timestamp
from .logging import get_logger
from .metrics import DEFAULT_MAX_SAMPLES, ExtractionMetrics
from .models import DesignContext, DesignDocument, ExtractionInfo, FileMetadata
from .rules import match_intent
from .stores import CacheStore, ContextCache

FACET_WEIGHT = 0.25
COMPLETENESS_BONUS = 0.25
# Facets read straight from the design tree; the technical facet is derived analysis.
DESIGN_FACETS = frozenset({"nodes", "styles", "components", "layout", "prototypes"})


@dataclass
class _Facet:
    name: str
    call: Callable[[], Any]
    default: Callable[[], Any]


def build_cache_key(metadata: FileMetadata, options: Optional[Mapping[str, Any]]) -> str:
    """``context:{fileId}:{version}:{base64(JSON(options))}``."""
    serialized = json.dumps(
        dict(options or {}), separators=(",", ":"), ensure_ascii=False, default=str
    )
    fingerprint = base64.b64encode(serialized.encode("utf-8")).decode("ascii")
    return f"context:{metadata.id}:{metadata.version}:{fingerprint}"


def context_confidence(nodes: Sequence[Any], styles: Mapping[str, Any], components: Mapping[str, Any]) -> float:
    """0.25 per non-empty facet among nodes/styles/components, plus 0.25 when all are present."""
    present = sum(1 for facet in (nodes, styles, components) if facet)
    score = FACET_WEIGHT * present
    if present == 3:
        score += COMPLETENESS_BONUS
    return min(score, 1.0)


def detect_intents(nodes: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Match every frame with children against the ordered intent table."""
    intents: List[Dict[str, Any]] = []
    for node in nodes:
        if node.get("type") != "FRAME" or not node.get("children"):
            continue
        matched = match_intent(str(node.get("name") or ""))
        if matched is None:
            continue
        intent, confidence = matched
        intents.append({"node_id": node.get("id"), "intent": intent, "confidence": confidence})
    return intents


class ContextOrchestrator:
    """Fans out to every facet extractor and merges their output into one context.

    ``extract_context`` never raises: failed facets fall back to empty values,
    and a failed merge yields a low-confidence fallback context.
    """

    def __init__(
        self,
        config: DesignCtxConfig | None = None,
        *,
        cache: CacheStore | None = None,
        node_parser: NodeParser | None = None,
        style_extractor: StyleExtractor | None = None,
        component_mapper: ComponentMapper | None = None,
        layout_analyzer: LayoutAnalyzer | None = None,
        prototype_mapper: PrototypeMapper | None = None,
        technical_analyzer: TechnicalContextAnalyzer | None = None,
        metrics: ExtractionMetrics | None = None,
    ) -> None:
        self.config = config
        self.defaults = config.extraction if config is not None else ExtractionConfig()
        self.cache: CacheStore = cache if cache is not None else self._default_cache(config)
        self.node_parser = node_parser or DefaultNodeParser()
        self.style_extractor = style_extractor or StyleExtractor()
        self.component_mapper = component_mapper or DefaultComponentMapper()
        self.layout_analyzer = layout_analyzer or DefaultLayoutAnalyzer()
        self.prototype_mapper = prototype_mapper or DefaultPrototypeMapper()
        self.technical_analyzer = technical_analyzer or TechnicalContextAnalyzer()
        self.metrics = metrics or ExtractionMetrics(
            config.metrics.max_samples if config is not None else DEFAULT_MAX_SAMPLES
        )
        self.logger = get_logger("orchestrator")
        self._cache_connected = False

    async def connect(self) -> None:
        try:
            await _resolve(self.cache.connect())
        except Exception as exc:
            self._log_cache_fault("connect", exc)
            return
        self._cache_connected = True

    async def close(self) -> None:
        """Drop accumulated metrics and disconnect from the cache store."""
        self.metrics.clear()
        try:
            await _resolve(self.cache.disconnect())
        except Exception as exc:
            self._log_cache_fault("disconnect", exc)
        self._cache_connected = False
        self.logger.info("Context orchestrator closed")

    async def extract_context(
        self,
        document: DesignDocument | Mapping[str, Any],
        options: Optional[Mapping[str, Any]] = None,
    ) -> DesignContext:
        """Extract the unified design and technical context for a document."""
        start = time.perf_counter()
        try:
            design = (
                document if isinstance(document, DesignDocument) else DesignDocument.from_dict(document)
            )
        except Exception as exc:
            self.logger.error("Rejected design document: %s", exc)
            return build_fallback_context(document, exc)

        settings = self.defaults.merged(options)
        key = build_cache_key(design.metadata, options)

        if settings.enable_caching:
            cached = await self._read_cache(key)
            if cached is not None:
                self.logger.info("Using cached context %s", key)
                return self._finish(cached, start, cached=True, settings=settings)

        self.logger.info(
            "Extracting context for %s (%s)", design.metadata.id, design.metadata.name
        )
        results, failures = await self._fan_out(design, options, settings)

        try:
            context = self._merge(design, results, failures)
        except Exception as exc:
            self.logger.error("Context merge failed: %s", exc, exc_info=True)
            return build_fallback_context(design, exc)

        context = self._finish(context, start, cached=False, settings=settings)
        if context.extraction.failed_facets:
            self.logger.info(
                "Not caching degraded context (failed: %s)",
                ", ".join(context.extraction.failed_facets),
            )
        elif settings.enable_caching:
            await self._write_cache(key, context, settings.cache_ttl)
        self.logger.info(
            "Context extraction complete in %.3fs (confidence %.2f)",
            context.extraction.processing_time or 0.0,
            context.extraction.confidence,
        )
        return context

    def performance_metrics(self) -> Dict[str, Any]:
        return self.metrics.summary()

    def health_status(self) -> Dict[str, Any]:
        cache_info: Dict[str, Any] = {
            "store": type(self.cache).__name__,
            "connected": self._cache_connected,
        }
        if isinstance(self.cache, ContextCache):
            cache_info["entries"] = len(self.cache)
            cache_info["max_entries"] = self.cache.max_entries
        return {
            "status": "healthy",
            "extractors": {
                "node_parser": type(self.node_parser).__name__,
                "style_extractor": type(self.style_extractor).__name__,
                "component_mapper": type(self.component_mapper).__name__,
                "layout_analyzer": type(self.layout_analyzer).__name__,
                "prototype_mapper": type(self.prototype_mapper).__name__,
                "technical_analyzer": type(self.technical_analyzer).__name__,
            },
            "cache": cache_info,
            "metrics": self.performance_metrics(),
        }

    # ------------------------------------------------------------------
    # Fan-out

    def _facets(
        self, design: DesignDocument, options: Optional[Mapping[str, Any]]
    ) -> List[_Facet]:
        tree = design.document
        tech_stack = _tech_stack(options, self.config)
        return [
            _Facet("nodes", functools.partial(self.node_parser.parse_nodes, tree, options), list),
            _Facet(
                "styles",
                functools.partial(self.style_extractor.extract_styles, design, None, options),
                dict,
            ),
            _Facet(
                "components",
                functools.partial(self.component_mapper.map_components, tree, options),
                dict,
            ),
            _Facet(
                "layout", functools.partial(self.layout_analyzer.analyze_layout, tree, options), dict
            ),
            _Facet(
                "prototypes",
                functools.partial(self.prototype_mapper.map_prototypes, tree, options),
                dict,
            ),
            _Facet(
                "technical",
                functools.partial(self.technical_analyzer.analyze, design, tech_stack),
                dict,
            ),
        ]

    async def _fan_out(
        self,
        design: DesignDocument,
        options: Optional[Mapping[str, Any]],
        settings: ExtractionConfig,
    ) -> tuple[Dict[str, Any], List[str]]:
        facets = self._facets(design, options)
        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(
            max_workers=settings.max_concurrent_extractions,
            thread_name_prefix="designctx-facet",
        ) as executor:
            outcomes = await asyncio.gather(
                *(self._run_facet(loop, executor, facet) for facet in facets),
                return_exceptions=True,
            )

        results: Dict[str, Any] = {}
        failures: List[str] = []
        for facet, outcome in zip(facets, outcomes):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                fault = outcome if isinstance(outcome, ExtractionFault) else ExtractionFault(
                    facet.name, format_reason(outcome) or type(outcome).__name__
                )
                self.logger.warning("Facet extraction failed: %s", fault)
                failures.append(facet.name)
                results[facet.name] = facet.default()
            else:
                results[facet.name] = outcome
        return results, failures

    async def _run_facet(
        self, loop: asyncio.AbstractEventLoop, executor: ThreadPoolExecutor, facet: _Facet
    ) -> Any:
        result = await loop.run_in_executor(executor, facet.call)
        return await _resolve(result)

    # ------------------------------------------------------------------
    # Merge

    def _merge(
        self, design: DesignDocument, results: Mapping[str, Any], failures: Sequence[str]
    ) -> DesignContext:
        if DESIGN_FACETS.issubset(failures):
            raise OrchestrationFault("every design facet extractor failed")

        nodes = list(results.get("nodes") or [])
        styles = self._style_slot(results.get("styles"))
        components = dict(results.get("components") or {})
        layout = dict(results.get("layout") or {})
        prototypes = dict(results.get("prototypes") or {})
        technical = dict(results.get("technical") or {})

        intents = detect_intents(nodes)
        context = DesignContext(
            file=design.metadata.to_dict(),
            nodes=nodes,
            styles=styles,
            components=components,
            layout=layout,
            prototypes=prototypes,
            semantics={
                "intents": intents,
                "user_flows": list(prototypes.get("flows") or []),
            },
            design_tokens=_design_tokens(styles, components),
            accessibility=_accessibility(nodes, styles, intents),
            technical=technical,
            extraction=ExtractionInfo(
                timestamp=utc_timestamp(),
                confidence=context_confidence(nodes, styles, components),
            ),
        )
        if failures:
            context.extraction.failed_facets = list(failures)
        return context

    def _style_slot(self, result: Any) -> Dict[str, Any]:
        if isinstance(result, StyleSystem):
            if result.is_fallback:
                self.logger.warning("Style extraction degraded: %s", result.error)
                return {}
            return result.to_dict()
        return dict(result or {})

    def _finish(
        self, context: DesignContext, start: float, *, cached: bool, settings: ExtractionConfig
    ) -> DesignContext:
        context.extraction.processing_time = round(time.perf_counter() - start, 6)
        context.extraction.cached = cached
        if settings.enable_performance_metrics:
            self.metrics.record(
                context.extraction.processing_time,
                cached=cached,
                context_size=len(json.dumps(context.to_dict(), default=str)),
            )
        return context

    # ------------------------------------------------------------------
    # Cache

    async def _read_cache(self, key: str) -> Optional[DesignContext]:
        try:
            await self._ensure_connected()
            raw = await _resolve(self.cache.get(key))
            if raw is None:
                return None
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            payload = json.loads(raw)
            if not isinstance(payload, dict):
                raise CacheFault(f"cached value for {key} is not a context")
            return DesignContext.from_dict(payload)
        except Exception as exc:
            self._log_cache_fault("read", exc)
            return None

    async def _write_cache(self, key: str, context: DesignContext, ttl: int) -> None:
        try:
            await self._ensure_connected()
            await _resolve(self.cache.setex(key, ttl, json.dumps(context.to_dict(), default=str)))
            self.logger.debug("Context cached under %s", key)
        except Exception as exc:
            self._log_cache_fault("write", exc)

    async def _ensure_connected(self) -> None:
        if not self._cache_connected:
            await _resolve(self.cache.connect())
            self._cache_connected = True

    def _log_cache_fault(self, operation: str, exc: Exception) -> None:
        fault = exc if isinstance(exc, CacheFault) else CacheFault(f"cache {operation} failed: {exc}")
        self.logger.warning("%s", fault)

    @staticmethod
    def _default_cache(config: DesignCtxConfig | None) -> ContextCache:
        if config is None:
            return ContextCache()
        return ContextCache(config.cache.path, max_entries=config.cache.max_entries)


def _design_tokens(styles: Mapping[str, Any], components: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "colors": styles.get("colors", {}),
        "typography": styles.get("typography", {}),
        "spacing": styles.get("spacing", {}),
        "effects": styles.get("effects", {}),
        "layout": styles.get("layout", {}),
        "components": components.get("design_system", {}),
        "variations": components.get("variants", []),
    }


def _accessibility(
    nodes: Sequence[Mapping[str, Any]],
    styles: Mapping[str, Any],
    intents: Sequence[Mapping[str, Any]],
) -> Dict[str, Any]:
    colors = styles.get("colors") or {}
    contrast = colors.get("accessibility") or {}
    typography = styles.get("typography") or {}
    hierarchy = typography.get("hierarchy") or []
    return {
        "color_contrast": {
            "analyzed": bool(contrast),
            "compliant": list(contrast.get("compliant") or []),
            "violations": list(contrast.get("violations") or []),
        },
        "text_hierarchy": {
            "text_node_count": sum(1 for node in nodes if node.get("type") == "TEXT"),
            "headings": [item for item in hierarchy if str(item.get("level", "")).startswith("h")],
        },
        "interactive_elements": [node.get("id") for node in nodes if node.get("interactive")],
        "landmarks": [item["node_id"] for item in intents if item.get("intent") == "navigation"],
    }


def _tech_stack(options: Optional[Mapping[str, Any]], config: DesignCtxConfig | None) -> Optional[str]:
    if options:
        value = options.get("techStack")
        if isinstance(value, str) and value.strip():
            return value
    if config is not None:
        return config.analysis.tech_stack
    return None


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


__all__ = [
    "ContextOrchestrator",
    "build_cache_key",
    "context_confidence",
    "detect_intents",
]
