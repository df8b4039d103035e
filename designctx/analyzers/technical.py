"""Technical context: architecture, state, performance, testing and security profile."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..logging import get_logger
from ..models import DesignDocument, DocumentNode
from ..rules import (
    COMPONENT_BUNDLE_KB,
    COVERAGE_TARGETS,
    DEFAULT_STATE_LIBRARY,
    FRAMEWORK_BUNDLE_KB,
    LAZY_LOADING_MIN_NODES,
    LAZY_LOADING_MIN_SCREENS,
    STATE_LIBRARIES,
    detect_framework,
)
from .complexity import ComplexityAnalyzer, ComplexityReport, StructuralMetrics


class TechnicalContextAnalyzer:
    """Derives the engineering profile of a design from its complexity report."""

    def __init__(self, complexity_analyzer: ComplexityAnalyzer | None = None) -> None:
        self.complexity_analyzer = complexity_analyzer or ComplexityAnalyzer()
        self.logger = get_logger("analyzers.technical")

    def analyze(
        self, document: DesignDocument | DocumentNode, tech_stack: Optional[str] = None
    ) -> Dict[str, Any]:
        framework = detect_framework(tech_stack)
        report = self.complexity_analyzer.analyze_complexity(document, tech_stack)
        metrics = report.metrics
        self.logger.debug("Building technical context for framework %s", framework)
        return {
            "framework": framework,
            "architecture": {
                "recommended_pattern": report.architecture,
                "structural_complexity": report.structural_complexity,
                "data_flow": dict(report.data_flow),
                "state_architecture": _state_architecture(report),
            },
            "complexity": report.to_dict(),
            "state_management": _state_management(framework, report),
            "performance": _performance(framework, metrics),
            "testing": _testing(report),
            "security": _security(metrics),
        }


def _state_architecture(report: ComplexityReport) -> str:
    flow = report.data_flow["complexity"]
    if flow == "complex" or report.structural_complexity == "complex":
        return "centralized-store"
    if flow == "medium":
        return "lifted-component-state"
    return "local-component-state"


def _state_management(framework: str, report: ComplexityReport) -> Dict[str, Any]:
    metrics = report.metrics
    flow = report.data_flow["complexity"]
    return {
        "local_state": True,
        "global_state": flow == "complex",
        "server_state": metrics.form_count > 0,
        "variant_state": metrics.variant_count > 0,
        "library": STATE_LIBRARIES.get(framework, {}).get(flow, DEFAULT_STATE_LIBRARY),
    }


def _performance(framework: str, metrics: StructuralMetrics) -> Dict[str, Any]:
    component_cost = COMPONENT_BUNDLE_KB * max(metrics.distinct_component_refs, metrics.component_count)
    return {
        "estimated_bundle_kb": FRAMEWORK_BUNDLE_KB.get(framework, 0) + component_cost,
        "lazy_loading": (
            metrics.breakpoint_count >= LAZY_LOADING_MIN_SCREENS
            or metrics.node_count >= LAZY_LOADING_MIN_NODES
        ),
        "image_optimization": metrics.image_fill_count > 0,
        "animation_budget": metrics.animated_transition_count > 0,
        "virtualized_lists": metrics.max_repeated_instances >= 8,
    }


def _testing(report: ComplexityReport) -> Dict[str, Any]:
    metrics = report.metrics
    kinds: List[str] = ["unit"]
    if report.overall.level != "simple" or metrics.form_count > 0:
        kinds.append("integration")
    if metrics.prototype_interaction_count > 0:
        kinds.append("e2e")
    if metrics.variant_count > 0 or metrics.effect_count > 0:
        kinds.append("visual-regression")
    return {
        "kinds": kinds,
        "coverage_target": COVERAGE_TARGETS.get(report.overall.level, COVERAGE_TARGETS["medium"]),
        "accessibility_checks": metrics.text_count > 0 or metrics.input_count > 0,
    }


def _security(metrics: StructuralMetrics) -> Dict[str, Any]:
    accepts_input = metrics.form_count > 0 or metrics.input_count > 0
    return {
        "input_validation": accepts_input,
        "csrf_protection": metrics.form_count > 0,
        "xss_prevention": accepts_input,
    }


__all__ = ["TechnicalContextAnalyzer"]
