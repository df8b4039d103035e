"""Heuristic engineering-complexity assessment of a design tree."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

from ..color import round_half_up
from ..extractors.prototypes import is_animated, iter_actions
from ..logging import get_logger
from ..models import DesignDocument, DocumentNode
from ..rules import (
    BASE_HOURS,
    COMPLEX_HORIZONTAL_CONSTRAINTS,
    COMPLEX_VERTICAL_CONSTRAINTS,
    COMPONENT_NODE_TYPES,
    DATA_FLOW_LEVELS,
    DATA_FLOW_REQUIREMENTS,
    DEFAULT_DATA_FLOW,
    DEFAULT_STRUCTURAL_LEVEL,
    ESTIMATE_SHARES,
    ESTIMATE_SURCHARGES,
    FACTOR_RECOMMENDATIONS,
    FACTOR_THRESHOLDS,
    FACTOR_WEIGHTS,
    RECOMMENDATION_MIN_SCORE,
    STRUCTURAL_LEVELS,
    VISUAL_NODE_TYPES,
    classify_breakpoint,
    detect_framework,
    level_for_score,
    recommend_architecture,
)
from ..traversal import walk_with_parent

_TOP_LEVEL_PARENTS = frozenset({"DOCUMENT", "CANVAS"})
MAX_LAYOUT_COMPLEXITY = 5


@dataclass
class StructuralMetrics:
    """Counts gathered in a single depth-tracked walk of the tree."""

    node_count: int = 0
    element_count: int = 0
    component_count: int = 0
    max_depth: int = 0
    auto_layout_count: int = 0
    complex_constraint_count: int = 0
    form_count: int = 0
    input_count: int = 0
    text_count: int = 0
    instance_count: int = 0
    distinct_component_refs: int = 0
    variant_count: int = 0
    prototype_interaction_count: int = 0
    animated_transition_count: int = 0
    effect_count: int = 0
    gradient_fill_count: int = 0
    image_fill_count: int = 0
    max_repeated_instances: int = 0
    breakpoint_count: int = 0

    @property
    def layout_complexity(self) -> float:
        raw = (
            0.5 * self.auto_layout_count
            + 0.3 * self.complex_constraint_count
            + 0.2 * self.max_depth
        )
        return min(raw, MAX_LAYOUT_COMPLEXITY)

    def factor_inputs(self) -> Dict[str, Dict[str, float]]:
        """Metric values fed into each qualitative factor."""
        return {
            "visual": {
                "element_count": self.element_count,
                "layout_complexity": self.layout_complexity,
                "animation_needs": self.animated_transition_count,
                "responsive_breakpoints": self.breakpoint_count,
                "custom_styling": self.effect_count + self.gradient_fill_count,
            },
            "interaction": {
                "prototype_interactions": self.prototype_interaction_count,
                "instance_count": self.instance_count,
                "input_count": self.input_count,
            },
            "data": {
                "form_count": self.form_count,
                "input_count": self.input_count,
                "max_repeated_instances": self.max_repeated_instances,
            },
            "state": {
                "variant_count": self.variant_count,
                "form_count": self.form_count,
                "animated_transitions": self.animated_transition_count,
            },
            "integration": {
                "component_count": self.component_count,
                "distinct_component_refs": self.distinct_component_refs,
                "image_fills": self.image_fill_count,
            },
        }


@dataclass
class ComplexityFactor:
    score: float
    level: str
    confidence: float
    metrics: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "confidence": self.confidence,
            "metrics": dict(self.metrics),
        }


@dataclass
class DevelopmentEstimate:
    estimated_hours: int
    breakdown: Dict[str, int]
    confidence: float
    surcharges: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ComplexityReport:
    factors: Dict[str, ComplexityFactor]
    overall: ComplexityFactor
    estimate: DevelopmentEstimate
    recommendations: List[str]
    metrics: StructuralMetrics
    structural_complexity: str
    data_flow: Dict[str, Any]
    architecture: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "factors": {name: factor.to_dict() for name, factor in self.factors.items()},
            "overall": self.overall.to_dict(),
            "estimate": self.estimate.to_dict(),
            "recommendations": list(self.recommendations),
            "metrics": asdict(self.metrics),
            "structural_complexity": self.structural_complexity,
            "data_flow": dict(self.data_flow),
            "architecture": self.architecture,
        }


def collect_metrics(root: Optional[DocumentNode]) -> StructuralMetrics:
    """Walk the tree once and count everything the scoring needs."""
    metrics = StructuralMetrics()
    component_refs: Set[str] = set()
    breakpoints: Set[str] = set()

    for node, parent, depth in walk_with_parent(root):
        metrics.node_count += 1
        metrics.max_depth = max(metrics.max_depth, depth)

        if node.type in VISUAL_NODE_TYPES:
            metrics.element_count += 1
        if node.type in COMPONENT_NODE_TYPES:
            metrics.component_count += 1
        if node.type == "TEXT":
            metrics.text_count += 1
        if node.type == "INSTANCE":
            metrics.instance_count += 1
            component_id = node.get("componentId")
            if component_id:
                component_refs.add(str(component_id))
        if node.type == "COMPONENT_SET":
            metrics.variant_count += len(node.children)

        if node.layout_mode is not None:
            metrics.auto_layout_count += 1
        if _has_complex_constraint(node.constraints):
            metrics.complex_constraint_count += 1

        lowered = node.name.lower()
        if "form" in lowered:
            metrics.form_count += 1
        elif "input" in lowered:
            metrics.input_count += 1

        for reaction in node.reactions:
            metrics.prototype_interaction_count += 1
            if any(is_animated(action) for action in iter_actions(reaction)):
                metrics.animated_transition_count += 1
        if node.get("transitionNodeID"):
            metrics.prototype_interaction_count += 1

        metrics.effect_count += sum(1 for effect in node.effects if effect.get("visible") is not False)
        for fill in node.fills:
            fill_type = str(fill.get("type") or "")
            if fill_type.startswith("GRADIENT_"):
                metrics.gradient_fill_count += 1
            elif fill_type == "IMAGE":
                metrics.image_fill_count += 1

        metrics.max_repeated_instances = max(
            metrics.max_repeated_instances, _largest_instance_group(node)
        )

        if node.type == "FRAME" and (parent is None or parent.type in _TOP_LEVEL_PARENTS):
            box = node.get("absoluteBoundingBox")
            width = box.get("width") if isinstance(box, Mapping) else None
            if isinstance(width, (int, float)) and not isinstance(width, bool):
                breakpoints.add(classify_breakpoint(width))

    metrics.distinct_component_refs = len(component_refs)
    metrics.breakpoint_count = len(breakpoints)
    return metrics


def classify_structure(metrics: StructuralMetrics) -> str:
    for elements, components, depth, level in STRUCTURAL_LEVELS:
        if (
            metrics.element_count > elements
            or metrics.component_count > components
            or metrics.max_depth > depth
        ):
            return level
    return DEFAULT_STRUCTURAL_LEVEL


def classify_data_flow(metrics: StructuralMetrics) -> Dict[str, Any]:
    complexity, pattern = DEFAULT_DATA_FLOW
    for forms, inputs, level, flow_pattern in DATA_FLOW_LEVELS:
        if metrics.form_count > forms or metrics.input_count > inputs:
            complexity, pattern = level, flow_pattern
            break
    return {
        "complexity": complexity,
        "pattern": pattern,
        "requirements": list(DATA_FLOW_REQUIREMENTS.get(pattern, ())),
        "form_count": metrics.form_count,
        "input_count": metrics.input_count,
    }


def score_metrics(values: Mapping[str, float], thresholds: Mapping[str, Any]) -> float:
    """Average the 0-3 ordinal of every metric that has thresholds."""
    total = 0
    counted = 0
    for name, value in values.items():
        bounds = thresholds.get(name)
        if bounds is None:
            continue
        low, medium, high = bounds
        if value >= high:
            total += 3
        elif value >= medium:
            total += 2
        elif value >= low:
            total += 1
        counted += 1
    return total / counted if counted else 0.0


class ComplexityAnalyzer:
    """Scores five qualitative complexity factors and estimates effort."""

    def __init__(self) -> None:
        self.logger = get_logger("analyzers.complexity")

    def analyze_complexity(
        self, document: DesignDocument | DocumentNode | None, tech_stack: Optional[str] = None
    ) -> ComplexityReport:
        root = document.document if isinstance(document, DesignDocument) else document
        metrics = collect_metrics(root)
        confidence = 0.9 if metrics.node_count else 0.0

        factors: Dict[str, ComplexityFactor] = {}
        for name, values in metrics.factor_inputs().items():
            score = score_metrics(values, FACTOR_THRESHOLDS[name])
            factors[name] = ComplexityFactor(
                score=score,
                level=level_for_score(score),
                confidence=confidence,
                metrics=dict(values),
            )

        weighted = sum(factors[name].score * weight for name, weight in FACTOR_WEIGHTS.items())
        overall_score = int(round_half_up(weighted))
        overall = ComplexityFactor(
            score=overall_score,
            level=level_for_score(overall_score),
            confidence=confidence,
            metrics={"weighted_score": round_half_up(weighted, 2)},
        )

        structural = classify_structure(metrics)
        report = ComplexityReport(
            factors=factors,
            overall=overall,
            estimate=estimate_development_time(overall.level, factors, metrics.node_count > 0),
            recommendations=_recommendations(factors),
            metrics=metrics,
            structural_complexity=structural,
            data_flow=classify_data_flow(metrics),
            architecture=recommend_architecture(detect_framework(tech_stack), structural),
        )
        self.logger.debug(
            "Complexity %s (score %s) over %d nodes",
            overall.level,
            overall.score,
            metrics.node_count,
        )
        return report


def estimate_development_time(
    level: str, factors: Mapping[str, ComplexityFactor], has_nodes: bool = True
) -> DevelopmentEstimate:
    base = BASE_HOURS.get(level, BASE_HOURS["medium"])
    total = float(base)
    applied: List[str] = []
    for factor, bound, multiplier in ESTIMATE_SURCHARGES:
        item = factors.get(factor)
        if item is not None and item.score > bound:
            total *= multiplier
            applied.append(factor)

    breakdown = {"development": base}
    for share, ratio in ESTIMATE_SHARES.items():
        breakdown[share] = int(round_half_up(total * ratio))

    if has_nodes:
        scored = sum(1 for item in factors.values() if item.score > 0)
        confidence = min(0.95, round_half_up(0.5 + 0.1 * scored, 2))
    else:
        confidence = 0.3
    return DevelopmentEstimate(
        estimated_hours=int(round_half_up(total)),
        breakdown=breakdown,
        confidence=confidence,
        surcharges=applied,
    )


def _recommendations(factors: Mapping[str, ComplexityFactor]) -> List[str]:
    return [
        FACTOR_RECOMMENDATIONS[name]
        for name, factor in factors.items()
        if factor.score >= RECOMMENDATION_MIN_SCORE and name in FACTOR_RECOMMENDATIONS
    ]


def _has_complex_constraint(constraints: Mapping[str, Any]) -> bool:
    return (
        constraints.get("horizontal") in COMPLEX_HORIZONTAL_CONSTRAINTS
        or constraints.get("vertical") in COMPLEX_VERTICAL_CONSTRAINTS
    )


def _largest_instance_group(node: DocumentNode) -> int:
    groups: Dict[str, int] = {}
    for child in node.children:
        if child.type != "INSTANCE":
            continue
        key = str(child.get("componentId") or "")
        if key:
            groups[key] = groups.get(key, 0) + 1
    return max(groups.values(), default=0)


__all__ = [
    "ComplexityAnalyzer",
    "ComplexityFactor",
    "ComplexityReport",
    "DevelopmentEstimate",
    "StructuralMetrics",
    "classify_data_flow",
    "classify_structure",
    "collect_metrics",
    "estimate_development_time",
    "score_metrics",
]
