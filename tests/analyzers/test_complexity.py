"""Tests for the complexity analyzer."""

from __future__ import annotations

import pytest

from designctx.analyzers.complexity import (
    ComplexityAnalyzer,
    ComplexityFactor,
    StructuralMetrics,
    classify_data_flow,
    classify_structure,
    collect_metrics,
    estimate_development_time,
    score_metrics,
)
from designctx.models import DesignDocument
from tests._fixtures.design_builder import DesignBuilder, frame, node, solid


def test_classify_structure_thresholds() -> None:
    assert classify_structure(StructuralMetrics(element_count=60)) == "complex"
    assert classify_structure(StructuralMetrics(element_count=60, max_depth=1)) == "complex"
    assert classify_structure(StructuralMetrics(component_count=11)) == "complex"
    assert classify_structure(StructuralMetrics(max_depth=9)) == "complex"
    assert classify_structure(StructuralMetrics(element_count=21)) == "medium"
    assert classify_structure(StructuralMetrics(component_count=6)) == "medium"
    assert classify_structure(StructuralMetrics(max_depth=6)) == "medium"
    assert (
        classify_structure(StructuralMetrics(element_count=10, component_count=0, max_depth=2))
        == "simple"
    )
    assert classify_structure(StructuralMetrics(element_count=20, component_count=5, max_depth=5)) == "simple"


@pytest.mark.parametrize(
    ("forms", "inputs", "complexity", "pattern"),
    [
        (3, 0, "complex", "global-state-management"),
        (0, 9, "complex", "global-state-management"),
        (1, 0, "medium", "component-state"),
        (0, 4, "medium", "component-state"),
        (0, 3, "simple", "local-state"),
    ],
)
def test_classify_data_flow(forms: int, inputs: int, complexity: str, pattern: str) -> None:
    flow = classify_data_flow(StructuralMetrics(form_count=forms, input_count=inputs))

    assert flow["complexity"] == complexity
    assert flow["pattern"] == pattern
    assert flow["requirements"]


def test_score_metrics_averages_ordinals() -> None:
    thresholds = {"a": (5, 15, 30), "b": (1, 3, 5)}

    assert score_metrics({"a": 30, "b": 0}, thresholds) == 1.5
    assert score_metrics({"a": 15, "b": 3}, thresholds) == 2.0
    assert score_metrics({"a": 4, "unknown": 100}, thresholds) == 0.0
    assert score_metrics({}, thresholds) == 0.0


def test_collect_metrics_counts_structure(sample_payload: dict) -> None:
    metrics = collect_metrics(DesignDocument.from_dict(sample_payload).document)

    assert metrics.node_count == 11
    assert metrics.element_count == 7
    assert metrics.component_count == 2
    assert metrics.max_depth == 3
    assert metrics.auto_layout_count == 1
    assert metrics.input_count == 1
    assert metrics.form_count == 0
    assert metrics.text_count == 3
    assert metrics.instance_count == 1
    assert metrics.distinct_component_refs == 1
    assert metrics.prototype_interaction_count == 1
    assert metrics.animated_transition_count == 1
    assert metrics.breakpoint_count == 2


def test_collect_metrics_name_heuristics_and_constraints(design_builder: DesignBuilder) -> None:
    design_builder.add(
        frame(
            "f",
            "Signup Form",
            [
                node("i1", "RECTANGLE", "Email Input", constraints={"horizontal": "LEFT_RIGHT", "vertical": "TOP"}),
                node("i2", "RECTANGLE", "Password input", constraints={"horizontal": "LEFT", "vertical": "CENTER"}),
                node("i3", "RECTANGLE", "Form Input"),
                node("x", "RECTANGLE", "Divider", constraints={"horizontal": "LEFT", "vertical": "TOP"}),
            ],
        )
    )

    metrics = collect_metrics(design_builder.document().document)

    # "Form Input" counts as a form only
    assert metrics.form_count == 2
    assert metrics.input_count == 2
    assert metrics.complex_constraint_count == 2


def test_collect_metrics_counts_fills_effects_and_repeats(design_builder: DesignBuilder) -> None:
    design_builder.add(
        frame(
            "list",
            "List",
            [node(f"row{index}", "INSTANCE", componentId="row") for index in range(5)]
            + [node("other", "INSTANCE", componentId="card")],
            fills=[{"type": "GRADIENT_LINEAR"}, {"type": "IMAGE"}, solid(1, 1, 1)],
            effects=[{"type": "DROP_SHADOW"}, {"type": "LAYER_BLUR", "visible": False}],
        ),
        node("set", "COMPONENT_SET", "Chip", [node("c1", "COMPONENT"), node("c2", "COMPONENT")]),
    )

    metrics = collect_metrics(design_builder.document().document)

    assert metrics.max_repeated_instances == 5
    assert metrics.distinct_component_refs == 2
    assert metrics.gradient_fill_count == 1
    assert metrics.image_fill_count == 1
    assert metrics.effect_count == 1
    assert metrics.variant_count == 2


def test_layout_complexity_is_capped() -> None:
    assert StructuralMetrics(auto_layout_count=2, complex_constraint_count=0, max_depth=5).layout_complexity == 2.0
    assert StructuralMetrics(auto_layout_count=40).layout_complexity == 5


def test_estimate_uses_base_hours_and_shares() -> None:
    factors = {
        name: ComplexityFactor(score=1.0, level="simple", confidence=0.9)
        for name in ("visual", "interaction", "data", "state", "integration")
    }

    estimate = estimate_development_time("complex", factors)

    assert estimate.estimated_hours == 56
    assert estimate.breakdown == {"development": 56, "testing": 17, "optimization": 8, "documentation": 6}
    assert estimate.surcharges == []
    assert estimate.confidence == 0.95


def test_estimate_applies_surcharges_multiplicatively() -> None:
    factors = {
        "interaction": ComplexityFactor(score=8, level="enterprise", confidence=0.9),
        "visual": ComplexityFactor(score=9, level="enterprise", confidence=0.9),
        "data": ComplexityFactor(score=7, level="complex", confidence=0.9),
    }

    estimate = estimate_development_time("simple", factors)

    # 8 * 1.3 * 1.2 * 1.15 = 14.352
    assert estimate.estimated_hours == 14
    assert estimate.surcharges == ["interaction", "visual", "data"]
    assert estimate.breakdown["development"] == 8


def test_estimate_for_empty_document_has_low_confidence() -> None:
    assert estimate_development_time("simple", {}, has_nodes=False).confidence == 0.3


def test_analyze_complexity_report(sample_payload: dict) -> None:
    report = ComplexityAnalyzer().analyze_complexity(DesignDocument.from_dict(sample_payload), "react")

    assert set(report.factors) == {"visual", "interaction", "data", "state", "integration"}
    for factor in report.factors.values():
        assert 0 <= factor.score <= 3
        assert factor.confidence == 0.9
    assert report.structural_complexity == "simple"
    assert report.architecture == "functional-components"
    assert report.data_flow["pattern"] == "local-state"
    assert isinstance(report.overall.score, int)
    assert report.overall.level == "simple"
    assert report.overall.score == 0
    assert report.estimate.breakdown["development"] == 8
    assert report.recommendations == []
    data = report.to_dict()
    assert data["metrics"]["element_count"] == 7
    assert data["overall"]["metrics"]["weighted_score"] >= 0


def test_overall_score_is_weighted_and_rounded(sample_payload: dict) -> None:
    report = ComplexityAnalyzer().analyze_complexity(DesignDocument.from_dict(sample_payload))
    weights = {"visual": 0.2, "interaction": 0.3, "data": 0.2, "state": 0.2, "integration": 0.1}
    weighted = sum(report.factors[name].score * weight for name, weight in weights.items())

    assert report.overall.metrics["weighted_score"] == pytest.approx(weighted, abs=0.01)
    assert report.overall.score == int(weighted + 0.5)


def test_unknown_framework_defaults_to_component_based(sample_payload: dict) -> None:
    report = ComplexityAnalyzer().analyze_complexity(DesignDocument.from_dict(sample_payload), "svelte")
    assert report.architecture == "component-based"


def test_empty_document_scores_zero_confidence() -> None:
    report = ComplexityAnalyzer().analyze_complexity(None)

    assert report.metrics.node_count == 0
    assert all(factor.confidence == 0.0 for factor in report.factors.values())
    assert report.estimate.confidence == 0.3
    assert report.structural_complexity == "simple"
