from __future__ import annotations

from designctx.analyzers.complexity import ComplexityAnalyzer
from designctx.analyzers.technical import TechnicalContextAnalyzer
from designctx.models import DesignDocument
from tests._fixtures.design_builder import DesignBuilder, frame, node


def test_technical_context_for_react(sample_payload: dict) -> None:
    context = TechnicalContextAnalyzer().analyze(DesignDocument.from_dict(sample_payload), "React 18")

    assert context["framework"] == "react"
    assert context["architecture"]["recommended_pattern"] == "functional-components"
    assert context["architecture"]["structural_complexity"] == "simple"
    assert context["architecture"]["state_architecture"] == "local-component-state"
    assert context["architecture"]["data_flow"]["requirements"] == ["basic-props-passing"]
    assert context["state_management"]["library"] == "useState"
    assert context["state_management"]["global_state"] is False
    assert context["performance"]["estimated_bundle_kb"] == 51
    assert context["performance"]["lazy_loading"] is False
    assert context["testing"] == {
        "kinds": ["unit", "e2e"],
        "coverage_target": 70,
        "accessibility_checks": True,
    }
    assert context["security"] == {
        "input_validation": True,
        "csrf_protection": False,
        "xss_prevention": True,
    }
    assert context["complexity"]["overall"]["level"] == "simple"


def test_technical_context_without_stack_uses_vanilla(sample_payload: dict) -> None:
    context = TechnicalContextAnalyzer().analyze(DesignDocument.from_dict(sample_payload))

    assert context["framework"] == "vanilla"
    assert context["architecture"]["recommended_pattern"] == "component-based"
    assert context["state_management"]["library"] == "framework-native state"
    assert context["performance"]["estimated_bundle_kb"] == 6


def test_form_heavy_design_needs_central_state(design_builder: DesignBuilder) -> None:
    fields = [node(f"in{index}", "RECTANGLE", f"Field Input {index}") for index in range(9)]
    design_builder.add(
        frame("a", "Billing Form", fields),
        frame("b", "Shipping Form", []),
        frame("c", "Contact Form", []),
    )

    context = TechnicalContextAnalyzer().analyze(design_builder.document(), "vue")

    assert context["architecture"]["data_flow"]["pattern"] == "global-state-management"
    assert context["architecture"]["state_architecture"] == "centralized-store"
    assert context["state_management"]["library"] == "pinia"
    assert context["state_management"]["server_state"] is True
    assert context["security"]["csrf_protection"] is True
    assert "integration" in context["testing"]["kinds"]


def test_uses_injected_complexity_analyzer(sample_payload: dict) -> None:
    calls = []

    class RecordingAnalyzer(ComplexityAnalyzer):
        def analyze_complexity(self, document, tech_stack=None):  # type: ignore[override]
            calls.append(tech_stack)
            return super().analyze_complexity(document, tech_stack)

    TechnicalContextAnalyzer(RecordingAnalyzer()).analyze(DesignDocument.from_dict(sample_payload), "angular")

    assert calls == ["angular"]
