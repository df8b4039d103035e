"""Fixed rule tables for naming, intent and complexity heuristics.

Tables are ordered; the first matching rule wins.
"""

from __future__ import annotations

from typing import Dict, Tuple

# (substrings, intent, confidence)
INTENT_RULES: Tuple[Tuple[Tuple[str, ...], str, float], ...] = (
    (("login", "signin"), "login_form", 0.8),
    (("nav", "header"), "navigation", 0.7),
    (("button", "cta"), "call_to_action", 0.6),
)

# (substrings, category); named colors matching nothing fall back to "accent"
COLOR_CATEGORY_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("primary",), "primary"),
    (("secondary",), "secondary"),
    (("neutral", "gray", "grey"), "neutral"),
    (("error", "success", "warning", "info"), "semantic"),
)
DEFAULT_COLOR_CATEGORY = "accent"
COLOR_CATEGORIES: Tuple[str, ...] = ("primary", "secondary", "neutral", "semantic", "accent")

WCAG_AA_CONTRAST = 4.5

VISUAL_NODE_TYPES = frozenset(
    {
        "RECTANGLE",
        "TEXT",
        "ELLIPSE",
        "POLYGON",
        "STAR",
        "VECTOR",
        "BOOLEAN_OPERATION",
        "INSTANCE",
        "COMPONENT",
    }
)
COMPONENT_NODE_TYPES = frozenset({"COMPONENT", "INSTANCE"})

COMPLEX_HORIZONTAL_CONSTRAINTS = frozenset({"LEFT_RIGHT", "CENTER"})
COMPLEX_VERTICAL_CONSTRAINTS = frozenset({"TOP_BOTTOM", "CENTER"})

# (elements, components, depth, level): any count strictly above its bound matches
STRUCTURAL_LEVELS: Tuple[Tuple[int, int, int, str], ...] = (
    (50, 10, 8, "complex"),
    (20, 5, 5, "medium"),
)
DEFAULT_STRUCTURAL_LEVEL = "simple"

# (forms, inputs, level, pattern): either count strictly above its bound matches
DATA_FLOW_LEVELS: Tuple[Tuple[int, int, str, str], ...] = (
    (2, 8, "complex", "global-state-management"),
    (0, 3, "medium", "component-state"),
)
DEFAULT_DATA_FLOW = ("simple", "local-state")

# Level bands on a complexity score: (exclusive upper bound, level)
COMPLEXITY_BANDS: Tuple[Tuple[float, str], ...] = (
    (3, "simple"),
    (6, "medium"),
    (8, "complex"),
)
TOP_COMPLEXITY_LEVEL = "enterprise"

FACTOR_WEIGHTS: Dict[str, float] = {
    "visual": 0.2,
    "interaction": 0.3,
    "data": 0.2,
    "state": 0.2,
    "integration": 0.1,
}

# factor -> metric -> (low, medium, high)
FACTOR_THRESHOLDS: Dict[str, Dict[str, Tuple[float, float, float]]] = {
    "visual": {
        "element_count": (5, 15, 30),
        "layout_complexity": (1, 3, 5),
        "animation_needs": (0, 2, 5),
        "responsive_breakpoints": (1, 3, 5),
        "custom_styling": (1, 3, 5),
    },
    "interaction": {
        "prototype_interactions": (1, 5, 10),
        "instance_count": (2, 6, 12),
        "input_count": (1, 4, 8),
    },
    "data": {
        "form_count": (1, 2, 3),
        "input_count": (2, 5, 9),
        "max_repeated_instances": (2, 4, 8),
    },
    "state": {
        "variant_count": (1, 4, 10),
        "form_count": (1, 2, 3),
        "animated_transitions": (1, 3, 6),
    },
    "integration": {
        "component_count": (3, 10, 20),
        "distinct_component_refs": (2, 5, 10),
        "image_fills": (1, 5, 10),
    },
}

BASE_HOURS: Dict[str, int] = {
    "simple": 8,
    "medium": 24,
    "complex": 56,
    "enterprise": 120,
}

# (factor, score must exceed, multiplier)
ESTIMATE_SURCHARGES: Tuple[Tuple[str, float, float], ...] = (
    ("interaction", 7, 1.30),
    ("visual", 8, 1.20),
    ("data", 6, 1.15),
)

ESTIMATE_SHARES: Dict[str, float] = {
    "testing": 0.3,
    "optimization": 0.15,
    "documentation": 0.1,
}

# factor -> advice emitted once the factor score reaches RECOMMENDATION_MIN_SCORE
FACTOR_RECOMMENDATIONS: Dict[str, str] = {
    "visual": "Extract shared visual primitives into a themed component library",
    "interaction": "Centralise interaction handling and cover prototype flows with e2e tests",
    "data": "Introduce schema-driven form validation and typed data models",
    "state": "Model component variants and transitions as explicit state machines",
    "integration": "Version shared components and document their public props",
}
RECOMMENDATION_MIN_SCORE = 2

ARCHITECTURE_PATTERNS: Dict[str, Dict[str, str]] = {
    "react": {
        "simple": "functional-components",
        "medium": "custom-hooks-pattern",
        "complex": "component-composition",
        "enterprise": "feature-based-architecture",
    },
    "vue": {
        "simple": "single-file-components",
        "medium": "composables-pattern",
        "complex": "store-modules",
        "enterprise": "micro-frontend",
    },
    "angular": {
        "simple": "component-service",
        "medium": "feature-modules",
        "complex": "ngrx-state-management",
        "enterprise": "domain-driven-design",
    },
}
DEFAULT_ARCHITECTURE_PATTERN = "component-based"

KNOWN_FRAMEWORKS: Tuple[str, ...] = ("react", "vue", "angular", "svelte")
DEFAULT_FRAMEWORK = "vanilla"

# framework -> data-flow complexity -> state library
STATE_LIBRARIES: Dict[str, Dict[str, str]] = {
    "react": {"simple": "useState", "medium": "useReducer + context", "complex": "redux-toolkit"},
    "vue": {"simple": "reactive refs", "medium": "provide/inject", "complex": "pinia"},
    "angular": {"simple": "component state", "medium": "services + rxjs", "complex": "ngrx"},
    "svelte": {"simple": "component state", "medium": "svelte stores", "complex": "svelte stores"},
}
DEFAULT_STATE_LIBRARY = "framework-native state"

# Baseline runtime size per framework (KB, minified + gzip) plus a cost per component
FRAMEWORK_BUNDLE_KB: Dict[str, int] = {
    "react": 45,
    "vue": 34,
    "angular": 65,
    "svelte": 4,
    "vanilla": 0,
}
COMPONENT_BUNDLE_KB = 3
LAZY_LOADING_MIN_SCREENS = 3
LAZY_LOADING_MIN_NODES = 500

DATA_FLOW_REQUIREMENTS: Dict[str, Tuple[str, ...]] = {
    "global-state-management": ("state-management-library", "form-validation", "data-persistence"),
    "component-state": ("form-handling", "validation", "state-lifting"),
    "local-state": ("basic-props-passing",),
}

COVERAGE_TARGETS: Dict[str, int] = {
    "simple": 70,
    "medium": 80,
    "complex": 85,
    "enterprise": 90,
}

# (minimum width, class); widths below the first entry count as mobile
BREAKPOINTS: Tuple[Tuple[int, str], ...] = (
    (320, "mobile"),
    (768, "tablet"),
    (1024, "desktop"),
    (1440, "wide"),
)

COMMON_SPACING: Tuple[int, ...] = (4, 8, 12, 16, 20, 24, 32, 40, 48, 64)
SPACING_GRID_BASES: Tuple[int, ...] = (4, 8, 12)
SPACING_GRID_ADHERENCE = 0.8

HEADING_MIN_SIZE = 18
BODY_MIN_SIZE = 12
MAX_HEADING_LEVELS = 6


def match_intent(name: str) -> Tuple[str, float] | None:
    """Return ``(intent, confidence)`` for a frame name, or None."""
    lowered = name.lower()
    for substrings, intent, confidence in INTENT_RULES:
        if any(fragment in lowered for fragment in substrings):
            return intent, confidence
    return None


def match_color_category(name: str | None) -> str | None:
    """Return the category for a named color; unnamed colors stay uncategorized."""
    if not name:
        return None
    lowered = name.lower()
    for substrings, category in COLOR_CATEGORY_RULES:
        if any(fragment in lowered for fragment in substrings):
            return category
    return DEFAULT_COLOR_CATEGORY


def detect_framework(tech_stack: str | None) -> str:
    """Return the first known framework named in a tech-stack string."""
    if not tech_stack or not isinstance(tech_stack, str):
        return DEFAULT_FRAMEWORK
    lowered = tech_stack.lower()
    for framework in KNOWN_FRAMEWORKS:
        if framework in lowered:
            return framework
    return DEFAULT_FRAMEWORK


def recommend_architecture(framework: str, level: str) -> str:
    return ARCHITECTURE_PATTERNS.get(framework, {}).get(level, DEFAULT_ARCHITECTURE_PATTERN)


def level_for_score(score: float) -> str:
    for upper, level in COMPLEXITY_BANDS:
        if score < upper:
            return level
    return TOP_COMPLEXITY_LEVEL


def classify_breakpoint(width: float) -> str:
    label = BREAKPOINTS[0][1]
    for minimum, name in BREAKPOINTS:
        if width >= minimum:
            label = name
    return label


__all__ = [
    "ARCHITECTURE_PATTERNS",
    "BASE_HOURS",
    "COLOR_CATEGORIES",
    "COLOR_CATEGORY_RULES",
    "COVERAGE_TARGETS",
    "ESTIMATE_SHARES",
    "ESTIMATE_SURCHARGES",
    "FACTOR_THRESHOLDS",
    "FACTOR_WEIGHTS",
    "INTENT_RULES",
    "VISUAL_NODE_TYPES",
    "WCAG_AA_CONTRAST",
    "classify_breakpoint",
    "detect_framework",
    "level_for_score",
    "match_color_category",
    "match_intent",
    "recommend_architecture",
]
