"""Tests for the fixed rule tables in designctx.rules."""

from __future__ import annotations

import pytest

from designctx.rules import (
    classify_breakpoint,
    detect_framework,
    level_for_score,
    match_color_category,
    match_intent,
    recommend_architecture,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Login Form", ("login_form", 0.8)),
        ("SignIn Page", ("login_form", 0.8)),
        ("Main Nav", ("navigation", 0.7)),
        ("Page Header", ("navigation", 0.7)),
        ("Primary Button", ("call_to_action", 0.6)),
        ("Hero CTA", ("call_to_action", 0.6)),
    ],
)
def test_match_intent_uses_rule_table(name: str, expected: tuple) -> None:
    assert match_intent(name) == expected


def test_match_intent_first_rule_wins() -> None:
    # "login" is checked before "header" and "button"
    assert match_intent("Login Header Button") == ("login_form", 0.8)


def test_match_intent_returns_none_without_match() -> None:
    assert match_intent("Footer") is None


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Primary/500", "primary"),
        ("Secondary/200", "secondary"),
        ("Gray 100", "neutral"),
        ("Grey/Dark", "neutral"),
        ("Neutral/0", "neutral"),
        ("Error/Red", "semantic"),
        ("Info", "semantic"),
        ("Brand Pink", "accent"),
        ("Primary Error", "primary"),
    ],
)
def test_match_color_category(name: str, expected: str) -> None:
    assert match_color_category(name) == expected


def test_unnamed_colors_are_uncategorized() -> None:
    assert match_color_category(None) is None
    assert match_color_category("") is None


@pytest.mark.parametrize(
    ("score", "level"),
    [(0, "simple"), (2.99, "simple"), (3, "medium"), (5.9, "medium"), (6, "complex"), (8, "enterprise")],
)
def test_level_for_score_bands(score: float, level: str) -> None:
    assert level_for_score(score) == level


@pytest.mark.parametrize(
    ("width", "expected"),
    [(200, "mobile"), (375, "mobile"), (768, "tablet"), (1280, "desktop"), (1920, "wide")],
)
def test_classify_breakpoint(width: int, expected: str) -> None:
    assert classify_breakpoint(width) == expected


def test_detect_framework_from_tech_stack() -> None:
    assert detect_framework("React + TypeScript") == "react"
    assert detect_framework("nuxt/vue 3") == "vue"
    assert detect_framework("SvelteKit") == "svelte"
    assert detect_framework("django templates") == "vanilla"
    assert detect_framework(None) == "vanilla"


def test_recommend_architecture_falls_back_to_component_based() -> None:
    assert recommend_architecture("react", "enterprise") == "feature-based-architecture"
    assert recommend_architecture("angular", "medium") == "feature-modules"
    assert recommend_architecture("svelte", "simple") == "component-based"
    assert recommend_architecture("react", "unknown") == "component-based"
