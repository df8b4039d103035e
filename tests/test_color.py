"""Tests for designctx.color."""

from __future__ import annotations

import pytest

from designctx.color import contrast_ratio, relative_luminance, rgb_to_hex, round_half_up, to_rgb

WHITE = {"r": 1, "g": 1, "b": 1}
BLACK = {"r": 0, "g": 0, "b": 0}


def test_rgb_to_hex_formats_each_channel_as_two_digits() -> None:
    assert rgb_to_hex({"r": 1, "g": 0, "b": 0}) == "#ff0000"
    assert rgb_to_hex({"r": 0, "g": 0.4, "b": 1}) == "#0066ff"
    assert rgb_to_hex({"r": 0.02, "g": 0.02, "b": 0.02}) == "#050505"


def test_rgb_to_hex_defaults_missing_color_to_black() -> None:
    assert rgb_to_hex(None) == "#000000"
    assert rgb_to_hex({}) == "#000000"


def test_rgb_to_hex_rounds_half_up_and_clamps() -> None:
    # 0.1 * 255 == 25.5 rounds up to 26 (0x1a)
    assert rgb_to_hex({"r": 0.1, "g": 0.1, "b": 0.1}) == "#1a1a1a"
    assert rgb_to_hex({"r": 1.5, "g": -1, "b": 0}) == "#ff0000"


def test_to_rgb_ignores_non_numeric_channels() -> None:
    assert to_rgb({"r": "x", "g": True, "b": 0.5}) == (0.0, 0.0, 0.5)


def test_contrast_ratio_white_on_black_is_21() -> None:
    assert contrast_ratio(WHITE, BLACK) == pytest.approx(21.0)
    assert contrast_ratio(BLACK, WHITE) == pytest.approx(21.0)


@pytest.mark.parametrize(
    "color",
    [WHITE, BLACK, {"r": 0.2, "g": 0.5, "b": 0.9}, {"r": 0.03, "g": 0.03, "b": 0.03}],
)
def test_contrast_ratio_of_a_color_with_itself_is_one(color: dict) -> None:
    assert contrast_ratio(color, color) == 1


def test_relative_luminance_uses_linear_segment_for_dark_channels() -> None:
    # 0.03 sits below the 0.03928 knee, so it is divided by 12.92
    assert relative_luminance((0.03, 0.03, 0.03)) == pytest.approx(0.03 / 12.92)
    assert relative_luminance(WHITE) == pytest.approx(1.0)


def test_round_half_up_matches_math_round() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == pytest.approx(0.13)
