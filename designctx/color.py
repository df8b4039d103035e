"""Color conversion and WCAG contrast helpers."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Tuple

RGB = Tuple[float, float, float]


def to_rgb(color: Optional[Mapping[str, Any]]) -> RGB:
    """Normalise a ``{r, g, b}`` mapping of 0..1 floats into a clamped triple."""
    if not color:
        return (0.0, 0.0, 0.0)
    return (
        _clamp_unit(color.get("r")),
        _clamp_unit(color.get("g")),
        _clamp_unit(color.get("b")),
    )


def rgb_to_hex(color: Optional[Mapping[str, Any]]) -> str:
    """Return ``#rrggbb`` for a 0..1 RGB mapping; missing colors map to black."""
    if not color:
        return "#000000"
    return "#" + "".join(f"{_channel_byte(value):02x}" for value in to_rgb(color))


def relative_luminance(color: Mapping[str, Any] | RGB) -> float:
    """WCAG relative luminance of a 0..1 RGB color."""
    red, green, blue = color if isinstance(color, tuple) else to_rgb(color)
    return (
        0.2126 * _linearize(red)
        + 0.7152 * _linearize(green)
        + 0.0722 * _linearize(blue)
    )


def contrast_ratio(first: Mapping[str, Any] | RGB, second: Mapping[str, Any] | RGB) -> float:
    """WCAG contrast ratio between two colors, from 1 to 21."""
    lum_a = relative_luminance(first)
    lum_b = relative_luminance(second)
    lightest = max(lum_a, lum_b)
    darkest = min(lum_a, lum_b)
    return (lightest + 0.05) / (darkest + 0.05)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values (``Math.round`` semantics)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _channel_byte(value: float) -> int:
    return max(0, min(255, int(round_half_up(value * 255))))


def _linearize(channel: float) -> float:
    if channel <= 0.03928:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def _clamp_unit(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return max(0.0, min(1.0, float(value)))


__all__ = [
    "contrast_ratio",
    "relative_luminance",
    "rgb_to_hex",
    "round_half_up",
    "to_rgb",
]
