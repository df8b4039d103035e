"""Result types produced by the style extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from ..color import RGB
from ..rules import COLOR_CATEGORIES


def facet_confidence(declared: int, total: int) -> float:
    """0 for an empty facet, otherwise 0.5 plus half the declared share."""
    if total <= 0:
        return 0.0
    return min(1.0, 0.5 + 0.5 * (declared / total))


@dataclass
class _Usage:
    usage_count: int = 0
    node_ids: List[str] = field(default_factory=list)
    _seen: Set[str] = field(default_factory=set, repr=False, compare=False)

    def record_usage(self, node_id: str) -> None:
        self.usage_count += 1
        if node_id and node_id not in self._seen:
            self._seen.add(node_id)
            self.node_ids.append(node_id)


@dataclass
class ColorEntry(_Usage):
    hex: str = "#000000"
    rgb: RGB = (0.0, 0.0, 0.0)
    opacity: float = 1.0
    name: Optional[str] = None
    style_id: Optional[str] = None
    declared: bool = False
    category: Optional[str] = None

    def assign_category(self, category: Optional[str]) -> bool:
        if self.category is not None or category is None:
            return False
        self.category = category
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hex": self.hex,
            "rgb": {"r": self.rgb[0], "g": self.rgb[1], "b": self.rgb[2]},
            "opacity": self.opacity,
            "name": self.name,
            "style_id": self.style_id,
            "declared": self.declared,
            "category": self.category,
            "usage_count": self.usage_count,
            "source_node_ids": list(self.node_ids),
        }


@dataclass
class ContrastPair:
    color1: str
    color2: str
    contrast: float
    required: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "color1": self.color1,
            "color2": self.color2,
            "contrast": self.contrast,
        }
        if self.required is not None:
            data["required"] = self.required
        return data


@dataclass
class AccessibilityReport:
    compliant: List[ContrastPair] = field(default_factory=list)
    violations: List[ContrastPair] = field(default_factory=list)

    @property
    def pair_count(self) -> int:
        return len(self.compliant) + len(self.violations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compliant": [pair.to_dict() for pair in self.compliant],
            "violations": [pair.to_dict() for pair in self.violations],
        }


@dataclass
class ColorSystem:
    palette: Dict[str, ColorEntry] = field(default_factory=dict)
    categories: Dict[str, List[str]] = field(
        default_factory=lambda: {name: [] for name in COLOR_CATEGORIES}
    )
    accessibility: AccessibilityReport = field(default_factory=AccessibilityReport)
    usage: Dict[str, Any] = field(default_factory=dict)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "palette": {key: entry.to_dict() for key, entry in self.palette.items()},
            "categories": {key: list(values) for key, values in self.categories.items()},
            "accessibility": self.accessibility.to_dict(),
            "usage": self.usage,
            "confidence": self.confidence,
        }


@dataclass
class FontEntry(_Usage):
    family: Optional[str] = None
    size: Optional[float] = None
    weight: Optional[float] = None
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None
    text_align: Optional[str] = None
    text_decoration: Optional[str] = None
    name: Optional[str] = None
    style_id: Optional[str] = None
    sample: Optional[str] = None
    declared: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "family": self.family,
            "size": self.size,
            "weight": self.weight,
            "line_height": self.line_height,
            "letter_spacing": self.letter_spacing,
            "text_align": self.text_align,
            "text_decoration": self.text_decoration,
            "name": self.name,
            "style_id": self.style_id,
            "sample": self.sample,
            "declared": self.declared,
            "usage_count": self.usage_count,
            "node_ids": list(self.node_ids),
        }


@dataclass
class TypographySystem:
    fonts: Dict[str, FontEntry] = field(default_factory=dict)
    scales: List[float] = field(default_factory=list)
    hierarchy: List[Dict[str, Any]] = field(default_factory=list)
    usage: Dict[str, int] = field(default_factory=dict)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fonts": {key: entry.to_dict() for key, entry in self.fonts.items()},
            "scales": list(self.scales),
            "hierarchy": [dict(item) for item in self.hierarchy],
            "usage": dict(self.usage),
            "confidence": self.confidence,
        }


@dataclass
class SpacingToken(_Usage):
    value: float = 0.0
    properties: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "properties": list(self.properties),
            "usage_count": self.usage_count,
            "node_ids": list(self.node_ids),
        }


@dataclass
class SpacingSystem:
    tokens: Dict[str, SpacingToken] = field(default_factory=dict)
    patterns: Dict[str, List[float]] = field(default_factory=dict)
    grid: Dict[str, Any] = field(default_factory=dict)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokens": {key: token.to_dict() for key, token in self.tokens.items()},
            "patterns": {key: list(values) for key, values in self.patterns.items()},
            "grid": dict(self.grid),
            "confidence": self.confidence,
        }


@dataclass
class EffectEntry(_Usage):
    type: str = ""
    radius: Optional[float] = None
    offset: Optional[Tuple[float, float]] = None
    spread: Optional[float] = None
    color: Optional[str] = None
    name: Optional[str] = None
    style_id: Optional[str] = None
    declared: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "radius": self.radius,
            "offset": {"x": self.offset[0], "y": self.offset[1]} if self.offset else None,
            "spread": self.spread,
            "color": self.color,
            "name": self.name,
            "style_id": self.style_id,
            "declared": self.declared,
            "usage_count": self.usage_count,
            "node_ids": list(self.node_ids),
        }


@dataclass
class EffectSystem:
    shadows: Dict[str, EffectEntry] = field(default_factory=dict)
    blurs: Dict[str, EffectEntry] = field(default_factory=dict)
    other: Dict[str, EffectEntry] = field(default_factory=dict)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shadows": {key: entry.to_dict() for key, entry in self.shadows.items()},
            "blurs": {key: entry.to_dict() for key, entry in self.blurs.items()},
            "other": {key: entry.to_dict() for key, entry in self.other.items()},
            "confidence": self.confidence,
        }


@dataclass
class GridEntry(_Usage):
    pattern: str = ""
    count: Optional[int] = None
    gutter: Optional[float] = None
    section_size: Optional[float] = None
    alignment: Optional[str] = None
    name: Optional[str] = None
    style_id: Optional[str] = None
    declared: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "count": self.count,
            "gutter": self.gutter,
            "section_size": self.section_size,
            "alignment": self.alignment,
            "name": self.name,
            "style_id": self.style_id,
            "declared": self.declared,
            "usage_count": self.usage_count,
            "node_ids": list(self.node_ids),
        }


@dataclass
class GridSystem:
    systems: Dict[str, GridEntry] = field(default_factory=dict)
    breakpoints: Dict[str, List[str]] = field(default_factory=dict)
    containers: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "systems": {key: entry.to_dict() for key, entry in self.systems.items()},
            "breakpoints": {key: list(values) for key, values in self.breakpoints.items()},
            "containers": {key: dict(value) for key, value in self.containers.items()},
            "confidence": self.confidence,
        }


@dataclass
class StyleSystem:
    """Aggregate of every style facet extracted from one document."""

    colors: ColorSystem = field(default_factory=ColorSystem)
    typography: TypographySystem = field(default_factory=TypographySystem)
    spacing: SpacingSystem = field(default_factory=SpacingSystem)
    effects: EffectSystem = field(default_factory=EffectSystem)
    grids: GridSystem = field(default_factory=GridSystem)
    confidence: float = 0.0
    timestamp: str = ""
    processing_time: Optional[float] = None
    coverage: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        extraction: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "processing_time": self.processing_time,
            "confidence": self.confidence,
            "coverage": dict(self.coverage),
        }
        if self.error is not None:
            extraction["error"] = self.error
        return {
            "colors": self.colors.to_dict(),
            "typography": self.typography.to_dict(),
            "spacing": self.spacing.to_dict(),
            "effects": self.effects.to_dict(),
            "layout": self.grids.to_dict(),
            "extraction": extraction,
        }


__all__ = [
    "AccessibilityReport",
    "ColorEntry",
    "ColorSystem",
    "ContrastPair",
    "EffectEntry",
    "EffectSystem",
    "FontEntry",
    "GridEntry",
    "GridSystem",
    "SpacingSystem",
    "SpacingToken",
    "StyleSystem",
    "TypographySystem",
    "facet_confidence",
]
