"""Style system extraction: colors, typography, spacing, effects and grids."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

from ..color import contrast_ratio, rgb_to_hex, round_half_up, to_rgb
from ..failsafe import build_fallback_style_system, utc_timestamp
from ..logging import get_logger
from ..models import DesignDocument, DocumentNode, StyleDefinition
from ..rules import (
    BODY_MIN_SIZE,
    COMMON_SPACING,
    HEADING_MIN_SIZE,
    MAX_HEADING_LEVELS,
    SPACING_GRID_ADHERENCE,
    SPACING_GRID_BASES,
    WCAG_AA_CONTRAST,
    classify_breakpoint,
    match_color_category,
)
from ..traversal import count_nodes, walk, walk_with_parent
from .base import Options
from .style_models import (
    AccessibilityReport,
    ColorEntry,
    ColorSystem,
    ContrastPair,
    EffectEntry,
    EffectSystem,
    FontEntry,
    GridEntry,
    GridSystem,
    SpacingSystem,
    SpacingToken,
    StyleSystem,
    TypographySystem,
    facet_confidence,
)

_SPACING_PROPERTIES = (
    "itemSpacing",
    "paddingLeft",
    "paddingRight",
    "paddingTop",
    "paddingBottom",
)
_SHADOW_TYPES = frozenset({"DROP_SHADOW", "INNER_SHADOW"})
_BLUR_TYPES = frozenset({"LAYER_BLUR", "BACKGROUND_BLUR"})
_TOP_LEVEL_PARENTS = frozenset({"DOCUMENT", "CANVAS"})

Declared = Mapping[str, StyleDefinition]
T = TypeVar("T")


class StyleExtractor:
    """Builds a :class:`StyleSystem` from declared styles and the node tree.

    Every facet is absorbed in two phases: declared style definitions first,
    then inline values found while walking the tree. Declared values win on
    key collisions; among inline values the first occurrence wins. A fault in
    one facet only empties that facet.
    """

    def __init__(self) -> None:
        self.logger = get_logger("extractors.styles")

    def extract_styles(
        self,
        document: DesignDocument | DocumentNode,
        declared_styles: Optional[Declared] = None,
        options: Options = None,
    ) -> StyleSystem:
        """Extract every style facet; never raises."""
        start = time.perf_counter()
        try:
            root, declared = _unpack(document, declared_styles)
            colors = self._guard("colors", ColorSystem, self._extract_colors, root, declared)
            typography = self._guard(
                "typography", TypographySystem, self._extract_typography, root, declared
            )
            spacing = self._guard("spacing", SpacingSystem, self._extract_spacing, root)
            effects = self._guard("effects", EffectSystem, self._extract_effects, root, declared)
            grids = self._guard("grids", GridSystem, self._extract_grids, root, declared)

            system = StyleSystem(
                colors=colors,
                typography=typography,
                spacing=spacing,
                effects=effects,
                grids=grids,
                timestamp=utc_timestamp(),
                coverage=_coverage(root, declared),
            )
            system.confidence = style_confidence(system)
            system.processing_time = round(time.perf_counter() - start, 6)
            self.logger.debug(
                "Extracted %d colors, %d fonts, %d spacing tokens, %d shadows",
                len(colors.palette),
                len(typography.fonts),
                len(spacing.tokens),
                len(effects.shadows),
            )
            return system
        except Exception as exc:
            self.logger.error("Style extraction failed: %s", exc, exc_info=True)
            return build_fallback_style_system(exc)

    def _guard(
        self, facet: str, empty: Callable[[], T], func: Callable[..., T], *args: Any
    ) -> T:
        try:
            return func(*args)
        except Exception as exc:
            self.logger.warning("Style facet '%s' failed: %s", facet, exc)
            return empty()

    # ------------------------------------------------------------------
    # Colors

    def _extract_colors(self, root: DocumentNode, declared: Declared) -> ColorSystem:
        palette: Dict[str, ColorEntry] = {}

        for definition in declared.values():
            if definition.style_type != "FILL":
                continue
            for fill in definition.fills:
                if fill.get("type") != "SOLID" or not fill.get("color"):
                    continue
                key = rgb_to_hex(fill["color"])
                if key in palette:
                    continue
                palette[key] = ColorEntry(
                    hex=key,
                    rgb=to_rgb(fill["color"]),
                    opacity=_opacity(fill),
                    name=definition.name or None,
                    style_id=definition.key,
                    declared=True,
                )

        for node in walk(root):
            for paint in (*node.fills, *node.strokes):
                if paint.get("type") != "SOLID" or not paint.get("color"):
                    continue
                if paint.get("visible") is False:
                    continue
                key = rgb_to_hex(paint["color"])
                entry = palette.get(key)
                if entry is None:
                    entry = ColorEntry(
                        hex=key, rgb=to_rgb(paint["color"]), opacity=_opacity(paint)
                    )
                    palette[key] = entry
                entry.record_usage(node.id)

        system = ColorSystem(palette=palette)
        for entry in palette.values():
            category = match_color_category(entry.name)
            if entry.assign_category(category) and category is not None:
                system.categories[category].append(entry.hex)
        system.accessibility = analyze_contrast(palette.values())
        system.usage = _color_usage(palette)
        system.confidence = facet_confidence(
            sum(1 for entry in palette.values() if entry.declared), len(palette)
        )
        return system

    # ------------------------------------------------------------------
    # Typography

    def _extract_typography(self, root: DocumentNode, declared: Declared) -> TypographySystem:
        fonts: Dict[str, FontEntry] = {}

        for definition in declared.values():
            if definition.style_type != "TEXT" or not definition.style:
                continue
            entry = _font_entry(definition.style)
            entry.name = definition.name or None
            entry.style_id = definition.key
            entry.declared = True
            fonts.setdefault(_font_key(definition.style), entry)

        for node in walk(root):
            if node.type != "TEXT" or not node.style:
                continue
            key = _font_key(node.style)
            entry = fonts.get(key)
            if entry is None:
                entry = _font_entry(node.style)
                entry.sample = node.characters
                fonts[key] = entry
            entry.record_usage(node.id)

        sizes = sorted({entry.size for entry in fonts.values() if entry.size is not None})
        families: Dict[str, int] = {}
        for entry in fonts.values():
            if entry.family:
                families[entry.family] = families.get(entry.family, 0) + max(entry.usage_count, 1)

        return TypographySystem(
            fonts=fonts,
            scales=sizes,
            hierarchy=_type_hierarchy(fonts, sizes),
            usage=families,
            confidence=facet_confidence(
                sum(1 for entry in fonts.values() if entry.declared), len(fonts)
            ),
        )

    # ------------------------------------------------------------------
    # Spacing

    def _extract_spacing(self, root: DocumentNode) -> SpacingSystem:
        tokens: Dict[str, SpacingToken] = {}

        for node in walk(root):
            if node.layout_mode is None:
                continue
            for prop in _SPACING_PROPERTIES:
                value = _number(node.get(prop))
                if value is None or value <= 0:
                    continue
                key = f"space-{_format_number(value)}"
                token = tokens.get(key)
                if token is None:
                    token = SpacingToken(value=value)
                    tokens[key] = token
                if prop not in token.properties:
                    token.properties.append(prop)
                token.record_usage(node.id)

        values = sorted({token.value for token in tokens.values()})
        return SpacingSystem(
            tokens=tokens,
            patterns={
                "common": [value for value in values if value in COMMON_SPACING],
                "custom": [value for value in values if value not in COMMON_SPACING],
            },
            grid=_spacing_grid(values),
            confidence=facet_confidence(0, len(tokens)),
        )

    # ------------------------------------------------------------------
    # Effects

    def _extract_effects(self, root: DocumentNode, declared: Declared) -> EffectSystem:
        system = EffectSystem()

        for definition in declared.values():
            if definition.style_type != "EFFECT":
                continue
            for effect in definition.effects:
                if effect.get("visible") is False:
                    continue
                bucket, key = _effect_slot(system, effect)
                if key in bucket:
                    continue
                entry = _effect_entry(effect)
                entry.name = definition.name or None
                entry.style_id = definition.key
                entry.declared = True
                bucket[key] = entry

        for node in walk(root):
            for effect in node.effects:
                if effect.get("visible") is False:
                    continue
                bucket, key = _effect_slot(system, effect)
                entry = bucket.get(key)
                if entry is None:
                    entry = _effect_entry(effect)
                    bucket[key] = entry
                entry.record_usage(node.id)

        entries = [*system.shadows.values(), *system.blurs.values(), *system.other.values()]
        system.confidence = facet_confidence(
            sum(1 for entry in entries if entry.declared), len(entries)
        )
        return system

    # ------------------------------------------------------------------
    # Grids

    def _extract_grids(self, root: DocumentNode, declared: Declared) -> GridSystem:
        system = GridSystem()

        for definition in declared.values():
            if definition.style_type != "GRID":
                continue
            for grid in definition.layout_grids:
                key = _grid_key(grid)
                if key in system.systems:
                    continue
                entry = _grid_entry(grid)
                entry.name = definition.name or None
                entry.style_id = definition.key
                entry.declared = True
                system.systems[key] = entry

        for node, parent, _ in walk_with_parent(root):
            if node.type != "FRAME":
                continue
            layout_grids = node.get("layoutGrids")
            if isinstance(layout_grids, list):
                for grid in layout_grids:
                    if not isinstance(grid, Mapping) or grid.get("visible") is False:
                        continue
                    key = _grid_key(grid)
                    entry = system.systems.get(key)
                    if entry is None:
                        entry = _grid_entry(grid)
                        system.systems[key] = entry
                    entry.record_usage(node.id)

            if parent is not None and parent.type not in _TOP_LEVEL_PARENTS:
                continue
            width, height = _frame_size(node)
            if width is None:
                continue
            breakpoint = classify_breakpoint(width)
            system.breakpoints.setdefault(breakpoint, []).append(node.id)
            system.containers[node.id] = {
                "name": node.name,
                "width": width,
                "height": height,
                "breakpoint": breakpoint,
            }

        system.confidence = facet_confidence(
            sum(1 for entry in system.systems.values() if entry.declared), len(system.systems)
        )
        return system


def style_confidence(system: StyleSystem) -> float:
    """Share of the core facets (palette, fonts, spacing, shadows) that are non-empty."""
    present = sum(
        1
        for facet in (
            system.colors.palette,
            system.typography.fonts,
            system.spacing.tokens,
            system.effects.shadows,
        )
        if facet
    )
    return present / 4


def analyze_contrast(colors: Any) -> AccessibilityReport:
    """Check every unordered pair of palette colors against WCAG AA."""
    entries: List[ColorEntry] = list(colors)
    report = AccessibilityReport()
    for index, first in enumerate(entries):
        for second in entries[index + 1 :]:
            ratio = round_half_up(contrast_ratio(first.rgb, second.rgb), 2)
            if ratio >= WCAG_AA_CONTRAST:
                report.compliant.append(ContrastPair(first.hex, second.hex, ratio))
            else:
                report.violations.append(
                    ContrastPair(first.hex, second.hex, ratio, required=WCAG_AA_CONTRAST)
                )
    return report


def _unpack(
    document: DesignDocument | DocumentNode, declared_styles: Optional[Declared]
) -> Tuple[DocumentNode, Declared]:
    if isinstance(document, DesignDocument):
        declared = declared_styles if declared_styles is not None else document.styles
        return document.document, declared
    if isinstance(document, DocumentNode):
        return document, declared_styles or {}
    raise TypeError(f"Unsupported document type: {type(document).__name__}")


def _coverage(root: DocumentNode, declared: Declared) -> Dict[str, Any]:
    style_types = {definition.style_type for definition in declared.values()}
    return {
        "has_styles": bool(declared),
        "style_count": len(declared),
        "has_colors": "FILL" in style_types,
        "has_typography": "TEXT" in style_types,
        "has_effects": "EFFECT" in style_types,
        "has_grids": "GRID" in style_types,
        "total_nodes": count_nodes(root),
    }


def _color_usage(palette: Mapping[str, ColorEntry]) -> Dict[str, Any]:
    ranked = sorted(palette.values(), key=lambda entry: entry.usage_count, reverse=True)
    return {
        "total_colors": len(palette),
        "declared_colors": sum(1 for entry in palette.values() if entry.declared),
        "total_usage": sum(entry.usage_count for entry in palette.values()),
        "most_used": [entry.hex for entry in ranked[:5] if entry.usage_count > 0],
        "unused_declared": [
            entry.hex for entry in palette.values() if entry.declared and entry.usage_count == 0
        ],
    }


def _opacity(paint: Mapping[str, Any]) -> float:
    value = _number(paint.get("opacity"))
    return value if value is not None else 1.0


def _font_key(style: Mapping[str, Any]) -> str:
    return "-".join(
        _format_value(style.get(name)) for name in ("fontFamily", "fontSize", "fontWeight")
    )


def _font_entry(style: Mapping[str, Any]) -> FontEntry:
    line_height = _number(style.get("lineHeightPx"))
    if line_height is None:
        line_height = _number(style.get("lineHeightPercent"))
    family = style.get("fontFamily")
    align = style.get("textAlignHorizontal")
    decoration = style.get("textDecoration")
    return FontEntry(
        family=family if isinstance(family, str) else None,
        size=_number(style.get("fontSize")),
        weight=_number(style.get("fontWeight")),
        line_height=line_height,
        letter_spacing=_number(style.get("letterSpacing")),
        text_align=align if isinstance(align, str) else None,
        text_decoration=decoration if isinstance(decoration, str) else None,
    )


def _type_hierarchy(fonts: Mapping[str, FontEntry], sizes: List[float]) -> List[Dict[str, Any]]:
    by_size: Dict[float, List[str]] = {}
    for key, entry in fonts.items():
        if entry.size is not None:
            by_size.setdefault(entry.size, []).append(key)

    hierarchy: List[Dict[str, Any]] = []
    headings = [size for size in reversed(sizes) if size >= HEADING_MIN_SIZE][:MAX_HEADING_LEVELS]
    for index, size in enumerate(headings, start=1):
        hierarchy.append({"level": f"h{index}", "size": size, "fonts": by_size[size]})
    for size in reversed(sizes):
        if size in headings:
            continue
        level = "body" if size >= BODY_MIN_SIZE else "caption"
        hierarchy.append({"level": level, "size": size, "fonts": by_size[size]})
    return hierarchy


def _spacing_grid(values: List[float]) -> Dict[str, Any]:
    if not values:
        return {}
    best: Optional[int] = None
    adherence = 0.0
    for base in SPACING_GRID_BASES:
        share = sum(1 for value in values if value % base == 0) / len(values)
        if share >= SPACING_GRID_ADHERENCE:
            best, adherence = base, share
    if best is None:
        adherence = sum(1 for value in values if value % SPACING_GRID_BASES[0] == 0) / len(values)
    return {"base_unit": best, "adherence": round_half_up(adherence, 2)}


def _effect_slot(
    system: EffectSystem, effect: Mapping[str, Any]
) -> Tuple[Dict[str, EffectEntry], str]:
    effect_type = str(effect.get("type") or "UNKNOWN")
    radius = _format_value(effect.get("radius"))
    if effect_type in _SHADOW_TYPES:
        x, y = _offset(effect)
        spread = _format_value(effect.get("spread") or 0)
        color = rgb_to_hex(effect.get("color"))
        key = f"{effect_type}-{_format_value(x)}-{_format_value(y)}-{radius}-{spread}-{color}"
        return system.shadows, key
    if effect_type in _BLUR_TYPES:
        return system.blurs, f"{effect_type}-{radius}"
    return system.other, f"{effect_type}-{radius}"


def _effect_entry(effect: Mapping[str, Any]) -> EffectEntry:
    effect_type = str(effect.get("type") or "UNKNOWN")
    shadow = effect_type in _SHADOW_TYPES
    return EffectEntry(
        type=effect_type,
        radius=_number(effect.get("radius")),
        offset=_offset(effect) if shadow else None,
        spread=_number(effect.get("spread")) if shadow else None,
        color=rgb_to_hex(effect.get("color")) if effect.get("color") else None,
    )


def _offset(effect: Mapping[str, Any]) -> Tuple[float, float]:
    offset = effect.get("offset")
    if not isinstance(offset, Mapping):
        return (0.0, 0.0)
    return (_number(offset.get("x")) or 0.0, _number(offset.get("y")) or 0.0)


def _grid_key(grid: Mapping[str, Any]) -> str:
    return "-".join(
        _format_value(grid.get(name))
        for name in ("pattern", "count", "gutterSize", "sectionSize")
    )


def _grid_entry(grid: Mapping[str, Any]) -> GridEntry:
    count = _number(grid.get("count"))
    alignment = grid.get("alignment")
    return GridEntry(
        pattern=str(grid.get("pattern") or ""),
        count=int(count) if count is not None else None,
        gutter=_number(grid.get("gutterSize")),
        section_size=_number(grid.get("sectionSize")),
        alignment=alignment if isinstance(alignment, str) else None,
    )


def _frame_size(node: DocumentNode) -> Tuple[Optional[float], Optional[float]]:
    box = node.get("absoluteBoundingBox")
    if not isinstance(box, Mapping):
        return None, None
    return _number(box.get("width")), _number(box.get("height"))


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _format_value(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _format_number(value)
    return "undefined" if value is None else str(value)


__all__ = ["StyleExtractor", "analyze_contrast", "style_confidence"]
