"""Default layout analyzer: auto-layout containers, frames and constraints."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import DocumentNode
from ..rules import classify_breakpoint
from ..traversal import walk_with_parent
from .base import Options, require_tree

_PADDING_KEYS = ("paddingTop", "paddingRight", "paddingBottom", "paddingLeft")
_TOP_LEVEL_PARENTS = frozenset({"DOCUMENT", "CANVAS"})


class DefaultLayoutAnalyzer:
    def analyze_layout(self, tree: DocumentNode, options: Options = None) -> Dict[str, Any]:
        root = require_tree("layout", tree)
        containers: List[Dict[str, Any]] = []
        frames: List[Dict[str, Any]] = []
        horizontal: Dict[str, int] = {}
        vertical: Dict[str, int] = {}
        max_depth = 0

        for node, parent, depth in walk_with_parent(root):
            max_depth = max(max_depth, depth)
            if node.layout_mode is not None:
                containers.append(
                    {
                        "id": node.id,
                        "name": node.name,
                        "direction": node.layout_mode,
                        "item_spacing": node.get("itemSpacing", 0),
                        "padding": [node.get(key, 0) for key in _PADDING_KEYS],
                        "child_count": len(node.children),
                    }
                )
            if node.constraints:
                h_rule = node.constraints.get("horizontal")
                v_rule = node.constraints.get("vertical")
                if isinstance(h_rule, str):
                    horizontal[h_rule] = horizontal.get(h_rule, 0) + 1
                if isinstance(v_rule, str):
                    vertical[v_rule] = vertical.get(v_rule, 0) + 1
            if node.type == "FRAME" and (parent is None or parent.type in _TOP_LEVEL_PARENTS):
                box = node.get("absoluteBoundingBox")
                width = box.get("width") if isinstance(box, dict) else None
                frames.append(
                    {
                        "id": node.id,
                        "name": node.name,
                        "width": width,
                        "breakpoint": (
                            classify_breakpoint(width) if isinstance(width, (int, float)) else None
                        ),
                        "auto_layout": node.layout_mode is not None,
                    }
                )

        return {
            "containers": containers,
            "frames": frames,
            "constraints": {"horizontal": horizontal, "vertical": vertical},
            "auto_layout_count": len(containers),
            "max_depth": max_depth,
        }


__all__ = ["DefaultLayoutAnalyzer"]
