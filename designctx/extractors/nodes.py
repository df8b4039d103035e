"""Default node parser: flattens the design tree into node records."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import DocumentNode
from ..traversal import walk_with_parent
from .base import Options, require_tree


class DefaultNodeParser:
    """Produces one JSON-ready record per node, in document (pre-)order."""

    def parse_nodes(self, tree: DocumentNode, options: Options = None) -> List[Dict[str, Any]]:
        root = require_tree("nodes", tree)
        records: List[Dict[str, Any]] = []
        for node, parent, depth in walk_with_parent(root):
            record: Dict[str, Any] = {
                "id": node.id,
                "type": node.type,
                "name": node.name,
                "depth": depth,
                "parent_id": parent.id if parent is not None else None,
                "children": [child.id for child in node.children],
                "visible": node.get("visible", True) is not False,
                "interactive": node.is_interactive,
            }
            if node.layout_mode is not None:
                record["layout_mode"] = node.layout_mode
            if node.characters is not None:
                record["characters"] = node.characters
            if node.constraints:
                record["constraints"] = dict(node.constraints)
            component_id = node.get("componentId")
            if component_id:
                record["component_id"] = str(component_id)
            box = node.get("absoluteBoundingBox")
            if isinstance(box, dict):
                record["bounds"] = {
                    key: box[key] for key in ("x", "y", "width", "height") if key in box
                }
            records.append(record)
        return records


__all__ = ["DefaultNodeParser"]
