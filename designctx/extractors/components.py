"""Default component mapper: definitions, instances and variant sets."""

from __future__ import annotations

from typing import Any, Dict, List

from ..color import round_half_up
from ..models import DocumentNode
from ..traversal import walk_with_parent
from .base import Options, require_tree


class DefaultComponentMapper:
    """Maps component definitions to the instances that reference them.

    Returns an empty mapping when the document has no components at all.
    """

    def map_components(self, tree: DocumentNode, options: Options = None) -> Dict[str, Any]:
        root = require_tree("components", tree)
        definitions: Dict[str, Dict[str, Any]] = {}
        instances: Dict[str, List[str]] = {}
        variants: List[Dict[str, Any]] = []

        for node, parent, _ in walk_with_parent(root):
            if node.type == "COMPONENT_SET":
                variants.append(
                    {
                        "set_id": node.id,
                        "name": node.name,
                        "variants": [child.name for child in node.children],
                    }
                )
            elif node.type == "COMPONENT":
                definitions[node.id] = {
                    "name": node.name,
                    "variant_of": (
                        parent.id if parent is not None and parent.type == "COMPONENT_SET" else None
                    ),
                    "child_count": len(node.children),
                }
            elif node.type == "INSTANCE":
                component_id = str(node.get("componentId") or "")
                instances.setdefault(component_id, []).append(node.id)

        if not definitions and not instances and not variants:
            return {}

        instance_count = sum(len(ids) for ids in instances.values())
        referenced = [key for key in instances if key]
        return {
            "definitions": definitions,
            "instances": instances,
            "variants": variants,
            "design_system": {
                "component_count": len(definitions),
                "instance_count": instance_count,
                "distinct_components_used": len(referenced),
                "external_components": sorted(key for key in referenced if key not in definitions),
                "reuse_ratio": (
                    round_half_up(instance_count / len(referenced), 2) if referenced else 0.0
                ),
            },
        }


__all__ = ["DefaultComponentMapper"]
