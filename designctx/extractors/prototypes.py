"""Default prototype mapper: the interaction graph between screens."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping

from ..models import DocumentNode
from ..traversal import walk
from .base import Options, require_tree


def iter_actions(reaction: Mapping[str, Any]) -> Iterator[Dict[str, Any]]:
    """Yield the actions of a reaction, covering both single and multi-action payloads."""
    actions = reaction.get("actions")
    if isinstance(actions, list):
        for action in actions:
            if isinstance(action, Mapping):
                yield dict(action)
        return
    action = reaction.get("action")
    if isinstance(action, Mapping):
        yield dict(action)


def is_animated(action: Mapping[str, Any]) -> bool:
    transition = action.get("transition")
    if not isinstance(transition, Mapping):
        return False
    return transition.get("type") not in (None, "INSTANT")


class DefaultPrototypeMapper:
    def map_prototypes(self, tree: DocumentNode, options: Options = None) -> Dict[str, Any]:
        root = require_tree("prototypes", tree)
        connections: List[Dict[str, Any]] = []
        flows: List[Dict[str, Any]] = []
        by_trigger: Dict[str, int] = {}

        for node in walk(root):
            starting_points = node.get("flowStartingPoints")
            if isinstance(starting_points, list):
                for point in starting_points:
                    if isinstance(point, Mapping) and point.get("nodeId"):
                        flows.append({"node_id": str(point["nodeId"]), "name": point.get("name")})

            for reaction in node.reactions:
                trigger = reaction.get("trigger")
                trigger_type = (
                    str(trigger.get("type")) if isinstance(trigger, Mapping) else "UNKNOWN"
                )
                for action in iter_actions(reaction):
                    transition = action.get("transition")
                    connections.append(
                        {
                            "source": node.id,
                            "destination": action.get("destinationId"),
                            "trigger": trigger_type,
                            "action": action.get("type"),
                            "navigation": action.get("navigation"),
                            "transition": (
                                transition.get("type") if isinstance(transition, Mapping) else None
                            ),
                        }
                    )
                    by_trigger[trigger_type] = by_trigger.get(trigger_type, 0) + 1

            destination = node.get("transitionNodeID")
            if destination and not node.reactions:
                connections.append(
                    {
                        "source": node.id,
                        "destination": str(destination),
                        "trigger": "ON_CLICK",
                        "action": "NODE",
                        "navigation": "NAVIGATE",
                        "transition": None,
                    }
                )
                by_trigger["ON_CLICK"] = by_trigger.get("ON_CLICK", 0) + 1

        screens = sorted(
            {str(item["destination"]) for item in connections if item["destination"]}
        )
        return {
            "flows": flows,
            "connections": connections,
            "screens": screens,
            "interactions": {"total": len(connections), "by_trigger": by_trigger},
        }


__all__ = ["DefaultPrototypeMapper", "is_animated", "iter_actions"]
