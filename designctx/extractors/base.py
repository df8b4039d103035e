"""Contracts for the facet extractors the orchestrator fans out to."""

from __future__ import annotations

from typing import Any, Awaitable, Dict, List, Mapping, Optional, Protocol, Union, runtime_checkable

from ..errors import ExtractionFault
from ..models import DocumentNode

Options = Optional[Mapping[str, Any]]


@runtime_checkable
class NodeParser(Protocol):
    """Flattens the tree into normalised node records."""

    def parse_nodes(
        self, tree: DocumentNode, options: Options = None
    ) -> Union[List[Dict[str, Any]], Awaitable[List[Dict[str, Any]]]]:
        ...


@runtime_checkable
class ComponentMapper(Protocol):
    """Maps component definitions, instances and variants."""

    def map_components(
        self, tree: DocumentNode, options: Options = None
    ) -> Union[Dict[str, Any], Awaitable[Dict[str, Any]]]:
        ...


@runtime_checkable
class LayoutAnalyzer(Protocol):
    """Describes layout containers and their relationships."""

    def analyze_layout(
        self, tree: DocumentNode, options: Options = None
    ) -> Union[Dict[str, Any], Awaitable[Dict[str, Any]]]:
        ...


@runtime_checkable
class PrototypeMapper(Protocol):
    """Builds the prototype interaction graph."""

    def map_prototypes(
        self, tree: DocumentNode, options: Options = None
    ) -> Union[Dict[str, Any], Awaitable[Dict[str, Any]]]:
        ...


def require_tree(facet: str, tree: Optional[DocumentNode]) -> DocumentNode:
    if tree is None:
        raise ExtractionFault(facet, "document is required")
    return tree


__all__ = [
    "ComponentMapper",
    "ExtractionFault",
    "LayoutAnalyzer",
    "NodeParser",
    "PrototypeMapper",
    "require_tree",
]
