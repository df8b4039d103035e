"""Iterative traversal helpers for design trees.

Documents can nest arbitrarily deep, so every walk uses an explicit stack
instead of recursion. Pre-order visiting keeps the children order of the
source document (z-order / reading order).
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from .models import DocumentNode


def walk(root: Optional[DocumentNode]) -> Iterator[DocumentNode]:
    """Yield every node of the tree in pre-order."""
    for node, _ in walk_with_depth(root):
        yield node


def walk_with_depth(
    root: Optional[DocumentNode], start_depth: int = 0
) -> Iterator[Tuple[DocumentNode, int]]:
    """Yield ``(node, depth)`` pairs in pre-order; the root sits at ``start_depth``."""
    if root is None:
        return
    stack = [(root, start_depth)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        for child in reversed(node.children):
            stack.append((child, depth + 1))


def walk_with_parent(
    root: Optional[DocumentNode],
) -> Iterator[Tuple[DocumentNode, Optional[DocumentNode], int]]:
    """Yield ``(node, parent, depth)`` triples in pre-order."""
    if root is None:
        return
    stack: list[Tuple[DocumentNode, Optional[DocumentNode], int]] = [(root, None, 0)]
    while stack:
        node, parent, depth = stack.pop()
        yield node, parent, depth
        for child in reversed(node.children):
            stack.append((child, node, depth + 1))


def count_nodes(root: Optional[DocumentNode]) -> int:
    return sum(1 for _ in walk(root))


__all__ = ["count_nodes", "walk", "walk_with_depth", "walk_with_parent"]
