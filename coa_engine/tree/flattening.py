"""Flattening the account tree into pre-order lists."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import replace

from coa_engine.models import AccountNode


def iter_tree(nodes: Sequence[AccountNode]) -> Iterator[tuple[AccountNode, int]]:
    """Yield ``(node, depth)`` in pre-order; roots have depth 0."""
    stack = [(node, 0) for node in reversed(nodes)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


def flatten_tree(
    nodes: Sequence[AccountNode],
    strip_children: bool = False,
) -> list[AccountNode]:
    """Return every account exactly once, parents before their subtrees.

    Parameters
    ----------
    nodes : Sequence[AccountNode]
        Root accounts.
    strip_children : bool
        Return copies with empty ``children`` (for lookup tables and
        dropdowns that must not hold the subtree). By default the original
        node objects are returned.

    Returns
    -------
    list[AccountNode]
        Pre-order list.
    """
    if strip_children:
        return [replace(node, children=[]) for node, _ in iter_tree(nodes)]
    return [node for node, _ in iter_tree(nodes)]


def count_nodes(nodes: Sequence[AccountNode]) -> int:
    """Total number of accounts at any depth."""
    return sum(1 for _ in iter_tree(nodes))


def max_depth(nodes: Sequence[AccountNode]) -> int:
    """Number of levels in the tree (0 for an empty tree)."""
    return max((depth + 1 for _, depth in iter_tree(nodes)), default=0)
