"""Search filtering over the account tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from coa_engine.models import AccountNode


def matches(node: AccountNode, needle: str) -> bool:
    """Case-insensitive substring match on name or code.

    ``needle`` must already be lower-cased.
    """
    return needle in node.name.lower() or needle in node.code.lower()


def filter_tree(nodes: Sequence[AccountNode], query: str) -> Sequence[AccountNode]:
    """Prune the tree to accounts matching ``query`` and their ancestors.

    A node is kept when its name or code contains ``query`` (ignoring case),
    or when any descendant is kept. Kept nodes are copies whose ``children``
    hold only kept children; the input tree is never modified.

    Children are resolved before their parent, with an explicit stack so
    arbitrarily deep trees do not hit the recursion limit.

    Parameters
    ----------
    nodes : Sequence[AccountNode]
        Root accounts.
    query : str
        Search text. Empty means no filtering.

    Returns
    -------
    Sequence[AccountNode]
        ``nodes`` itself for an empty query, otherwise a new list of roots
        (empty when nothing matches).
    """
    if not query:
        return nodes

    needle = query.lower()
    roots: list[AccountNode] = []

    # (node, sink, kept) - kept is None until the node's children are queued
    stack: list[tuple[AccountNode, list[AccountNode], list[AccountNode] | None]] = [
        (node, roots, None) for node in reversed(nodes)
    ]
    while stack:
        node, sink, kept = stack.pop()
        if kept is None:
            kept = []
            stack.append((node, sink, kept))
            stack.extend((child, kept, None) for child in reversed(node.children))
            continue
        if kept or matches(node, needle):
            sink.append(replace(node, children=kept))

    return roots
