"""Lookups over the account tree."""

from __future__ import annotations

from collections.abc import Sequence

from coa_engine.models import AccountNode
from coa_engine.tree.flattening import iter_tree


def find_node(nodes: Sequence[AccountNode], account_id: str) -> AccountNode | None:
    """Return the account with ``account_id``, or ``None``."""
    for node, _ in iter_tree(nodes):
        if node.id == account_id:
            return node
    return None


def find_by_code(nodes: Sequence[AccountNode], code: str) -> AccountNode | None:
    for node, _ in iter_tree(nodes):
        if node.code == code:
            return node
    return None


def ancestors_of(nodes: Sequence[AccountNode], account_id: str) -> list[AccountNode]:
    """Ancestors of an account, root first. Empty for roots and unknown ids."""
    # Path stack: path[d] is the current node at depth d
    path: list[AccountNode] = []
    for node, depth in iter_tree(nodes):
        del path[depth:]
        if node.id == account_id:
            return list(path)
        path.append(node)
    return []


def descendant_ids(node: AccountNode) -> set[str]:
    """Ids of every account below ``node`` (excluding ``node``)."""
    return {child.id for child, _ in iter_tree(node.children)}


def parent_candidates(
    nodes: Sequence[AccountNode],
    editing: AccountNode | None = None,
) -> list[AccountNode]:
    """Header accounts that may be chosen as parent, in tree order.

    When editing, the account itself and its whole subtree are left out,
    so the picker never offers a move that would create a cycle.
    """
    excluded: set[str] = set()
    if editing is not None:
        excluded = {editing.id}
        # The snapshot copy may hold the up-to-date subtree
        current = find_node(nodes, editing.id) or editing
        excluded |= descendant_ids(current)
    return [
        node for node, _ in iter_tree(nodes) if node.is_header and node.id not in excluded
    ]


def header_accounts(flat: Sequence[AccountNode]) -> list[AccountNode]:
    """Header accounts from a flat list, order preserved."""
    return [node for node in flat if node.is_header]
